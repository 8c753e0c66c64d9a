"""
Manifest builder.

Turns a content tree into an immutable ``Manifest`` in one pass:

1. Load and validate every record (``loader.ContentLoader``)
2. Register slugs per kind and routes in the shared route namespace
3. Compile every article body (optionally on a thread pool)
4. Resolve subject / teacher / article references
5. Order pinned system articles and freeze the result

Every problem found along the way is collected; if any exist the build
raises a single ``ContentIntegrityError`` instead of returning a partial
manifest.

Usage:
    from manifest import build_manifest

    manifest = build_manifest(Path("content"))
    print(manifest.build_hash)
"""

from __future__ import annotations

import hashlib
import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from mdx import CompiledDocument, CompileError, compile_document
from schemas import LOCALES, SubjectConfig, SystemArticleEntry, TeacherConfig

from .errors import ContentIntegrityError, IntegrityIssue
from .loader import SYSTEM_OWNER, ArticleSource, ContentTree, LoadedRecord, load_content_tree
from .model import (
    SUBJECT,
    SYSTEM_ARTICLE,
    TEACHER,
    Article,
    ArticleGroup,
    Manifest,
    Subject,
    SystemArticle,
    Teacher,
    canonical_json,
    frozen_mapping,
)

logger = logging.getLogger(__name__)

RESERVED_SLUGS = frozenset({"api", "_next", "not-found", "search"})
BUILD_HASH_LENGTH = 12

ArticleKey = Tuple[str, str, str]  # (owner kind, owner slug, article slug)
Compiler = Callable[[str, str, int], CompiledDocument]


class ManifestBuilder:
    """Builds a ``Manifest`` from a content root.

    Args:
        content_root: Directory holding ``subjects/``, ``teachers/`` and
            ``system/``
        workers: Threads used to compile article bodies (1 = sequential)
        compiler: Body compiler, ``compile_document`` by default
    """

    def __init__(self, content_root: Path, workers: int = 1, compiler: Compiler = compile_document):
        self.content_root = Path(content_root)
        self.workers = max(1, workers)
        self.compiler = compiler
        self.issues: List[IntegrityIssue] = []
        self.warnings: List[str] = []

    def build(self) -> Manifest:
        """Run the full build.

        Returns:
            Frozen Manifest

        Raises:
            ContentIntegrityError: With every problem found in the tree
        """
        tree = load_content_tree(self.content_root)
        self.issues = list(tree.issues)
        self.warnings = []

        subjects = self._register_kind(tree.subjects, SUBJECT)
        teachers = self._register_kind(tree.teachers, TEACHER)
        system_entries = self._register_system_entries(tree)
        route_map = self._register_routes(subjects, teachers, system_entries, tree)

        sources = self._group_sources(tree.articles)
        compiled = self._compile_all(tree.articles)

        self._check_subjects(subjects, teachers, sources)
        self._check_teachers(subjects, teachers, sources)
        self._check_article_references(teachers, sources)

        if self.issues:
            error = ContentIntegrityError(self.issues)
            logger.error("Manifest build failed with %d error(s)", len(error.issues))
            raise error

        manifest = self._assemble(subjects, teachers, system_entries, route_map, sources, compiled)
        logger.info(
            "Built manifest %s: %d subject(s), %d teacher(s), %d system article(s), %d warning(s)",
            manifest.build_hash, len(manifest.subjects), len(manifest.teachers),
            len(manifest.system_articles), len(manifest.warnings),
        )
        return manifest

    # ========================================================================
    # Registration
    # ========================================================================

    def _issue(self, source: str, message: str) -> None:
        self.issues.append(IntegrityIssue(source, message))

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def _register_kind(self, records: Iterable[LoadedRecord], kind: str) -> Dict[str, LoadedRecord]:
        registered: Dict[str, LoadedRecord] = {}
        for record in records:
            slug = record.config.slug
            if slug in registered:
                self._issue(
                    record.source,
                    f'Duplicate {kind} slug "{slug}" (already defined in {registered[slug].source})',
                )
                continue
            registered[slug] = record
        return registered

    def _register_system_entries(self, tree: ContentTree) -> Dict[str, SystemArticleEntry]:
        entries: Dict[str, SystemArticleEntry] = {}
        if tree.system is None:
            return entries
        for entry in tree.system.config.articles:
            if entry.slug in entries:
                self._issue(tree.system.source, f'Duplicate system article slug "{entry.slug}"')
                continue
            entries[entry.slug] = entry
        return entries

    def _register_routes(
        self,
        subjects: Dict[str, LoadedRecord],
        teachers: Dict[str, LoadedRecord],
        system_entries: Dict[str, SystemArticleEntry],
        tree: ContentTree,
    ) -> Dict[str, str]:
        """Register every top-level slug in the shared ``/<slug>`` namespace."""
        system_source = tree.system.source if tree.system is not None else "system/config.json"
        candidates: List[Tuple[str, str, str]] = []
        candidates += [(slug, SUBJECT, record.source) for slug, record in subjects.items()]
        candidates += [(slug, TEACHER, record.source) for slug, record in teachers.items()]
        candidates += [(slug, SYSTEM_ARTICLE, system_source) for slug in system_entries]

        route_map: Dict[str, str] = {}
        owners: Dict[str, str] = {}
        for slug, kind, source in candidates:
            if slug in RESERVED_SLUGS:
                self._issue(source, f'Slug "{slug}" is reserved and cannot be used as a route')
                continue
            if slug in route_map:
                self._issue(
                    source,
                    f'Route collision: "/{slug}" is used by {route_map[slug]} ({owners[slug]}) and {kind}',
                )
                continue
            route_map[slug] = kind
            owners[slug] = source
        return dict(sorted(route_map.items()))

    def _group_sources(self, articles: Iterable[ArticleSource]) -> Dict[ArticleKey, Dict[str, ArticleSource]]:
        grouped: Dict[ArticleKey, Dict[str, ArticleSource]] = defaultdict(dict)
        for source in articles:
            key = (source.owner_kind, source.owner_slug, source.slug)
            existing = grouped[key].get(source.locale)
            if existing is not None:
                self._issue(
                    source.source,
                    f'Duplicate article slug "{source.slug}" in locale {source.locale} '
                    f"(already defined in {existing.source})",
                )
                continue
            grouped[key][source.locale] = source
        return grouped

    # ========================================================================
    # Compilation
    # ========================================================================

    def _compile_one(self, source: ArticleSource) -> Tuple[ArticleSource, Optional[CompiledDocument], Optional[CompileError]]:
        try:
            return source, self.compiler(source.body, source.source, source.line_offset), None
        except CompileError as exc:
            return source, None, exc

    def _compile_all(self, articles: Iterable[ArticleSource]) -> Dict[str, CompiledDocument]:
        """Compile every body; results are keyed by source path."""
        ordered = sorted(articles, key=lambda a: a.source)
        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                results = list(executor.map(self._compile_one, ordered))
        else:
            results = [self._compile_one(source) for source in ordered]

        compiled: Dict[str, CompiledDocument] = {}
        for source, document, error in results:
            if error is not None:
                # pad so line numbers match the source file
                logger.error("\n%s", error.format("\n" * source.line_offset + source.body))
                location = f" (line {error.line})" if error.line else ""
                self._issue(source.source, f"Compile error: {error.reason}{location}")
                continue
            for diagnostic in document.diagnostics:
                level = logging.ERROR if diagnostic.severity == "error" else logging.WARNING
                logger.log(level, "%s: %s", source.source, diagnostic)
            compiled[source.source] = document

        logger.info("Compiled %d of %d article body(ies)", len(compiled), len(ordered))
        return compiled

    # ========================================================================
    # Reference checks
    # ========================================================================

    @staticmethod
    def _owned_slugs(sources: Dict[ArticleKey, Dict[str, ArticleSource]], owner_kind: str, owner_slug: str) -> Set[str]:
        return {slug for kind, owner, slug in sources if kind == owner_kind and owner == owner_slug}

    def _check_subjects(self, subjects, teachers, sources) -> None:
        for slug, record in subjects.items():
            config: SubjectConfig = record.config
            for teacher_slug in config.teachers:
                if teacher_slug not in teachers:
                    self._issue(record.source, f'Subject "{slug}" references unknown teacher "{teacher_slug}"')
                elif slug not in teachers[teacher_slug].config.subjects:
                    self._warn(
                        f'Subject "{slug}" lists teacher "{teacher_slug}" '
                        f'but the teacher does not list the subject'
                    )

            owned = self._owned_slugs(sources, SUBJECT, slug)
            seen: Dict[str, str] = {}
            for category in config.categories:
                for article_slug in category.articles:
                    if article_slug not in owned:
                        self._issue(
                            record.source,
                            f'Category "{category.slug}" of subject "{slug}" references unknown article "{article_slug}"',
                        )
                    elif article_slug in seen:
                        self._issue(
                            record.source,
                            f'Article "{article_slug}" is listed in categories "{seen[article_slug]}" '
                            f'and "{category.slug}" of subject "{slug}"',
                        )
                    else:
                        seen[article_slug] = category.slug

    def _check_teachers(self, subjects, teachers, sources) -> None:
        for slug, record in teachers.items():
            config: TeacherConfig = record.config
            for subject_slug in config.subjects:
                if subject_slug not in subjects:
                    self._issue(record.source, f'Teacher "{slug}" references unknown subject "{subject_slug}"')
                elif slug not in subjects[subject_slug].config.teachers:
                    self._warn(
                        f'Teacher "{slug}" lists subject "{subject_slug}" '
                        f'but the subject does not list the teacher'
                    )

            owned = self._owned_slugs(sources, TEACHER, slug)
            for section in config.sections or ():
                for article_slug in section.articles:
                    if article_slug not in owned:
                        self._issue(
                            record.source,
                            f'Section "{section.slug}" of teacher "{slug}" references unknown article "{article_slug}"',
                        )

    def _check_article_references(self, teachers, sources) -> None:
        all_slugs = {slug for kind, _, slug in sources if kind != SYSTEM_OWNER}
        for key, by_locale in sources.items():
            if key[0] == SYSTEM_OWNER:
                continue
            for source in by_locale.values():
                frontmatter = source.frontmatter
                if frontmatter.author and frontmatter.author not in teachers:
                    self._issue(source.source, f'Unknown author "{frontmatter.author}"')
                for tutor in frontmatter.tutors or ():
                    if tutor not in teachers:
                        self._issue(source.source, f'Unknown tutor "{tutor}"')
                for prerequisite in frontmatter.prerequisites or ():
                    if prerequisite not in all_slugs:
                        self._issue(source.source, f'Unknown prerequisite article "{prerequisite}"')

    # ========================================================================
    # Assembly
    # ========================================================================

    @staticmethod
    def _article(key: ArticleKey, by_locale: Dict[str, ArticleSource], compiled, group: Optional[str]) -> Article:
        owner_kind, owner_slug, slug = key
        locales = [locale for locale in LOCALES if locale in by_locale]
        return Article(
            slug=slug,
            owner_kind=owner_kind,
            owner_slug=owner_slug,
            frontmatter=by_locale[locales[0]].frontmatter,
            documents=frozen_mapping({locale: compiled[by_locale[locale].source] for locale in locales}),
            sources=frozen_mapping({locale: by_locale[locale].source for locale in locales}),
            group=group,
        )

    def _owner_articles(self, owner_kind: str, owner_slug: str, groups, sources, compiled) -> Dict[str, Article]:
        membership = {article: group.slug for group in groups for article in group.articles}
        articles: Dict[str, Article] = {}
        for key in sorted(k for k in sources if k[0] == owner_kind and k[1] == owner_slug):
            articles[key[2]] = self._article(key, sources[key], compiled, membership.get(key[2]))
        return articles

    @staticmethod
    def _groups(groups, articles: Dict[str, Article]) -> Tuple[ArticleGroup, ...]:
        return tuple(
            ArticleGroup(
                slug=group.slug,
                name=group.name,
                articles=tuple(articles[slug] for slug in group.articles),
            )
            for group in groups
        )

    def _assemble(self, subjects, teachers, system_entries, route_map, sources, compiled) -> Manifest:
        subject_map: Dict[str, Subject] = {}
        for slug, record in subjects.items():
            config: SubjectConfig = record.config
            articles = self._owner_articles(SUBJECT, slug, config.categories, sources, compiled)
            subject_map[slug] = Subject(
                config=config,
                teachers=tuple(teachers[t].config for t in config.teachers),
                categories=self._groups(config.categories, articles),
                articles=frozen_mapping(articles),
            )

        teacher_map: Dict[str, Teacher] = {}
        for slug, record in teachers.items():
            config: TeacherConfig = record.config
            sections = config.sections or ()
            articles = self._owner_articles(TEACHER, slug, sections, sources, compiled)
            teacher_map[slug] = Teacher(
                config=config,
                subjects=tuple(subjects[s].config for s in config.subjects),
                sections=self._groups(sections, articles),
                articles=frozen_mapping(articles),
            )

        system_map: Dict[str, SystemArticle] = {}
        for slug, entry in system_entries.items():
            by_locale = sources.get((SYSTEM_OWNER, SYSTEM_OWNER, slug), {})
            locales = [locale for locale in LOCALES if locale in by_locale]
            system_map[slug] = SystemArticle(
                entry=entry,
                documents=frozen_mapping({locale: compiled[by_locale[locale].source] for locale in locales}),
                sources=frozen_mapping({locale: by_locale[locale].source for locale in locales}),
            )

        manifest = Manifest(
            subjects=frozen_mapping(subject_map),
            teachers=frozen_mapping(teacher_map),
            system_articles=frozen_mapping(system_map),
            pinned_system_articles=pinned_order(system_map.values()),
            route_map=frozen_mapping(route_map),
            warnings=tuple(self.warnings),
        )
        return replace(manifest, build_hash=compute_build_hash(manifest))


def pinned_order(articles: Iterable[SystemArticle]) -> Tuple[SystemArticle, ...]:
    """Pinned system articles by ``order`` (missing counts as 0), then slug."""
    pinned = [article for article in articles if article.entry.pinned]
    return tuple(sorted(pinned, key=lambda a: (a.entry.sort_order, a.slug)))


def compute_build_hash(manifest: Manifest) -> str:
    """SHA-256 of the manifest structure and every compiled body."""
    digest = hashlib.sha256()
    digest.update(canonical_json(manifest.to_dict(include_hash=False)).encode("utf-8"))
    for article in manifest.iter_articles():
        for locale, document in article.documents.items():
            digest.update(f"{article.sources[locale]}\0".encode("utf-8"))
            digest.update(document.html.encode("utf-8"))
    for article in manifest.system_articles.values():
        for locale, document in article.documents.items():
            digest.update(f"{article.sources[locale]}\0".encode("utf-8"))
            digest.update(document.html.encode("utf-8"))
    return digest.hexdigest()[:BUILD_HASH_LENGTH]


def build_manifest(content_root: Path, workers: int = 1) -> Manifest:
    """Build the manifest for ``content_root``.

    Raises:
        ContentIntegrityError: If the tree has any integrity problem
    """
    return ManifestBuilder(content_root, workers=workers).build()
