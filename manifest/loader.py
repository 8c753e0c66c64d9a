"""
Content tree loader.

File structure:
    content/
        subjects/<dir>/config.json
        subjects/<dir>/articles/<locale>/<slug>.mdx
        teachers/<dir>/config.json
        teachers/<dir>/articles/<locale>/<slug>.mdx
        system/config.json
        system/articles/<locale>/<slug>.mdx

Every record is validated on load. Problems are collected as
``IntegrityIssue`` values instead of raised, so one run reports the whole
tree. Directories and files are visited in sorted order.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from mdx import CompileError, split_frontmatter
from schemas import (
    FRONT_PAGE_SLUG,
    LOCALES,
    ArticleFrontmatter,
    SchemaViolation,
    SystemConfig,
    validate_record,
)

from .errors import IntegrityIssue

logger = logging.getLogger(__name__)

OWNER_KINDS = (("subjects", "subject"), ("teachers", "teacher"))
SYSTEM_OWNER = "system"


@dataclass(frozen=True)
class LoadedRecord:
    """A validated config together with where it came from."""
    config: Any
    source: str
    directory: Path


@dataclass(frozen=True)
class ArticleSource:
    """One MDX file: an article body in one locale."""
    owner_kind: str  # subject, teacher or system
    owner_slug: str
    locale: str
    slug: str
    source: str
    body: str
    line_offset: int
    frontmatter: Optional[ArticleFrontmatter] = None


@dataclass
class ContentTree:
    """Everything read from disk, before any cross-reference is checked."""
    root: Path
    subjects: List[LoadedRecord] = field(default_factory=list)
    teachers: List[LoadedRecord] = field(default_factory=list)
    system: Optional[LoadedRecord] = None
    articles: List[ArticleSource] = field(default_factory=list)
    issues: List[IntegrityIssue] = field(default_factory=list)


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _list_dirs(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_dir())


class ContentLoader:
    """Reads and validates every record under a content root."""

    def __init__(self, content_root: Path):
        self.root = Path(content_root)
        self.tree = ContentTree(root=self.root)

    def load(self) -> ContentTree:
        """Load the whole tree.

        Returns:
            ContentTree with validated records and any issues found
        """
        for owner_dir, kind in OWNER_KINDS:
            loaded = self.tree.subjects if kind == "subject" else self.tree.teachers
            for directory in _list_dirs(self.root / owner_dir):
                record = self._load_config(directory / "config.json", kind)
                if record is not None:
                    loaded.append(record)
                    self._load_articles(directory, kind, record.config.slug)

        system_config = self.root / "system" / "config.json"
        if system_config.exists():
            self.tree.system = self._load_config(system_config, "system")
            if self.tree.system is not None:
                self._load_system_articles(self.tree.system)
        else:
            logger.info("No system config found, skipping system articles")

        logger.info(
            "Loaded %d subject(s), %d teacher(s), %d article file(s)",
            len(self.tree.subjects), len(self.tree.teachers), len(self.tree.articles),
        )
        return self.tree

    def _issue(self, path: Path, message: str) -> None:
        self.tree.issues.append(IntegrityIssue(_relative(path, self.root), message))

    def _schema_issues(self, path: Path, exc: SchemaViolation) -> None:
        for violation in exc.violations:
            self._issue(path, f"Schema violation at {violation}")

    def _load_config(self, path: Path, kind: str) -> Optional[LoadedRecord]:
        if not path.exists():
            self._issue(path.parent, f"Missing config.json for {kind}")
            return None

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            self._issue(path, f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})")
            return None

        source = _relative(path, self.root)
        try:
            config = validate_record(raw, kind, source=source)
        except SchemaViolation as exc:
            self._schema_issues(path, exc)
            return None
        return LoadedRecord(config=config, source=source, directory=path.parent)

    def _load_articles(self, owner_dir: Path, owner_kind: str, owner_slug: str) -> None:
        articles_dir = owner_dir / "articles"
        for locale in LOCALES:
            locale_dir = articles_dir / locale
            if not locale_dir.is_dir():
                continue
            for path in sorted(locale_dir.glob("*.mdx")):
                if path.is_file():
                    self._load_article(path, owner_kind, owner_slug, locale)

    def _load_article(self, path: Path, owner_kind: str, owner_slug: str, locale: str) -> None:
        source = _relative(path, self.root)
        text = path.read_text(encoding="utf-8")
        try:
            data, body, line_offset = split_frontmatter(text, source)
        except CompileError as exc:
            self._issue(path, f"Compile error: {exc.reason} (line {exc.line or '?'})")
            return

        try:
            frontmatter = validate_record(data, "article", source=source)
        except SchemaViolation as exc:
            self._schema_issues(path, exc)
            return

        if frontmatter.slug != path.stem and path.stem != FRONT_PAGE_SLUG:
            self._issue(
                path,
                f'Frontmatter slug "{frontmatter.slug}" does not match filename "{path.stem}"',
            )
            return

        self.tree.articles.append(ArticleSource(
            owner_kind=owner_kind,
            owner_slug=owner_slug,
            locale=locale,
            slug=frontmatter.slug,
            source=source,
            body=body,
            line_offset=line_offset,
            frontmatter=frontmatter,
        ))

    def _load_system_articles(self, system: LoadedRecord) -> None:
        config: SystemConfig = system.config
        for entry in config.articles:
            for locale in LOCALES:
                path = system.directory / "articles" / locale / f"{entry.slug}.mdx"
                if not path.is_file():
                    continue
                source = _relative(path, self.root)
                try:
                    _, body, line_offset = split_frontmatter(path.read_text(encoding="utf-8"), source)
                except CompileError as exc:
                    self._issue(path, f"Compile error: {exc.reason} (line {exc.line or '?'})")
                    continue
                self.tree.articles.append(ArticleSource(
                    owner_kind=SYSTEM_OWNER,
                    owner_slug=SYSTEM_OWNER,
                    locale=locale,
                    slug=entry.slug,
                    source=source,
                    body=body,
                    line_offset=line_offset,
                ))


def load_content_tree(content_root: Path) -> ContentTree:
    """Convenience wrapper around ``ContentLoader(content_root).load()``."""
    return ContentLoader(content_root).load()

