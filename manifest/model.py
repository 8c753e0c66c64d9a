"""
Immutable manifest model.

Entities reference each other through validated config records, never
through each other's resolved wrappers, so the object graph has no cycles:
a ``Subject`` holds ``TeacherConfig`` records and a ``Teacher`` holds
``SubjectConfig`` records. All collections are tuples or read-only mapping
proxies.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from locales import localized, resolve
from mdx import CompiledDocument
from schemas import (
    LOCALES,
    ArticleFrontmatter,
    LocalizedString,
    SubjectConfig,
    SystemArticleEntry,
    TeacherConfig,
)

SUBJECT = "subject"
TEACHER = "teacher"
SYSTEM_ARTICLE = "system-article"

OWNER_DIRS = {SUBJECT: "subjects", TEACHER: "teachers", SYSTEM_ARTICLE: "system"}

def empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


def frozen_mapping(items: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(items))


def canonical_json(data: Any) -> str:
    """Serialize ``data`` deterministically (sorted keys, fixed separators)."""
    return json.dumps(data, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def _dump(record: Any) -> Dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class Article:
    """An article with one compiled body per available locale."""
    slug: str
    owner_kind: str
    owner_slug: str
    frontmatter: ArticleFrontmatter
    documents: Mapping[str, CompiledDocument]
    sources: Mapping[str, str] = field(default_factory=empty_mapping)
    group: Optional[str] = None  # category (subjects) or section (teachers)

    @property
    def locales(self) -> Tuple[str, ...]:
        return tuple(locale for locale in LOCALES if locale in self.documents)

    @property
    def route(self) -> str:
        return f"/{self.owner_slug}/{self.slug}"

    @property
    def is_front_page(self) -> bool:
        return self.frontmatter.is_front_page

    def document(self, locale: str) -> CompiledDocument:
        """Compiled body for ``locale``, or the best fallback available."""
        return self.documents[resolve(self.locales, locale)]

    def output_path(self, prefix: str, extension: str) -> str:
        return f"{prefix}/{OWNER_DIRS[self.owner_kind]}/{self.owner_slug}/{{locale}}/{self.slug}.{extension}"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "frontmatter": _dump(self.frontmatter),
            "locales": list(self.locales),
            "compiledPath": self.output_path("compiled", "html"),
            "tocPath": self.output_path("toc", "json"),
        }
        if self.group is not None:
            data["category" if self.owner_kind == SUBJECT else "section"] = self.group
        return data


@dataclass(frozen=True)
class ArticleGroup:
    """A subject category or a teacher section with its resolved articles."""
    slug: str
    name: LocalizedString
    articles: Tuple[Article, ...]


@dataclass(frozen=True)
class Subject:
    config: SubjectConfig
    teachers: Tuple[TeacherConfig, ...]
    categories: Tuple[ArticleGroup, ...]
    articles: Mapping[str, Article] = field(default_factory=empty_mapping)

    @property
    def slug(self) -> str:
        return self.config.slug

    @property
    def route(self) -> str:
        return f"/{self.slug}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": _dump(self.config),
            "entityType": SUBJECT,
            "resolvedTeachers": [
                {
                    "slug": teacher.slug,
                    "name": _dump(teacher.name),
                    "ratings": _dump(teacher.ratings),
                    **({"photo": teacher.photo} if teacher.photo else {}),
                }
                for teacher in self.teachers
            ],
            "articles": {slug: article.to_dict() for slug, article in self.articles.items()},
        }


@dataclass(frozen=True)
class Teacher:
    config: TeacherConfig
    subjects: Tuple[SubjectConfig, ...]
    sections: Tuple[ArticleGroup, ...]
    articles: Mapping[str, Article] = field(default_factory=empty_mapping)

    @property
    def slug(self) -> str:
        return self.config.slug

    @property
    def route(self) -> str:
        return f"/{self.slug}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": _dump(self.config),
            "entityType": TEACHER,
            "resolvedSubjects": [
                {"slug": subject.slug, "name": _dump(subject.name)}
                for subject in self.subjects
            ],
            "articles": {slug: article.to_dict() for slug, article in self.articles.items()},
        }


@dataclass(frozen=True)
class SystemArticle:
    entry: SystemArticleEntry
    documents: Mapping[str, CompiledDocument] = field(default_factory=empty_mapping)
    sources: Mapping[str, str] = field(default_factory=empty_mapping)

    @property
    def slug(self) -> str:
        return self.entry.slug

    @property
    def route(self) -> str:
        return self.entry.route

    @property
    def locales(self) -> Tuple[str, ...]:
        return tuple(locale for locale in LOCALES if locale in self.documents)

    def document(self, locale: str) -> Optional[CompiledDocument]:
        if not self.documents:
            return None
        return self.documents[resolve(self.locales, locale)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": _dump(self.entry),
            "locales": list(self.locales),
            "compiledPath": f"compiled/system/{{locale}}/{self.slug}.html",
            "tocPath": f"toc/system/{{locale}}/{self.slug}.json",
        }


@dataclass(frozen=True)
class Manifest:
    """Resolved, read-only snapshot of one content build."""
    subjects: Mapping[str, Subject]
    teachers: Mapping[str, Teacher]
    system_articles: Mapping[str, SystemArticle]
    pinned_system_articles: Tuple[SystemArticle, ...]
    route_map: Mapping[str, str]
    warnings: Tuple[str, ...] = ()
    build_hash: str = ""
    locales: Tuple[str, ...] = field(default=LOCALES)

    def _entity(self, kind: str, slug: str) -> Any:
        if kind == SUBJECT:
            return self.subjects[slug].config
        if kind == TEACHER:
            return self.teachers[slug].config
        if kind == SYSTEM_ARTICLE:
            return self.system_articles[slug].entry
        raise ValueError(f"Unknown entity kind '{kind}'")

    def display_name(self, kind: str, slug: str, locale: str) -> str:
        """Localized display name of an entity, with locale fallback."""
        return localized(self._entity(kind, slug).name, locale)

    def display_description(self, kind: str, slug: str, locale: str) -> str:
        """Localized description of an entity ('' when it has none)."""
        description = self._entity(kind, slug).description
        return localized(description, locale) if description is not None else ""

    def iter_articles(self):
        """Yield every subject and teacher article in manifest order."""
        for subject in self.subjects.values():
            yield from subject.articles.values()
        for teacher in self.teachers.values():
            yield from teacher.articles.values()

    def to_dict(self, include_hash: bool = True) -> Dict[str, Any]:
        data = {
            "locales": list(self.locales),
            "routeMap": {slug: {"type": kind} for slug, kind in self.route_map.items()},
            "subjects": {slug: subject.to_dict() for slug, subject in self.subjects.items()},
            "teachers": {slug: teacher.to_dict() for slug, teacher in self.teachers.items()},
            "systemArticles": {
                slug: article.to_dict() for slug, article in self.system_articles.items()
            },
            "pinnedSystemArticles": [article.slug for article in self.pinned_system_articles],
            "warnings": list(self.warnings),
        }
        if include_hash:
            data["buildHash"] = self.build_hash
        return data
