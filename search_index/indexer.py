"""
Search index builder.

Flattens a built ``Manifest`` into one search index per locale plus a meta
record. Output files:
    search-index-<locale>.json  {"version", "locale", "documents": [...]}
    search-meta.json            {"hash", "version", "locales": {...}}

Serialization is canonical (sorted keys, fixed separators, UTF-8), so the
same manifest always produces byte-identical files and the same hash.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from locales import localized, localized_keywords
from manifest import Article, Manifest, SystemArticle
from mdx import excerpt
from schemas import LOCALES

logger = logging.getLogger(__name__)

INDEX_FORMAT_VERSION = 1
HASH_LENGTH = 12
DEFAULT_EXCERPT_LENGTH = 160

META_FILENAME = "search-meta.json"
INDEX_FILENAME = "search-index-{locale}.json"


class SearchDocument(BaseModel):
    """One (entity, locale) entry of a search index."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    type: str
    slug: str
    parent_slug: Optional[str] = Field(default=None, alias="parentSlug")
    title: str
    description: str
    keywords: List[str]
    excerpt: Optional[str] = None
    route: str
    extra: Optional[Dict[str, Any]] = None


class SearchIndex(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: int = INDEX_FORMAT_VERSION
    locale: str
    documents: List[SearchDocument]


class LocaleStats(BaseModel):
    documents: int
    bytes: int


class SearchMeta(BaseModel):
    hash: str
    version: int = INDEX_FORMAT_VERSION
    locales: Dict[str, LocaleStats]


@dataclass(frozen=True)
class SearchBuild:
    """Indexes, their serialized bytes and the meta record of one build."""
    indexes: Mapping[str, SearchIndex]
    serialized: Mapping[str, bytes]
    meta: SearchMeta


def canonical_bytes(data: Any) -> bytes:
    text = json.dumps(data, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return (text + "\n").encode("utf-8")


def serialize_index(index: SearchIndex) -> bytes:
    """Canonical JSON bytes for one locale index."""
    return canonical_bytes(index.model_dump(mode="json", by_alias=True, exclude_none=True))


def serialize_meta(meta: SearchMeta) -> bytes:
    return canonical_bytes(meta.model_dump(mode="json"))


def content_hash(serialized: Mapping[str, bytes], length: int = HASH_LENGTH) -> str:
    """SHA-256 over every serialized index, in canonical locale order.

    Args:
        serialized: Locale -> index bytes
        length: Hex characters to keep

    Returns:
        Truncated hex digest
    """
    digest = hashlib.sha256()
    ordered = [locale for locale in LOCALES if locale in serialized]
    ordered += sorted(locale for locale in serialized if locale not in LOCALES)
    for locale in ordered:
        digest.update(locale.encode("utf-8") + b"\0")
        digest.update(serialized[locale])
    return digest.hexdigest()[:length]


# ============================================================================
# Document builders
# ============================================================================

def _compact(values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    values = {key: value for key, value in values.items() if value is not None}
    return values or None


def _article_document(article: Article, owner_name: str, locale: str, excerpt_length: int) -> SearchDocument:
    kind = f"{article.owner_kind}-article"
    title = localized(article.frontmatter.title, locale)
    return SearchDocument(
        id=f"{kind}:{article.owner_slug}/{article.slug}",
        type=kind,
        slug=article.slug,
        parent_slug=article.owner_slug,
        title=title,
        description=f"{owner_name} — {title}",
        keywords=localized_keywords(article.frontmatter.keywords, locale),
        excerpt=excerpt(article.document(locale).tree, excerpt_length),
        route=article.route,
        extra=_compact({"difficulty": article.frontmatter.difficulty}),
    )


def _system_document(article: SystemArticle, locale: str, excerpt_length: int) -> SearchDocument:
    entry = article.entry
    document = article.document(locale)
    return SearchDocument(
        id=f"system:{entry.slug}",
        type="system-article",
        slug=entry.slug,
        title=localized(entry.name, locale),
        description=localized(entry.description, locale) if entry.description else "",
        keywords=localized_keywords(entry.keywords, locale),
        excerpt=excerpt(document.tree, excerpt_length) if document is not None else None,
        route=entry.route,
    )


def locale_documents(manifest: Manifest, locale: str, excerpt_length: int = DEFAULT_EXCERPT_LENGTH) -> List[SearchDocument]:
    """All search documents of one locale, in manifest order."""
    documents: List[SearchDocument] = []

    for subject in manifest.subjects.values():
        config = subject.config
        metadata = config.metadata
        name = localized(config.name, locale)
        documents.append(SearchDocument(
            id=f"subject:{config.slug}",
            type="subject",
            slug=config.slug,
            title=name,
            description=localized(config.description, locale),
            keywords=localized_keywords(config.keywords, locale),
            route=subject.route,
            extra=_compact({
                "difficulty": metadata.difficulty if metadata else None,
                "semester": metadata.semester if metadata else None,
            }),
        ))
        for article in subject.articles.values():
            if not article.is_front_page:
                documents.append(_article_document(article, name, locale, excerpt_length))

    for teacher in manifest.teachers.values():
        config = teacher.config
        name = localized(config.name, locale)
        documents.append(SearchDocument(
            id=f"teacher:{config.slug}",
            type="teacher",
            slug=config.slug,
            title=name,
            description=localized(config.description, locale),
            keywords=localized_keywords(config.keywords, locale),
            route=teacher.route,
            extra={"teacherRating": config.ratings.overall},
        ))
        for article in teacher.articles.values():
            if not article.is_front_page:
                documents.append(_article_document(article, name, locale, excerpt_length))

    for article in manifest.system_articles.values():
        documents.append(_system_document(article, locale, excerpt_length))

    return documents


def build_indexes(manifest: Manifest, excerpt_length: int = DEFAULT_EXCERPT_LENGTH, hash_length: int = HASH_LENGTH) -> SearchBuild:
    """Build every locale index and the meta record for ``manifest``.

    Args:
        manifest: Built manifest
        excerpt_length: Maximum article excerpt length before the ellipsis
        hash_length: Hex characters kept from the content hash

    Returns:
        SearchBuild
    """
    indexes: Dict[str, SearchIndex] = {}
    serialized: Dict[str, bytes] = {}
    for locale in manifest.locales:
        index = SearchIndex(locale=locale, documents=locale_documents(manifest, locale, excerpt_length))
        indexes[locale] = index
        serialized[locale] = serialize_index(index)

    meta = SearchMeta(
        hash=content_hash(serialized, hash_length),
        locales={
            locale: LocaleStats(documents=len(indexes[locale].documents), bytes=len(serialized[locale]))
            for locale in indexes
        },
    )
    logger.info(
        "Built %d search index(es), hash %s (%s)",
        len(indexes), meta.hash,
        ", ".join(f"{locale}: {stats.documents}" for locale, stats in meta.locales.items()),
    )
    return SearchBuild(indexes=indexes, serialized=serialized, meta=meta)


def write_indexes(build: SearchBuild, build_dir: Path) -> Path:
    """Write ``search-index-<locale>.json`` files and ``search-meta.json``.

    The previous meta is removed before any index is touched and the new one
    is written last, so an interrupted run leaves nothing publishable.

    Returns:
        Path of the meta file
    """
    build_dir = Path(build_dir)
    build_dir.mkdir(parents=True, exist_ok=True)
    meta_path = build_dir / META_FILENAME
    if meta_path.exists():
        meta_path.unlink()
    for locale, data in build.serialized.items():
        (build_dir / INDEX_FILENAME.format(locale=locale)).write_bytes(data)
    meta_path.write_bytes(serialize_meta(build.meta))
    logger.info("Wrote search indexes to %s", build_dir)
    return meta_path
