"""
Search index package for the Wikipefia content build.

This package provides:
- Per-locale search indexes flattened from a built manifest
- A deterministic content hash over every serialized index
- Publishing the indexes under hashed names into the static asset root

Usage:
    from search_index import build_indexes, write_indexes, publish

    build = build_indexes(manifest)
    write_indexes(build, Path(".content-build"))
    publish(Path(".content-build"), Path("public/search"))
"""

from .indexer import (
    INDEX_FORMAT_VERSION,
    LocaleStats,
    SearchBuild,
    SearchDocument,
    SearchIndex,
    SearchMeta,
    build_indexes,
    content_hash,
    locale_documents,
    serialize_index,
    write_indexes,
)
from .publisher import IndexHashMismatch, PublishResult, PublishSkipped, atomic_write, prune_stale, publish

__all__ = [
    "INDEX_FORMAT_VERSION",
    "IndexHashMismatch",
    "LocaleStats",
    "PublishResult",
    "PublishSkipped",
    "SearchBuild",
    "SearchDocument",
    "SearchIndex",
    "SearchMeta",
    "atomic_write",
    "build_indexes",
    "content_hash",
    "locale_documents",
    "prune_stale",
    "publish",
    "serialize_index",
    "write_indexes",
]
