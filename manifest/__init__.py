"""
Manifest package for the Wikipefia content build.

This package provides:
- Loading and validating the content tree from disk
- Cross-reference checks collected into one ContentIntegrityError
- The immutable Manifest snapshot consumed by the search index builder
- Writing the manifest, route map and compiled bodies to the build directory

Usage:
    from manifest import build_manifest, write_build_output

    manifest = build_manifest(Path("content"), workers=4)
    write_build_output(manifest, Path(".content-build"))
"""

from .builder import RESERVED_SLUGS, ManifestBuilder, build_manifest, compute_build_hash, pinned_order
from .errors import ContentIntegrityError, IntegrityIssue
from .loader import ArticleSource, ContentLoader, ContentTree, LoadedRecord, load_content_tree
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
)
from .output import write_build_output

__all__ = [
    "RESERVED_SLUGS",
    "SUBJECT",
    "SYSTEM_ARTICLE",
    "TEACHER",
    "Article",
    "ArticleGroup",
    "ArticleSource",
    "ContentIntegrityError",
    "ContentLoader",
    "ContentTree",
    "IntegrityIssue",
    "LoadedRecord",
    "Manifest",
    "ManifestBuilder",
    "Subject",
    "SystemArticle",
    "Teacher",
    "build_manifest",
    "canonical_json",
    "compute_build_hash",
    "load_content_tree",
    "pinned_order",
    "write_build_output",
]
