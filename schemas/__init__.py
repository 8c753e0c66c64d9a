"""
Schema package for Wikipefia content records.

This package provides:
- Pydantic record shapes for subjects, teachers, articles and system entries
- Localized string / keyword records covering every supported locale
- A validation contract that reports all field violations of a record

Usage:
    from schemas import validate_record, SchemaViolation

    subject = validate_record(raw_json, "subject", source="subjects/math/config.json")
"""

from .article import FRONT_PAGE_SLUG, ArticleFrontmatter
from .shared import (
    ARTICLE_SLUG_PATTERN,
    LOCALES,
    SLUG_PATTERN,
    LocalizedKeywords,
    LocalizedString,
)
from .subject import SubjectCategory, SubjectConfig, SubjectMetadata
from .system import SystemArticleEntry, SystemConfig
from .teacher import (
    TeacherConfig,
    TeacherContacts,
    TeacherRatings,
    TeacherReview,
    TeacherSection,
)
from .validator import FieldViolation, SchemaViolation, collect_violations, validate_record

__all__ = [
    "ARTICLE_SLUG_PATTERN",
    "FRONT_PAGE_SLUG",
    "LOCALES",
    "SLUG_PATTERN",
    "ArticleFrontmatter",
    "FieldViolation",
    "LocalizedKeywords",
    "LocalizedString",
    "SchemaViolation",
    "SubjectCategory",
    "SubjectConfig",
    "SubjectMetadata",
    "SystemArticleEntry",
    "SystemConfig",
    "TeacherConfig",
    "TeacherContacts",
    "TeacherRatings",
    "TeacherReview",
    "TeacherSection",
    "collect_violations",
    "validate_record",
]
