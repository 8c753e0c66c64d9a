"""
Article frontmatter schema, validated for every MDX file.

YAML turns unquoted ``2024-05-01`` values into ``date`` objects; those are
normalised back to ISO strings before validation.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional, Tuple

from pydantic import Field, field_validator

from .shared import ARTICLE_SLUG_PATTERN, LocalizedKeywords, LocalizedString, Number, Record

FRONT_PAGE_SLUG = "_front"


class ArticleFrontmatter(Record):
    title: LocalizedString
    slug: str = Field(pattern=ARTICLE_SLUG_PATTERN)
    author: Optional[str] = None
    keywords: LocalizedKeywords
    created: str
    updated: Optional[str] = None
    difficulty: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    estimated_read_time: Optional[Number] = Field(default=None, alias="estimatedReadTime")
    prerequisites: Optional[Tuple[str, ...]] = None
    tutors: Optional[Tuple[str, ...]] = None

    @field_validator("created", "updated", mode="before")
    @classmethod
    def normalise_date(cls, value: Any) -> Any:
        if isinstance(value, date):
            return value.isoformat()
        return value

    @property
    def is_front_page(self) -> bool:
        return self.slug == FRONT_PAGE_SLUG
