"""Subject ``config.json`` schema."""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import Field

from .shared import SLUG_PATTERN, LocalizedKeywords, LocalizedString, Number, Record


class SubjectCategory(Record):
    slug: str = Field(pattern=SLUG_PATTERN)
    name: LocalizedString
    articles: Tuple[str, ...]


class SubjectMetadata(Record):
    semester: Optional[Number] = None
    credits: Optional[Number] = None
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None
    department: Optional[LocalizedString] = None


class SubjectConfig(Record):
    slug: str = Field(pattern=SLUG_PATTERN)
    name: LocalizedString
    description: LocalizedString
    teachers: Tuple[str, ...]
    keywords: LocalizedKeywords
    categories: Tuple[SubjectCategory, ...]
    metadata: Optional[SubjectMetadata] = None
