"""Teacher ``config.json`` schema."""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import urlparse

from pydantic import EmailStr, Field, field_validator

from .shared import SLUG_PATTERN, LocalizedKeywords, LocalizedString, Record


class TeacherRatings(Record):
    overall: float = Field(ge=0, le=5)
    clarity: float = Field(ge=0, le=5)
    difficulty: float = Field(ge=0, le=5)
    usefulness: float = Field(ge=0, le=5)
    count: int = Field(ge=0)


class TeacherContacts(Record):
    email: Optional[EmailStr] = None
    office: Optional[LocalizedString] = None
    website: Optional[str] = None

    @field_validator("website")
    @classmethod
    def check_website(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Website must be an absolute http(s) URL.")
        return value


class TeacherReview(Record):
    text: LocalizedString
    rating: float = Field(ge=1, le=5)
    date: str
    anonymous: bool = True


class TeacherSection(Record):
    slug: str = Field(pattern=SLUG_PATTERN)
    name: LocalizedString
    articles: Tuple[str, ...]


class TeacherConfig(Record):
    slug: str = Field(pattern=SLUG_PATTERN)
    name: LocalizedString
    description: LocalizedString
    photo: Optional[str] = None
    subjects: Tuple[str, ...]
    ratings: TeacherRatings
    keywords: LocalizedKeywords
    contacts: Optional[TeacherContacts] = None
    reviews: Optional[Tuple[TeacherReview, ...]] = None
    sections: Optional[Tuple[TeacherSection, ...]] = None
