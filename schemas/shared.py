"""
Shared schema pieces used by every content record.

Localized fields must carry all three locales. Fallback only happens when a
value is read (see ``locales``), never when it is written.
"""

from __future__ import annotations

from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict

LOCALES: Tuple[str, ...] = ("ru", "en", "cz")

# Articles also allow underscore so that "_front" pages are valid slugs
ARTICLE_SLUG_PATTERN = r"^[a-z0-9_-]+$"
SLUG_PATTERN = r"^[a-z0-9-]+$"

Number = Union[int, float]


class Record(BaseModel):
    """Base for validated content records: immutable, unknown keys dropped."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class LocalizedString(BaseModel):
    """A string present in every supported locale."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ru: str
    en: str
    cz: str

    def __getitem__(self, locale: str) -> str:
        return getattr(self, locale)


class LocalizedKeywords(BaseModel):
    """Keyword lists present in every supported locale."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ru: Tuple[str, ...]
    en: Tuple[str, ...]
    cz: Tuple[str, ...]

    def __getitem__(self, locale: str) -> Tuple[str, ...]:
        return getattr(self, locale)
