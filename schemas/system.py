"""System ``config.json`` and system article entry schemas."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import Field, field_validator

from .shared import SLUG_PATTERN, LocalizedKeywords, LocalizedString, Number, Record


class SystemArticleEntry(Record):
    slug: str = Field(pattern=SLUG_PATTERN)
    route: str
    name: LocalizedString
    description: Optional[LocalizedString] = None
    keywords: LocalizedKeywords
    pinned: bool = False
    order: Optional[Number] = None

    @field_validator("route")
    @classmethod
    def check_route(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("Route must be absolute (start with '/').")
        return value

    @property
    def sort_order(self) -> Number:
        return 0 if self.order is None else self.order


class SystemConfig(Record):
    articles: Tuple[SystemArticleEntry, ...]
