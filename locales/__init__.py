"""
Locale resolution for localized content fields.

Readers never fail on a missing locale: they walk a fixed fallback chain
(requested, then en, then ru) and settle on the first value present.
"""

from .resolver import (
    DEFAULT_LOCALE,
    FALLBACK_LOCALES,
    fallback_chain,
    localized,
    localized_keywords,
    resolve,
)

__all__ = [
    "DEFAULT_LOCALE",
    "FALLBACK_LOCALES",
    "fallback_chain",
    "localized",
    "localized_keywords",
    "resolve",
]
