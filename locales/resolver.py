"""
Locale resolver.

Fallback chains are plain ordered lists so each step can be tested on its
own:

    requested -> en -> ru -> first available
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Sequence, Union

from schemas.shared import LOCALES

DEFAULT_LOCALE = "en"
FALLBACK_LOCALES: Sequence[str] = ("en", "ru")


def fallback_chain(requested: str) -> List[str]:
    """Return the ordered locales to try for ``requested``, without duplicates."""
    chain: List[str] = []
    for locale in (requested, *FALLBACK_LOCALES):
        if locale not in chain:
            chain.append(locale)
    return chain


def resolve(available: Iterable[str], requested: str) -> str:
    """Pick the best locale from ``available`` for ``requested``.

    Args:
        available: Locales that actually have a value
        requested: Locale asked for by the caller

    Returns:
        ``requested`` if available, else ``en``, else ``ru``, else the first
        available locale (canonical order first, then input order)

    Raises:
        ValueError: If ``available`` is empty
    """
    candidates = list(dict.fromkeys(available))
    if not candidates:
        raise ValueError("Cannot resolve a locale from an empty set")

    for locale in fallback_chain(requested):
        if locale in candidates:
            return locale

    for locale in LOCALES:
        if locale in candidates:
            return locale
    return candidates[0]


def _lookup(record: Union[Mapping[str, Any], Any], locale: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(locale)
    return getattr(record, locale, None)


def localized(record: Union[Mapping[str, str], Any], locale: str) -> str:
    """Read a localized string for ``locale``, falling back to en, then ru.

    Works with LocalizedString models and plain ``{"ru": ..., "en": ...}``
    mappings. An empty value falls through to the next locale; it is only
    returned when every locale in the chain is empty.

    Example:
        >>> localized({"ru": "Р", "en": "E", "cz": "C"}, "fr")
        'E'
        >>> localized({"ru": "Р", "en": "E", "cz": ""}, "cz")
        'E'
    """
    empty = None
    for candidate in fallback_chain(locale):
        value = _lookup(record, candidate)
        if value:
            return value
        if value is not None and empty is None:
            empty = value
    if empty is not None:
        return empty
    raise KeyError(f"No value for locale '{locale}' or its fallbacks")


def localized_keywords(record: Union[Mapping[str, Sequence[str]], Any], locale: str) -> List[str]:
    """Read a localized keyword list with the same fallback as ``localized``."""
    empty = None
    for candidate in fallback_chain(locale):
        value = _lookup(record, candidate)
        if value:
            return list(value)
        if value is not None and empty is None:
            empty = value
    if empty is not None:
        return list(empty)
    raise KeyError(f"No keywords for locale '{locale}' or its fallbacks")
