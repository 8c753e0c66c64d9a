import pytest

from locales import fallback_chain, localized, localized_keywords, resolve
from schemas import LocalizedString


@pytest.mark.parametrize(
    "available, requested, expected",
    [
        ({"en", "ru"}, "cz", "en"),
        ({"ru"}, "cz", "ru"),
        ({"cz"}, "cz", "cz"),
        ({"ru", "en", "cz"}, "ru", "ru"),
        ({"cz", "ru"}, "en", "ru"),
        (["cz"], "fr", "cz"),
        (["de", "fr"], "cz", "de"),
    ],
)
def test_resolve(available, requested, expected):
    assert resolve(available, requested) == expected


def test_resolve_rejects_empty_set():
    with pytest.raises(ValueError):
        resolve(set(), "en")


def test_fallback_chain_has_no_duplicates():
    assert fallback_chain("cz") == ["cz", "en", "ru"]
    assert fallback_chain("en") == ["en", "ru"]
    assert fallback_chain("ru") == ["ru", "en"]


def test_localized_falls_back_to_english():
    assert localized({"ru": "Р", "en": "E", "cz": "C"}, "fr") == "E"
    assert localized({"ru": "Р", "en": "E", "cz": "C"}, "cz") == "C"


def test_localized_falls_back_to_russian_without_english():
    assert localized({"ru": "Р", "cz": "C"}, "fr") == "Р"


def test_localized_reads_models():
    record = LocalizedString(ru="Р", en="E", cz="C")
    assert localized(record, "ru") == "Р"
    assert localized(record, "de") == "E"


def test_localized_keywords():
    record = {"ru": ("предел",), "en": ("limit", "calculus"), "cz": ("limita",)}
    assert localized_keywords(record, "en") == ["limit", "calculus"]
    assert localized_keywords(record, "fr") == ["limit", "calculus"]


def test_empty_values_fall_through_to_the_next_locale():
    assert localized({"ru": "Р", "en": "E", "cz": ""}, "cz") == "E"
    assert localized({"ru": "Р", "en": "", "cz": ""}, "cz") == "Р"
    assert localized(LocalizedString(ru="Р", en="E", cz=""), "cz") == "E"
    assert localized_keywords({"ru": ["предел"], "en": [], "cz": []}, "cz") == ["предел"]


def test_all_empty_values_return_empty():
    assert localized({"ru": "", "en": "", "cz": ""}, "cz") == ""
    assert localized_keywords({"ru": [], "en": [], "cz": []}, "en") == []


def test_localized_raises_when_nothing_matches():
    with pytest.raises(KeyError):
        localized({"cz": "C"}, "fr")
