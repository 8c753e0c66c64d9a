import json

import pytest

from manifest import build_manifest
from search_index import INDEX_FORMAT_VERSION, build_indexes, content_hash, serialize_index, write_indexes

from conftest import loc


@pytest.fixture
def manifest(valid_content):
    return build_manifest(valid_content.root)


def documents_by_id(build, locale):
    return {document.id: document for document in build.indexes[locale].documents}


def test_one_document_per_entity_and_locale(manifest):
    build = build_indexes(manifest)

    assert list(build.indexes) == ["ru", "en", "cz"]
    en = documents_by_id(build, "en")
    assert list(en) == [
        "subject:math",
        "subject-article:math/limits",
        "teacher:ivanov",
        "teacher-article:ivanov/office-hours",
        "system:about",
        "system:faq",
        "system:contacts",
        "system:rules",
    ]
    assert all(document.slug != "_front" for document in build.indexes["ru"].documents)


def test_documents_are_flattened_per_locale(manifest):
    build = build_indexes(manifest)
    ru = documents_by_id(build, "ru")["subject-article:math/limits"]
    cz = documents_by_id(build, "cz")["subject-article:math/limits"]

    assert ru.title == "Limits (ru)"
    assert ru.description == "Math (ru) — Limits (ru)"
    assert ru.parent_slug == "math"
    assert ru.route == "/math/limits"
    assert ru.keywords == ["limits"]
    assert ru.excerpt == "Предел описывает значение функции."
    assert ru.extra == {"difficulty": "beginner"}
    # no cz body: the excerpt falls back to the English one
    assert cz.excerpt == "A limit describes the value a function approaches. Formal text."

    subject = documents_by_id(build, "en")["subject:math"]
    assert subject.extra == {"difficulty": "medium", "semester": 1}
    teacher = documents_by_id(build, "en")["teacher:ivanov"]
    assert teacher.extra == {"teacherRating": 4.5}
    about = documents_by_id(build, "cz")["system:about"]
    assert about.route == "/about"
    assert about.excerpt == "Wikipefia is a student wiki."
    assert documents_by_id(build, "en")["system:faq"].excerpt is None


def test_excerpt_length_is_tunable(manifest):
    build = build_indexes(manifest, excerpt_length=10)
    excerpt = documents_by_id(build, "en")["subject-article:math/limits"].excerpt
    assert excerpt == "A limit…"


def test_serialized_index_is_canonical(manifest):
    build = build_indexes(manifest)
    data = build.serialized["en"]

    assert data.endswith(b"\n")
    assert data == serialize_index(build.indexes["en"])
    parsed = json.loads(data)
    assert parsed["version"] == INDEX_FORMAT_VERSION
    assert parsed["locale"] == "en"
    assert parsed["documents"][1]["parentSlug"] == "math"
    assert "parentSlug" not in parsed["documents"][0]
    assert list(parsed) == sorted(parsed)


def test_meta_records_hash_and_sizes(manifest):
    build = build_indexes(manifest)

    assert build.meta.hash == content_hash(build.serialized)
    assert len(build.meta.hash) == 12
    assert build.meta.locales["en"].documents == 8
    assert build.meta.locales["en"].bytes == len(build.serialized["en"])


def test_hash_is_idempotent(valid_content):
    first = build_indexes(build_manifest(valid_content.root))
    second = build_indexes(build_manifest(valid_content.root))

    assert first.meta.hash == second.meta.hash
    assert dict(first.serialized) == dict(second.serialized)


def test_hash_changes_with_any_localized_field(valid_content):
    before = build_indexes(build_manifest(valid_content.root))
    valid_content.subject(
        "math",
        name={**loc("Math"), "cz": "Matematika"},
        teachers=["ivanov"],
        categories=[{"slug": "basics", "name": loc("Basics"), "articles": ["limits"]}],
        metadata={"semester": 1, "difficulty": "medium"},
    )
    after = build_indexes(build_manifest(valid_content.root))

    assert after.meta.hash != before.meta.hash
    assert after.serialized["en"] == before.serialized["en"]
    assert after.serialized["cz"] != before.serialized["cz"]


def test_content_hash_ignores_mapping_order():
    assert content_hash({"en": b"a", "ru": b"b"}) == content_hash({"ru": b"b", "en": b"a"})
    assert content_hash({"en": b"a", "ru": b"b"}) != content_hash({"en": b"b", "ru": b"a"})


def test_write_indexes(manifest, tmp_path):
    build = build_indexes(manifest)
    meta_path = write_indexes(build, tmp_path / "build")

    meta = json.loads(meta_path.read_text(encoding="utf-8"))
    assert meta["hash"] == build.meta.hash
    assert meta["locales"]["cz"]["documents"] == 8
    for locale in ("ru", "en", "cz"):
        assert (tmp_path / "build" / f"search-index-{locale}.json").read_bytes() == build.serialized[locale]
