from datetime import date

import pytest

from schemas import (
    ArticleFrontmatter,
    SchemaViolation,
    SubjectConfig,
    collect_violations,
    validate_record,
)

from conftest import keywords, loc, subject_config, system_entry, teacher_config


def fields(raw, kind):
    return {violation.field for violation in collect_violations(raw, kind)}


def test_valid_subject_returns_typed_record():
    raw = subject_config(
        "linear-algebra",
        teachers=["ivanov"],
        categories=[{"slug": "basics", "name": loc("Basics"), "articles": ["vectors", "matrices"]}],
    )
    subject = validate_record(raw, "subject", source="subjects/la/config.json")

    assert isinstance(subject, SubjectConfig)
    assert subject.name.cz == "Linear-Algebra (cz)"
    assert subject.categories[0].articles == ("vectors", "matrices")
    assert collect_violations(raw, "subject") == []


def test_every_violation_is_reported_with_field_path():
    raw = subject_config("Bad Slug", name={"ru": "Р", "en": "E"})

    with pytest.raises(SchemaViolation) as exc_info:
        validate_record(raw, "subject", source="subjects/bad/config.json")

    error = exc_info.value
    assert error.source == "subjects/bad/config.json"
    assert {v.field for v in error.violations} == {"slug", "name.cz"}
    assert "subjects/bad/config.json" in str(error)


def test_localized_fields_reject_unknown_locales():
    raw = subject_config("math", name={**loc("Math"), "de": "Mathe"})
    assert fields(raw, "subject") == {"name.de"}


def test_article_slug_allows_underscore_but_entity_slug_does_not():
    assert "slug" in fields(subject_config("my_subject"), "subject")

    frontmatter = {"title": loc("Front"), "slug": "_front", "keywords": keywords(), "created": "2024-01-01"}
    article = validate_record(frontmatter, "article")
    assert article.is_front_page


@pytest.mark.parametrize(
    "ratings, field",
    [
        ({"overall": 5.5}, "ratings.overall"),
        ({"clarity": -0.1}, "ratings.clarity"),
        ({"count": -1}, "ratings.count"),
        ({"count": 1.5}, "ratings.count"),
    ],
)
def test_teacher_rating_bounds(ratings, field):
    raw = teacher_config("ivanov")
    raw["ratings"] = {**raw["ratings"], **ratings}
    assert fields(raw, "teacher") == {field}


def test_teacher_rating_bounds_are_inclusive():
    raw = teacher_config("ivanov")
    raw["ratings"] = {"overall": 0, "clarity": 5, "difficulty": 5, "usefulness": 0, "count": 0}
    assert collect_violations(raw, "teacher") == []


def test_teacher_contacts_and_reviews():
    raw = teacher_config(
        "ivanov",
        contacts={"email": "not-an-email", "website": "ftp://example.org"},
        reviews=[{"text": loc("Great"), "rating": 0, "date": "2024-05-01"}],
    )
    assert fields(raw, "teacher") == {"contacts.email", "contacts.website", "reviews.0.rating"}

    raw = teacher_config(
        "ivanov",
        contacts={"email": "ivanov@example.org", "website": "https://example.org/~ivanov"},
        reviews=[{"text": loc("Great"), "rating": 5, "date": "2024-05-01"}],
    )
    teacher = validate_record(raw, "teacher")
    assert teacher.reviews[0].anonymous is True
    assert teacher.contacts.website == "https://example.org/~ivanov"


def test_system_routes_must_be_absolute():
    assert fields(system_entry("about", route="about"), "system-article") == {"route"}
    assert fields({"articles": [system_entry("about", route="about")]}, "system") == {"articles.0.route"}

    entry = validate_record(system_entry("about"), "system-article")
    assert entry.pinned is False
    assert entry.sort_order == 0


def test_frontmatter_dates_are_normalised():
    frontmatter = validate_record(
        {
            "title": loc("Limits"),
            "slug": "limits",
            "keywords": keywords("limit"),
            "created": date(2024, 9, 1),
            "estimatedReadTime": 7,
        },
        "article",
    )
    assert isinstance(frontmatter, ArticleFrontmatter)
    assert frontmatter.created == "2024-09-01"
    assert frontmatter.estimated_read_time == 7


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError, match="Unknown record kind"):
        validate_record({}, "course")
