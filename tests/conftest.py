"""Shared fixtures: small content trees written into ``tmp_path``."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
import yaml

from schemas import LOCALES


def loc(text: str) -> Dict[str, str]:
    """Localized string with distinct ru/cz values derived from ``text``."""
    return {"ru": f"{text} (ru)", "en": text, "cz": f"{text} (cz)"}


def keywords(*words: str) -> Dict[str, list]:
    return {locale: list(words) for locale in LOCALES}


def subject_config(slug: str, **overrides: Any) -> Dict[str, Any]:
    config = {
        "slug": slug,
        "name": loc(slug.title()),
        "description": loc(f"About {slug}"),
        "teachers": [],
        "keywords": keywords(slug),
        "categories": [],
    }
    config.update(overrides)
    return config


def teacher_config(slug: str, **overrides: Any) -> Dict[str, Any]:
    config = {
        "slug": slug,
        "name": loc(slug.title()),
        "description": loc(f"Teacher {slug}"),
        "subjects": [],
        "ratings": {"overall": 4.5, "clarity": 4, "difficulty": 3, "usefulness": 5, "count": 12},
        "keywords": keywords(slug),
    }
    config.update(overrides)
    return config


class ContentFactory:
    """Writes content files under a content root."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def write_json(self, relative: str, data: Any) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    def subject(self, slug: str, directory: Optional[str] = None, **overrides: Any) -> Path:
        return self.write_json(f"subjects/{directory or slug}/config.json", subject_config(slug, **overrides))

    def teacher(self, slug: str, directory: Optional[str] = None, **overrides: Any) -> Path:
        return self.write_json(f"teachers/{directory or slug}/config.json", teacher_config(slug, **overrides))

    def article(
        self,
        owner_dir: str,
        locale: str,
        slug: str,
        body: str = "# Heading\n\nSome body text.\n",
        filename: Optional[str] = None,
        **frontmatter: Any,
    ) -> Path:
        data = {
            "title": loc(slug.replace("-", " ").title()),
            "slug": slug,
            "keywords": keywords(slug),
            "created": "2024-09-01",
        }
        data.update(frontmatter)
        text = "---\n" + yaml.safe_dump(data, allow_unicode=True, sort_keys=False) + "---\n" + body
        path = self.root / owner_dir / "articles" / locale / f"{filename or slug}.mdx"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def system(self, articles: list, bodies: Optional[Dict[str, str]] = None) -> Path:
        for key, body in (bodies or {}).items():
            locale, slug = key.split("/")
            path = self.root / "system" / "articles" / locale / f"{slug}.mdx"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(body, encoding="utf-8")
        return self.write_json("system/config.json", {"articles": articles})


def system_entry(slug: str, **overrides: Any) -> Dict[str, Any]:
    entry = {"slug": slug, "route": f"/{slug}", "name": loc(slug.title()), "keywords": keywords(slug)}
    entry.update(overrides)
    return entry


@pytest.fixture
def content(tmp_path) -> ContentFactory:
    return ContentFactory(tmp_path / "content")


@pytest.fixture
def valid_content(content) -> ContentFactory:
    """One subject, one teacher, three articles and four system entries."""
    content.subject(
        "math",
        teachers=["ivanov"],
        categories=[{"slug": "basics", "name": loc("Basics"), "articles": ["limits"]}],
        metadata={"semester": 1, "difficulty": "medium"},
    )
    content.article(
        "subjects/math", "en", "limits",
        body="# Limits\n\nA limit describes the value a function approaches.\n\n## Definition {#definition}\n\nFormal text.\n",
        author="ivanov",
        difficulty="beginner",
    )
    content.article(
        "subjects/math", "ru", "limits",
        body="# Пределы\n\nПредел описывает значение функции.\n",
        author="ivanov",
        difficulty="beginner",
    )
    content.article("subjects/math", "en", "_front", body="Welcome to math.\n")

    content.teacher(
        "ivanov",
        subjects=["math"],
        sections=[{"slug": "notes", "name": loc("Notes"), "articles": ["office-hours"]}],
    )
    content.article(
        "teachers/ivanov", "en", "office-hours",
        body="# Office hours\n\nTuesdays at noon.\n",
        prerequisites=["limits"],
    )

    content.system(
        [
            system_entry("about", pinned=True, order=2, description=loc("About the portal")),
            system_entry("faq", pinned=True, order=1),
            system_entry("contacts", pinned=True),
            system_entry("rules"),
        ],
        bodies={"en/about": "# About\n\nWikipefia is a student wiki.\n"},
    )
    return content
