"""
YAML frontmatter handling for MDX articles.

Format:
---
title:
  ru: Введение
  en: Introduction
  cz: Úvod
slug: introduction
created: 2024-09-01
---
# Article body
"""

from __future__ import annotations

import re
from typing import Any, Dict, Tuple

import yaml

from .errors import CompileError

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def split_frontmatter(text: str, file_path: str = "<unknown>") -> Tuple[Dict[str, Any], str, int]:
    """Split an MDX file into frontmatter data and body.

    Args:
        text: Full file content
        file_path: Path used in error reports

    Returns:
        Tuple of (frontmatter mapping, body text, number of lines before the body)

    Raises:
        CompileError: If the frontmatter block is not valid YAML
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text, 0

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        raise CompileError(
            f"Invalid frontmatter YAML: {getattr(exc, 'problem', None) or exc}",
            file_path=file_path,
            # +2: opening fence line, then 1-based numbering
            line=mark.line + 2 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
        ) from exc

    body = text[match.end():]
    line_offset = text[:match.end()].count("\n")
    return data if data is not None else {}, body, line_offset
