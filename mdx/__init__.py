"""
MDX document compiler for Wikipefia articles.

This module provides functionality for:
- Splitting YAML frontmatter from article bodies
- Compiling bodies to HTML and an element tree
- Extracting a flat table of contents in the same pass
- Checking embedded JSX components against their contracts

Usage:
    from mdx import compile_document, split_frontmatter

    data, body, offset = split_frontmatter(text, "subjects/math/articles/en/limits.mdx")
    document = compile_document(body, "subjects/math/articles/en/limits.mdx", offset)
    for entry in document.toc:
        print(entry.depth, entry.text, entry.id)
"""

from .compiler import (
    CompiledDocument,
    TocEntry,
    compile_document,
    excerpt,
    extract_toc,
    flatten_text,
)
from .components import COMPONENT_REGISTRY, ComponentDiagnostic, check_components
from .errors import CompileError
from .frontmatter import split_frontmatter

__all__ = [
    "COMPONENT_REGISTRY",
    "CompileError",
    "CompiledDocument",
    "ComponentDiagnostic",
    "TocEntry",
    "check_components",
    "compile_document",
    "excerpt",
    "extract_toc",
    "flatten_text",
    "split_frontmatter",
]
