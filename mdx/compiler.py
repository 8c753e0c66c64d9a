"""
Document compiler for MDX article bodies.

Compiles one article body into:
- ``html``: rendered body
- ``tree``: the element tree the HTML was serialized from
- ``toc``: flat, ordered table of contents (id, text, depth)
- ``diagnostics``: component contract findings

Rules:
1. Heading ids are assigned by the Python-Markdown ``toc`` extension
2. The ToC is harvested from the same pass, after ids are assigned
3. ToC entries stay flat in document order; nesting is left to consumers
"""

from __future__ import annotations

import copy
import re
import xml.etree.ElementTree as etree
from dataclasses import dataclass
from html import unescape
from typing import Dict, List, Optional, Tuple

import markdown
from markdown.extensions import Extension
from markdown.extensions.toc import slugify_unicode
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE

from .components import ComponentDiagnostic, check_components
from .errors import CompileError

HEADING_RE = re.compile(r"^h([1-6])$")
TAG_RE = re.compile(r"<[^>]+>")
EXCERPT_SKIP_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6", "pre", "table", "hr"}
ELLIPSIS = "…"

MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "attr_list"]


@dataclass(frozen=True)
class TocEntry:
    """One heading of a compiled document."""
    id: str
    text: str
    depth: int

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "text": self.text, "depth": self.depth}


@dataclass(frozen=True)
class CompiledDocument:
    """Result of compiling one MDX body."""
    html: str
    tree: etree.Element
    toc: Tuple[TocEntry, ...]
    diagnostics: Tuple[ComponentDiagnostic, ...] = ()


def _clean_text(text: str) -> str:
    return " ".join(HTML_PLACEHOLDER_RE.sub("", text).split())


def flatten_text(element: etree.Element) -> str:
    """Concatenate all descendant text of ``element``, ignoring markup."""
    return _clean_text("".join(element.itertext()))


def extract_toc(root: etree.Element) -> List[TocEntry]:
    """Walk ``root`` in document order and collect h1-h6 headings.

    Args:
        root: Any element tree (compiled body or hand-built)

    Returns:
        ToC entries; headings without an ``id`` attribute get an empty id

    Example:
        >>> root = etree.Element("div")
        >>> etree.SubElement(root, "h1").text = "Intro"
        >>> extract_toc(root)
        [TocEntry(id='', text='Intro', depth=1)]
    """
    entries = []
    for element in root.iter():
        match = HEADING_RE.match(str(element.tag))
        if match:
            entries.append(TocEntry(
                id=element.get("id", ""),
                text=flatten_text(element),
                depth=int(match.group(1)),
            ))
    return entries


class TocCollector(Treeprocessor):
    """Harvest the ToC and a snapshot of the tree during conversion."""

    def __init__(self, md: markdown.Markdown):
        super().__init__(md)
        self.toc: List[TocEntry] = []
        self.tree: Optional[etree.Element] = None

    def _restore(self, match: re.Match) -> str:
        blocks = self.md.htmlStash.rawHtmlBlocks
        index = int(match.group(1))
        if index >= len(blocks):
            return match.group(0)
        raw = blocks[index]
        if not isinstance(raw, str):
            raw = "".join(raw.itertext())
        return unescape(TAG_RE.sub("", raw))

    def restore_text(self, text: str) -> str:
        """Put stashed entities and inline HTML back as plain text."""
        return HTML_PLACEHOLDER_RE.sub(self._restore, text)

    def run(self, root: etree.Element) -> None:
        # only the snapshot is rewritten; the live tree still serializes through the stash
        tree = copy.deepcopy(root)
        for element in tree.iter():
            if element.text:
                element.text = self.restore_text(element.text)
            if element.tail:
                element.tail = self.restore_text(element.tail)
        self.toc = extract_toc(tree)
        self.tree = tree


class TocCollectorExtension(Extension):
    """Register ``TocCollector`` after heading ids and unescaping are done."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        self.collector = TocCollector(md)
        # "toc" assigns ids at priority 5, "unescape" runs at 0
        md.treeprocessors.register(self.collector, "toc_collector", -5)


def compile_document(source: str, file_path: str = "<unknown>", line_offset: int = 0) -> CompiledDocument:
    """Compile an MDX body into HTML, an element tree and its ToC.

    A fresh Markdown instance is used per call, so bodies can be compiled
    from several threads at once.

    Args:
        source: MDX body without frontmatter
        file_path: Path used in error reports
        line_offset: Lines preceding the body in the source file

    Returns:
        CompiledDocument

    Raises:
        CompileError: If the body is malformed (unterminated code fence,
            unbalanced component tags)
    """
    diagnostics = check_components(source, file_path, line_offset)

    collector_ext = TocCollectorExtension()
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS + ["toc", collector_ext],
        extension_configs={"toc": {"slugify": slugify_unicode}},
    )
    try:
        html = md.convert(source)
    except Exception as exc:
        raise CompileError(f"Markdown conversion failed: {exc}", file_path=file_path) from exc

    collector = collector_ext.collector
    tree = collector.tree if collector.tree is not None else etree.Element("div")
    return CompiledDocument(
        html=html,
        tree=tree,
        toc=tuple(collector.toc),
        diagnostics=tuple(diagnostics),
    )


def excerpt(tree: etree.Element, max_length: int) -> str:
    """Derive a short plain-text excerpt from the leading body text.

    Args:
        tree: Compiled element tree
        max_length: Maximum characters before the ellipsis

    Returns:
        Leading text, truncated at a word boundary with ``…`` when longer
        than ``max_length``
    """
    pieces: List[str] = []
    length = 0
    for block in tree:
        if block.tag in EXCERPT_SKIP_TAGS:
            continue
        text = flatten_text(block)
        if not text:
            continue
        pieces.append(text)
        length += len(text) + 1
        if length > max_length:
            break

    text = " ".join(pieces)
    if len(text) <= max_length:
        return text

    cut = text[:max_length]
    if " " in cut and not text[max_length].isspace():
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip() + ELLIPSIS
