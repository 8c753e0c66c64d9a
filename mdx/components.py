"""
JSX component checks for MDX article bodies.

Articles may embed a fixed set of interactive components (``<Quiz>``,
``<Callout type="info">`` ...). This module:
1. Masks fenced and inline code so examples are never treated as markup
2. Checks that component tags are balanced (fatal ``CompileError`` if not)
3. Checks each tag against its contract and reports diagnostics

Contract diagnostics never stop a build; they are returned to the caller,
which logs them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import CompileError


@dataclass(frozen=True)
class PropContract:
    required: bool = False
    type: str = "string"
    enum: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ComponentContract:
    props: Dict[str, PropContract] = field(default_factory=dict)
    parent: Optional[str] = None
    children_required: bool = False


COMPONENT_REGISTRY: Dict[str, ComponentContract] = {
    "Quiz": ComponentContract(children_required=True),
    "Question": ComponentContract(
        props={"text": PropContract(required=True)},
        parent="Quiz",
        children_required=True,
    ),
    "Option": ComponentContract(
        props={
            "value": PropContract(required=True),
            "correct": PropContract(type="boolean"),
        },
        parent="Question",
    ),
    "Callout": ComponentContract(
        props={"type": PropContract(enum=("info", "warning", "error"))},
        children_required=True,
    ),
    "Tabs": ComponentContract(children_required=True),
    "Tab": ComponentContract(
        props={"label": PropContract(required=True)},
        parent="Tabs",
        children_required=True,
    ),
    "Collapse": ComponentContract(
        props={"title": PropContract(required=True)},
        children_required=True,
    ),
    "CodePlayground": ComponentContract(
        props={"language": PropContract(), "code": PropContract()},
    ),
    "Figure": ComponentContract(
        props={
            "src": PropContract(required=True),
            "alt": PropContract(required=True),
            "caption": PropContract(),
            "width": PropContract(type="number"),
            "height": PropContract(type="number"),
        },
    ),
    "MathBlock": ComponentContract(children_required=True),
}

FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
INLINE_CODE_RE = re.compile(r"(`+)(?!`).*?(?<!`)\1(?!`)")
TAG_RE = re.compile(
    r"<(?P<closing>/)?(?P<name>[A-Z][A-Za-z0-9]*)"
    r"(?P<attrs>(?:\s[^<>]*?)?)"
    r"\s*(?P<self_closing>/)?>"
)
ATTR_RE = re.compile(
    r"([A-Za-z_][\w-]*)(?:\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|\{([^{}]*)\}))?"
)


@dataclass(frozen=True)
class ComponentDiagnostic:
    """One component contract finding."""
    message: str
    severity: str  # "error" or "warning"
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        where = f" (line {self.line})" if self.line else ""
        return f"{self.message}{where}"


@dataclass
class _Tag:
    name: str
    closing: bool
    self_closing: bool
    attrs: Dict[str, object]
    line: int
    column: int
    start: int
    end: int


def mask_code(text: str, file_path: str = "<unknown>", line_offset: int = 0) -> str:
    """Blank out fenced and inline code, keeping offsets and newlines intact.

    Raises:
        CompileError: If a fenced code block is never closed
    """
    out: List[str] = []
    fence: Optional[str] = None
    fence_line = 0

    for number, line in enumerate(text.split("\n"), start=1):
        match = FENCE_RE.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                fence_line = number
                out.append(" " * len(line))
            else:
                out.append(line)
            continue

        # Inside a fence: only a run of the same char, at least as long, closes it
        stripped = line.strip()
        if match and stripped == stripped[0] * len(stripped) and stripped[0] == fence[0] \
                and len(stripped) >= len(fence):
            fence = None
        out.append(" " * len(line))

    if fence is not None:
        raise CompileError(
            f"Unterminated fenced code block (opened with {fence})",
            file_path=file_path,
            line=fence_line + line_offset,
            column=1,
        )

    masked = "\n".join(out)
    return INLINE_CODE_RE.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), masked)


def _parse_attrs(raw: str) -> Dict[str, object]:
    attrs: Dict[str, object] = {}
    for match in ATTR_RE.finditer(raw):
        name, double, single, expression = match.groups()
        if double is not None:
            attrs[name] = double
        elif single is not None:
            attrs[name] = single
        elif expression is not None:
            attrs[name] = _expression_value(expression.strip())
        else:
            # Bare attribute, e.g. <Option correct>
            attrs[name] = True
    return attrs


def _expression_value(expression: str) -> object:
    if expression in ("true", "false"):
        return expression == "true"
    try:
        return int(expression)
    except ValueError:
        pass
    try:
        return float(expression)
    except ValueError:
        pass
    if len(expression) >= 2 and expression[0] == expression[-1] and expression[0] in "\"'`":
        return expression[1:-1]
    return expression


def _scan_tags(masked: str, line_offset: int) -> List[_Tag]:
    tags = []
    for match in TAG_RE.finditer(masked):
        line = masked.count("\n", 0, match.start()) + 1
        line_start = masked.rfind("\n", 0, match.start()) + 1
        tags.append(_Tag(
            name=match.group("name"),
            closing=bool(match.group("closing")),
            self_closing=bool(match.group("self_closing")),
            attrs=_parse_attrs(match.group("attrs") or ""),
            line=line + line_offset,
            column=match.start() - line_start + 1,
            start=match.start(),
            end=match.end(),
        ))
    return tags


def _matches_type(value: object, expected: str) -> bool:
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, str)


def _check_contract(tag: _Tag, parent: Optional[str]) -> List[ComponentDiagnostic]:
    diagnostics: List[ComponentDiagnostic] = []

    def report(message: str, severity: str = "error") -> None:
        diagnostics.append(ComponentDiagnostic(message, severity, tag.line, tag.column))

    contract = COMPONENT_REGISTRY.get(tag.name)
    if contract is None:
        known = ", ".join(COMPONENT_REGISTRY)
        report(f"Unknown component <{tag.name}>. Known components: {known}")
        return diagnostics

    for prop_name, prop in contract.props.items():
        if prop.required and prop_name not in tag.attrs:
            report(f'<{tag.name}> is missing required prop "{prop_name}"')

    for prop_name, prop in contract.props.items():
        value = tag.attrs.get(prop_name)
        if prop.enum and isinstance(value, str) and value not in prop.enum:
            allowed = ", ".join(prop.enum)
            report(f'<{tag.name}> prop "{prop_name}" has invalid value "{value}". Allowed: {allowed}')
        elif prop_name in tag.attrs and not _matches_type(value, prop.type):
            report(f'<{tag.name}> prop "{prop_name}" should be a {prop.type}', severity="warning")

    for prop_name in tag.attrs:
        if prop_name not in contract.props:
            report(f'<{tag.name}> has unknown prop "{prop_name}"', severity="warning")

    if contract.parent and parent != contract.parent:
        found = f"<{parent}>" if parent else "root"
        report(f"<{tag.name}> must be a child of <{contract.parent}>, but found inside {found}")

    if contract.children_required and tag.self_closing:
        report(f"<{tag.name}> requires children", severity="warning")

    return diagnostics


def check_components(
    body: str, file_path: str = "<unknown>", line_offset: int = 0
) -> List[ComponentDiagnostic]:
    """Check component tags in an MDX body.

    Args:
        body: MDX body (frontmatter already removed)
        file_path: Path used in error reports
        line_offset: Lines preceding the body in the source file

    Returns:
        Component contract diagnostics, in document order

    Raises:
        CompileError: On unterminated code fences or unbalanced component tags
    """
    masked = mask_code(body, file_path, line_offset)
    diagnostics: List[ComponentDiagnostic] = []
    stack: List[_Tag] = []

    for tag in _scan_tags(masked, line_offset):
        if tag.closing:
            if not stack:
                raise CompileError(
                    f"Unexpected closing tag </{tag.name}>",
                    file_path=file_path, line=tag.line, column=tag.column,
                )
            opened = stack.pop()
            if opened.name != tag.name:
                raise CompileError(
                    f"Expected closing tag </{opened.name}> (opened on line {opened.line}) "
                    f"but found </{tag.name}>",
                    file_path=file_path, line=tag.line, column=tag.column,
                )
            contract = COMPONENT_REGISTRY.get(opened.name)
            if contract and contract.children_required and not masked[opened.end:tag.start].strip():
                diagnostics.append(ComponentDiagnostic(
                    f"<{opened.name}> requires children", "warning", opened.line, opened.column,
                ))
            continue

        parent = stack[-1].name if stack else None
        diagnostics.extend(_check_contract(tag, parent))
        if not tag.self_closing:
            stack.append(tag)

    if stack:
        opened = stack[-1]
        raise CompileError(
            f"Unclosed component <{opened.name}>",
            file_path=file_path, line=opened.line, column=opened.column,
        )

    return diagnostics
