"""
Record validation for content files.

The pydantic models in this package are the data shapes; this module is the
validation contract. It returns a typed record or reports every field
violation in the record at once, so one build surfaces the full defect list
for a file.

Example:
    >>> record = validate_record(raw, "teacher", source="teachers/ivanov/config.json")
    >>> record.ratings.count
    12
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Type

from pydantic import BaseModel, ValidationError

from .article import ArticleFrontmatter
from .subject import SubjectConfig
from .system import SystemArticleEntry, SystemConfig
from .teacher import TeacherConfig

RECORD_MODELS: Dict[str, Type[BaseModel]] = {
    "subject": SubjectConfig,
    "teacher": TeacherConfig,
    "article": ArticleFrontmatter,
    "system": SystemConfig,
    "system-article": SystemArticleEntry,
}


@dataclass(frozen=True)
class FieldViolation:
    """One failed constraint on one field of a record."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field or '<root>'}: {self.message}"


class SchemaViolation(ValueError):
    """Raised when a content record does not match its schema."""

    def __init__(self, source: str, kind: str, violations: List[FieldViolation]):
        self.source = source
        self.kind = kind
        self.violations = tuple(violations)
        details = "; ".join(str(v) for v in self.violations)
        super().__init__(f"Invalid {kind} record in {source}: {details}")


def _field_path(loc: Tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _violations_from(exc: ValidationError) -> List[FieldViolation]:
    return [
        FieldViolation(field=_field_path(error["loc"]), message=error["msg"])
        for error in exc.errors()
    ]


def _model_for(kind: str) -> Type[BaseModel]:
    try:
        return RECORD_MODELS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown record kind '{kind}'. Must be one of: {sorted(RECORD_MODELS)}"
        ) from None


def collect_violations(raw: Any, kind: str) -> List[FieldViolation]:
    """Return every schema violation in ``raw`` (empty list when valid).

    Args:
        raw: Parsed JSON object or frontmatter mapping
        kind: Record kind (subject, teacher, article, system, system-article)

    Returns:
        List of FieldViolation, in the order pydantic reports them
    """
    model = _model_for(kind)
    try:
        model.model_validate(raw)
    except ValidationError as exc:
        return _violations_from(exc)
    return []


def validate_record(raw: Any, kind: str, source: str = "<unknown>") -> Any:
    """Validate a raw record and return the typed model.

    Args:
        raw: Parsed JSON object or frontmatter mapping
        kind: Record kind (subject, teacher, article, system, system-article)
        source: File path reported in errors

    Returns:
        Validated, immutable record model

    Raises:
        SchemaViolation: If any constraint fails; lists all of them
    """
    model = _model_for(kind)
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise SchemaViolation(source, kind, _violations_from(exc)) from exc
