"""Integrity errors collected while building the manifest."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True, order=True)
class IntegrityIssue:
    """One problem in the content tree, attributed to a source file."""
    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


class ContentIntegrityError(RuntimeError):
    """Raised when the content tree cannot produce a complete manifest.

    Carries every issue found in the build (schema violations, compile
    errors, dangling references, duplicate slugs), sorted by source path so
    the report is stable from run to run.
    """

    def __init__(self, issues: Iterable[IntegrityIssue]):
        self.issues = tuple(sorted(issues))
        super().__init__(
            f"Content integrity check failed with {len(self.issues)} error(s):\n"
            + self.format_report()
        )

    def format_report(self) -> str:
        lines: List[str] = []
        for index, issue in enumerate(self.issues, start=1):
            lines.append(f"[{index}] {issue}")
        return "\n".join(lines)

    def mentions(self, text: str) -> bool:
        """True if any issue message or source contains ``text``."""
        return any(text in issue.message or text in issue.source for issue in self.issues)
