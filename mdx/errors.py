"""Compilation errors for MDX article bodies."""

from __future__ import annotations

from typing import List, Optional


class CompileError(ValueError):
    """Raised when an MDX file cannot be parsed. Always fatal to the build."""

    def __init__(
        self,
        reason: str,
        file_path: str = "<unknown>",
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.reason = reason
        self.file_path = file_path
        self.line = line
        self.column = column
        location = f"{file_path}:{line}" if line is not None else file_path
        super().__init__(f"{location}: {reason}")

    def format(self, source: Optional[str] = None) -> str:
        """Pretty-print the error, with surrounding source lines when given.

        Args:
            source: Full text the line numbers refer to

        Returns:
            Multi-line report
        """
        lines: List[str] = []
        lines.append("=" * 56)
        lines.append("MDX COMPILATION ERROR")
        lines.append("=" * 56)
        lines.append(f"File:   {self.file_path}")
        lines.append(f"Line:   {self.line or '?'}, Column: {self.column or '?'}")
        lines.append(f"Reason: {self.reason}")

        if source is not None and self.line:
            source_lines = source.split("\n")
            start = max(0, self.line - 4)
            end = min(len(source_lines), self.line + 2)
            lines.append("")
            lines.append("Source context:")
            for index in range(start, end):
                number = index + 1
                marker = " >>>" if number == self.line else "    "
                lines.append(f"{marker} {number:>4} | {source_lines[index]}")

        lines.append("=" * 56)
        return "\n".join(lines)
