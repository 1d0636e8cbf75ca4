"""Output formatters for JUnitGuard diagnostics."""
from __future__ import annotations

import json
from typing import Protocol

from junitguard.constants import OutputFormat, Severity
from junitguard.diagnostics import DiagnosticCollection
from junitguard.types import JUnitGuardConfig


class Formatter(Protocol):
    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: JUnitGuardConfig,
    ) -> str: ...


class TextFormatter:
    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: JUnitGuardConfig,
    ) -> str:
        lines: list[str] = []

        for diag in diagnostics.sorted:
            severity_str: str = diag.severity.value.upper()
            line: str = (
                f"{diag.file}:{diag.location.line}:{diag.location.column}: "
                f"{severity_str} [{diag.code}] {diag.message}"
            )
            lines.append(line)

            for note in diag.secondary:
                lines.append(
                    f"    note: {note.location.line}:{note.location.column}: "
                    f"{note.message}"
                )

            if config.show_source and diag.source_line is not None:
                lines.append(f"    {diag.source_line}")
                caret_pos: int = max(0, diag.location.column - 1)
                lines.append(f"    {' ' * caret_pos}^")
                lines.append("")

        return "\n".join(lines)


class JsonFormatter:
    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: JUnitGuardConfig,
    ) -> str:
        items: list[dict[str, object]] = []

        for diag in diagnostics.sorted:
            item: dict[str, object] = {
                "file": str(diag.file),
                "line": diag.location.line,
                "column": diag.location.column,
                "end_line": diag.location.end_line,
                "end_column": diag.location.end_column,
                "code": diag.code,
                "severity": diag.severity.value,
                "message": diag.message,
                "secondary": [
                    {
                        "line": note.location.line,
                        "column": note.location.column,
                        "message": note.message,
                    }
                    for note in diag.secondary
                ],
            }
            if config.show_source:
                item["source_line"] = diag.source_line
            items.append(item)

        return json.dumps(items, indent=2)


class GithubFormatter:
    """GitHub Actions workflow commands, one annotation per diagnostic."""

    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: JUnitGuardConfig,
    ) -> str:
        lines: list[str] = []
        for diag in diagnostics.sorted:
            level: str = "error" if diag.severity == Severity.ERROR else "warning"
            lines.append(
                f"::{level} file={diag.file},line={diag.location.line},"
                f"col={diag.location.column},title={diag.code}::"
                f"{_escape_workflow_data(diag.message)}"
            )
        return "\n".join(lines)


def _escape_workflow_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def get_formatter(*, output_format: OutputFormat) -> Formatter:
    if output_format == OutputFormat.JSON:
        return JsonFormatter()
    if output_format == OutputFormat.GITHUB:
        return GithubFormatter()
    return TextFormatter()


def format_summary(*, diagnostics: DiagnosticCollection) -> str:
    error_count: int = diagnostics.error_count
    warning_count: int = diagnostics.warning_count

    parts: list[str] = []
    if error_count > 0:
        parts.append(f"{error_count} error{'s' if error_count != 1 else ''}")
    if warning_count > 0:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")

    if not parts:
        return "No issues found."

    return f"Found {', '.join(parts)}."
