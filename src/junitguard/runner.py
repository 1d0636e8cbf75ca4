"""Lint orchestrator for JUnitGuard."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from junitguard.constants import SYNTAX_ERROR_CODE, Severity
from junitguard.diagnostics import Diagnostic, DiagnosticCollection, SourceLocation
from junitguard.formatters import Formatter, format_summary, get_formatter
from junitguard.ignores import apply_ignores
from junitguard.parser import ParseResult, SyntaxErrorInfo, parse_file
from junitguard.rules.base import Rule
from junitguard.rules.registry import get_enabled_rules
from junitguard.scanner import scan_files
from junitguard.types import JUnitGuardConfig

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LintResult:
    diagnostics: DiagnosticCollection
    files_checked: int
    exit_code: int


def _syntax_error_to_diagnostic(*, parse_result: ParseResult) -> Diagnostic:
    err: SyntaxErrorInfo | None = parse_result.syntax_error
    if err is None:
        raise ValueError("parse_result must have a syntax_error")
    return Diagnostic(
        file=parse_result.file,
        location=SourceLocation(line=err.line, column=err.column),
        code=SYNTAX_ERROR_CODE,
        message=err.message,
        severity=Severity.ERROR,
        source_line=err.source_line,
    )


def lint_paths(*, paths: tuple[Path, ...], config: JUnitGuardConfig) -> LintResult:
    started: float = time.perf_counter()
    files: list[Path] = scan_files(paths=paths, config=config)
    logger.info("Found %d files to check", len(files))

    collection: DiagnosticCollection = DiagnosticCollection()
    rules: list[Rule] = get_enabled_rules(config=config)

    for file in files:
        logger.debug("Checking %s", file)
        result: ParseResult = parse_file(file=file)
        if result.syntax_error is not None:
            logger.debug("Syntax error in %s: %s", file, result.syntax_error.message)
            collection.add(
                diagnostic=_syntax_error_to_diagnostic(parse_result=result),
            )
            continue

        file_diagnostics: list[Diagnostic] = []
        for rule in rules:
            found: list[Diagnostic] = rule.check(parse_result=result, config=config)
            logger.debug("%s: %s reported %d diagnostics", file.name, rule.code, len(found))
            file_diagnostics.extend(found)

        filtered: list[Diagnostic] = apply_ignores(
            diagnostics=file_diagnostics,
            parse_result=result,
            governance=config.ignores,
        )
        collection.add_all(diagnostics=filtered)

    exit_code: int = 1 if collection.has_errors else 0
    logger.info("Completed in %.2fs", time.perf_counter() - started)
    return LintResult(
        diagnostics=collection,
        files_checked=len(files),
        exit_code=exit_code,
    )


def format_results(*, result: LintResult, config: JUnitGuardConfig) -> str:
    formatter: Formatter = get_formatter(output_format=config.output_format)
    output: str = formatter.format(diagnostics=result.diagnostics, config=config)

    summary: str = format_summary(diagnostics=result.diagnostics)
    suffix: str = "s" if result.files_checked != 1 else ""
    file_count: str = f"Checked {result.files_checked} file{suffix}."

    parts: list[str] = []
    if output:
        parts.append(output)
    parts.append(summary)
    parts.append(file_count)

    return "\n".join(parts)
