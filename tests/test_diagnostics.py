"""Tests for the diagnostics module."""
from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from junitguard.constants import SECONDARY_MESSAGE, Severity
from junitguard.diagnostics import (
    Diagnostic,
    DiagnosticCollection,
    SecondaryLocation,
    SourceLocation,
)


class TestSourceLocation:
    """Tests for SourceLocation dataclass."""

    def test_creation_basic(self) -> None:
        loc = SourceLocation(line=10, column=5)
        assert loc.line == 10
        assert loc.column == 5
        assert loc.end_line is None
        assert loc.end_column is None

    def test_creation_with_end(self) -> None:
        loc = SourceLocation(line=10, column=5, end_line=12, end_column=20)
        assert loc.end_line == 12
        assert loc.end_column == 20

    def test_frozen(self) -> None:
        loc = SourceLocation(line=1, column=1)
        with pytest.raises(FrozenInstanceError):
            loc.line = 2  # type: ignore[misc]


class TestDiagnostic:
    """Tests for Diagnostic dataclass."""

    def test_creation(self) -> None:
        diag = Diagnostic(
            file=Path("src/test/FooTest.java"),
            location=SourceLocation(line=3, column=5),
            code="SYN001",
            message="Missing ';'",
            severity=Severity.ERROR,
            source_line="    int x = 1",
        )
        assert diag.file == Path("src/test/FooTest.java")
        assert diag.location.line == 3
        assert diag.code == "SYN001"
        assert diag.severity == Severity.ERROR
        assert diag.source_line == "    int x = 1"
        assert diag.secondary == ()

    def test_secondary_locations_kept_in_order(self) -> None:
        notes: tuple[SecondaryLocation, ...] = (
            SecondaryLocation(
                location=SourceLocation(line=7, column=13), message=SECONDARY_MESSAGE,
            ),
            SecondaryLocation(
                location=SourceLocation(line=8, column=13), message=SECONDARY_MESSAGE,
            ),
        )
        diag = Diagnostic(
            file=Path("FooTest.java"),
            location=SourceLocation(line=6, column=9),
            code="EXC001",
            message="Refactor",
            severity=Severity.WARN,
            secondary=notes,
        )
        assert [n.location.line for n in diag.secondary] == [7, 8]
        assert all(n.message == "Throws an exception" for n in diag.secondary)

    def test_frozen(self) -> None:
        diag = Diagnostic(
            file=Path("FooTest.java"),
            location=SourceLocation(line=1, column=1),
            code="EXC002",
            message="test",
            severity=Severity.ERROR,
        )
        with pytest.raises(FrozenInstanceError):
            diag.message = "changed"  # type: ignore[misc]


class TestDiagnosticCollection:
    """Tests for DiagnosticCollection."""

    def _make_diagnostic(
        self,
        *,
        file: str = "FooTest.java",
        line: int = 1,
        column: int = 1,
        code: str = "EXC001",
        severity: Severity = Severity.ERROR,
    ) -> Diagnostic:
        return Diagnostic(
            file=Path(file),
            location=SourceLocation(line=line, column=column),
            code=code,
            message="test message",
            severity=severity,
        )

    def test_add_single(self) -> None:
        coll = DiagnosticCollection()
        coll.add(diagnostic=self._make_diagnostic())
        assert len(coll) == 1

    def test_add_all(self) -> None:
        coll = DiagnosticCollection()
        coll.add_all(diagnostics=[
            self._make_diagnostic(line=1),
            self._make_diagnostic(line=2),
            self._make_diagnostic(line=3),
        ])
        assert len(coll) == 3

    def test_sorted_by_file_line_column(self) -> None:
        coll = DiagnosticCollection()
        coll.add(diagnostic=self._make_diagnostic(file="BTest.java", line=10, column=5))
        coll.add(diagnostic=self._make_diagnostic(file="ATest.java", line=5, column=10))
        coll.add(diagnostic=self._make_diagnostic(file="ATest.java", line=5, column=1))
        coll.add(diagnostic=self._make_diagnostic(file="ATest.java", line=1, column=1))

        positions: list[tuple[str, int, int]] = [
            (str(d.file), d.location.line, d.location.column) for d in coll.sorted
        ]
        assert positions == [
            ("ATest.java", 1, 1),
            ("ATest.java", 5, 1),
            ("ATest.java", 5, 10),
            ("BTest.java", 10, 5),
        ]

    def test_has_errors(self) -> None:
        coll = DiagnosticCollection()
        coll.add(diagnostic=self._make_diagnostic(severity=Severity.WARN))
        assert coll.has_errors is False
        coll.add(diagnostic=self._make_diagnostic(severity=Severity.ERROR))
        assert coll.has_errors is True

    def test_counts(self) -> None:
        coll = DiagnosticCollection()
        coll.add(diagnostic=self._make_diagnostic(severity=Severity.ERROR))
        coll.add(diagnostic=self._make_diagnostic(severity=Severity.WARN))
        coll.add(diagnostic=self._make_diagnostic(severity=Severity.WARN))
        assert coll.error_count == 1
        assert coll.warning_count == 2

    def test_empty_collection(self) -> None:
        coll = DiagnosticCollection()
        assert len(coll) == 0
        assert coll.has_errors is False
        assert coll.sorted == []

    def test_iteration_preserves_insertion_order(self) -> None:
        coll = DiagnosticCollection()
        coll.add(diagnostic=self._make_diagnostic(line=2))
        coll.add(diagnostic=self._make_diagnostic(line=1))
        assert [d.location.line for d in coll] == [2, 1]
