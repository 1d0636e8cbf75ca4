"""Rule protocol for JUnitGuard lint rules."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from junitguard.diagnostics import Diagnostic
from junitguard.parser import ParseResult
from junitguard.types import JUnitGuardConfig


@runtime_checkable
class Rule(Protocol):
    """Structural interface for lint rules."""

    @property
    def code(self) -> str: ...

    def check(
        self,
        *,
        parse_result: ParseResult,
        config: JUnitGuardConfig,
    ) -> list[Diagnostic]: ...
