"""EXC002: Only one call is allowed when expecting a runtime exception."""
from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node

from junitguard.diagnostics import Diagnostic
from junitguard.expectations import (
    AnalysisContext,
    GuardedRegion,
    InvocationCollector,
    is_checked,
    scan_expectations,
    secondary_locations,
)
from junitguard.matchers import ASSERTION_LIBRARY
from junitguard.parser import ParseResult
from junitguard.semantic import SemanticModel
from junitguard.symbols import JavaType, MethodSymbol
from junitguard.types import EXC002Options, JUnitGuardConfig


class EXC002Rule:
    """Detect expectation blocks of runtime exceptions with more than one call."""

    @property
    def code(self) -> str:
        return "EXC002"

    def check(
        self,
        *,
        parse_result: ParseResult,
        config: JUnitGuardConfig,
    ) -> list[Diagnostic]:
        if parse_result.tree is None:
            return []
        context: AnalysisContext = AnalysisContext(
            file=parse_result.file,
            source_lines=parse_result.source_lines,
            model=SemanticModel.build(parse_result.tree),
            code=self.code,
            severity=config.get_severity(self.code),
        )
        return scan_expectations(
            root=parse_result.tree.root_node,
            context=context,
            policy=RuntimeExceptionPolicy(options=config.rules.exc002),
        )


@dataclass(frozen=True, slots=True)
class RuntimeExceptionPolicy:
    """Reports when an unchecked expectation guards more than one call.

    Any call can raise a runtime exception, so every invocation counts
    except the assertion helpers themselves.
    """

    options: EXC002Options

    def report(
        self,
        *,
        expected: tuple[JavaType, ...],
        region: GuardedRegion,
        context: AnalysisContext,
    ) -> list[Diagnostic]:
        if any(is_checked(t, context.model) for t in expected):
            return []

        collector: InvocationCollector = InvocationCollector(
            predicate=self._may_throw,
            model=context.model,
        )
        call_sites: list[Node] = collector.collect(region.tree)
        if len(call_sites) <= 1:
            return []

        return [
            context.diagnostic(
                anchor=region.anchor,
                message=f"Refactor the {region.label} to have only one "
                "invocation possibly throwing a runtime exception",
                secondary=secondary_locations(
                    call_sites, source_lines=context.source_lines,
                ),
            ),
        ]

    def _may_throw(self, symbol: MethodSymbol | None) -> bool:
        if symbol is None:
            return self.options.count_unresolved
        return not ASSERTION_LIBRARY.matches(symbol)
