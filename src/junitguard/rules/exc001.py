"""EXC001: Only one call may throw the expected checked exception."""
from __future__ import annotations

from dataclasses import dataclass
from functools import partial

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
from junitguard.parser import ParseResult
from junitguard.semantic import SemanticModel
from junitguard.symbols import JavaType, MethodSymbol
from junitguard.types import EXC001Options, JUnitGuardConfig


class EXC001Rule:
    """Detect expectation blocks with several calls throwing the expected checked exception."""

    @property
    def code(self) -> str:
        return "EXC001"

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
            policy=CheckedExceptionPolicy(options=config.rules.exc001),
        )


@dataclass(frozen=True, slots=True)
class CheckedExceptionPolicy:
    """Reports when more than one call declares a matching checked exception."""

    options: EXC001Options

    def report(
        self,
        *,
        expected: tuple[JavaType, ...],
        region: GuardedRegion,
        context: AnalysisContext,
    ) -> list[Diagnostic]:
        checked: tuple[JavaType, ...] = tuple(
            t for t in expected if is_checked(t, context.model)
        )
        if not checked:
            return []

        collector: InvocationCollector = InvocationCollector(
            predicate=partial(
                _throws_any,
                expected=checked,
                model=context.model,
                include_supertypes=self.options.include_supertypes,
            ),
            model=context.model,
        )
        call_sites: list[Node] = collector.collect(region.tree)
        if len(call_sites) <= 1:
            return []

        names: str = " or ".join(dict.fromkeys(str(t) for t in checked))
        return [
            context.diagnostic(
                anchor=region.anchor,
                message=f"Refactor the {region.label} to not have multiple "
                f"invocations throwing {names}",
                secondary=secondary_locations(
                    call_sites, source_lines=context.source_lines,
                ),
            ),
        ]


def _throws_any(
    symbol: MethodSymbol | None,
    *,
    expected: tuple[JavaType, ...],
    model: SemanticModel,
    include_supertypes: bool,
) -> bool:
    """Whether the declared throws clause can produce one of the expected types."""
    if symbol is None:
        return False
    for thrown in symbol.thrown_types:
        for exception in expected:
            if model.is_subtype(thrown, exception.name):
                return True
            if include_supertypes and model.is_subtype(exception, thrown.name):
                return True
    return False
