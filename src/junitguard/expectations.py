"""Exception-expectation blocks in Java tests.

Two shapes express "this code must throw":

- a try/catch whose try block ends with an unconditional failure call
  (``fail()``), catching the expected exception types;
- an ``assertThrows(Expected.class, () -> ...)`` call with a lambda.

:class:`ExpectationScanner` finds both shapes, extracts the expected
types and the guarded region, and hands them to an
:class:`ExpectationPolicy`, which decides what to report. Policies
gather candidate throwing call sites with :class:`InvocationCollector`.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from tree_sitter import Node

from junitguard.constants import SECONDARY_MESSAGE, Severity
from junitguard.diagnostics import Diagnostic, SecondaryLocation, SourceLocation
from junitguard.matchers import (
    ALL_ASSERT_THROWS,
    FAIL_METHOD,
    JUNIT4_ASSERT_THROWS_WITH_MESSAGE,
)
from junitguard.nodes import (
    CATCH_CLAUSE,
    CATCH_FORMAL_PARAMETER,
    CATCH_TYPE,
    CLASS_LITERAL,
    EXPRESSION_STATEMENT,
    LAMBDA_EXPRESSION,
    METHOD_INVOCATION,
    OBJECT_CREATION,
    TRY_KINDS,
    TYPE_BODY_KINDS,
    TYPE_DECLARATION_KINDS,
    TYPE_IDENTIFIER,
    block_statements,
    invocation_arguments,
    invocation_name,
    iter_nodes,
    location_of,
    named_children,
    node_text,
    source_line_at,
)
from junitguard.semantic import SemanticModel
from junitguard.symbols import ERROR_TYPE, RUNTIME_EXCEPTION_TYPE, JavaType, MethodSymbol

logger: logging.Logger = logging.getLogger(__name__)

TRY_CATCH_LABEL: Final[str] = "body of this try/catch"
ASSERT_THROWS_LABEL: Final[str] = "code of this assertThrows"

_SCOPE_BOUNDARY_KINDS: Final[frozenset[str]] = (
    TYPE_DECLARATION_KINDS | TYPE_BODY_KINDS | frozenset({LAMBDA_EXPRESSION})
)

CollectPredicate = Callable[[MethodSymbol | None], bool]


@dataclass(frozen=True, slots=True)
class GuardedRegion:
    """Code expected to throw, with where and how to report on it."""

    tree: Node
    anchor: Node
    label: str


@dataclass(frozen=True, slots=True)
class AssertThrowsArguments:
    """Positions of the interesting arguments of an assertThrows call."""

    expected_type: Node
    executable: Node


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    """Per-file state a policy needs to build diagnostics."""

    file: Path
    source_lines: tuple[str, ...]
    model: SemanticModel
    code: str
    severity: Severity

    def diagnostic(
        self,
        *,
        anchor: Node,
        message: str,
        secondary: tuple[SecondaryLocation, ...] = (),
    ) -> Diagnostic:
        location: SourceLocation = location_of(anchor, source_lines=self.source_lines)
        return Diagnostic(
            file=self.file,
            location=location,
            code=self.code,
            message=message,
            severity=self.severity,
            source_line=source_line_at(location.line, self.source_lines),
            secondary=secondary,
        )


class ExpectationPolicy(Protocol):
    """Decides whether an expectation block deserves a diagnostic."""

    def report(
        self,
        *,
        expected: tuple[JavaType, ...],
        region: GuardedRegion,
        context: AnalysisContext,
    ) -> list[Diagnostic]: ...


class InvocationCollector:
    """Collects call sites in a region whose target satisfies a predicate.

    Method invocations are recorded by their name identifier and object
    creations by their type node, in source order. Nested type
    declarations, class bodies and lambda expressions are not entered.
    """

    def __init__(self, *, predicate: CollectPredicate, model: SemanticModel) -> None:
        self._predicate: CollectPredicate = predicate
        self._model: SemanticModel = model

    def collect(self, region: Node) -> list[Node]:
        found: list[Node] = []
        stack: list[Node] = [region]
        while stack:
            node: Node = stack.pop()
            if node.type in _SCOPE_BOUNDARY_KINDS:
                continue
            if node.type == METHOD_INVOCATION:
                if self._predicate(self._model.resolve_invocation(node)):
                    found.append(invocation_name(node))
            elif node.type == OBJECT_CREATION:
                created: Node | None = node.child_by_field_name("type")
                if created is not None and self._predicate(
                    self._model.resolve_constructor(node),
                ):
                    found.append(created)
            stack.extend(reversed(node.children))
        return found


class ExpectationScanner:
    """Visits try statements and method invocations of one file."""

    def __init__(self, *, context: AnalysisContext, policy: ExpectationPolicy) -> None:
        self._context: AnalysisContext = context
        self._policy: ExpectationPolicy = policy

    def scan(self, root: Node) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for node in iter_nodes(root):
            if node.type == METHOD_INVOCATION:
                diagnostics.extend(self.visit_invocation(node))
            elif node.type in TRY_KINDS:
                diagnostics.extend(self.visit_try(node))
        return diagnostics

    def visit_invocation(self, node: Node) -> list[Diagnostic]:
        model: SemanticModel = self._context.model
        arguments: AssertThrowsArguments | None = match_assert_throws(node, model)
        if arguments is None:
            return []
        region: GuardedRegion | None = assert_throws_region(node, arguments.executable)
        if region is None:
            return []
        expected: JavaType | None = expected_exception_type(arguments.expected_type, model)
        if expected is None:
            return []
        return self._report((expected,), region)

    def visit_try(self, node: Node) -> list[Diagnostic]:
        model: SemanticModel = self._context.model
        if not is_try_catch_fail(node, model):
            return []
        expected: tuple[JavaType, ...] = caught_types(node, model)
        if not expected:
            return []
        return self._report(expected, try_catch_region(node))

    def _report(
        self, expected: tuple[JavaType, ...], region: GuardedRegion,
    ) -> list[Diagnostic]:
        logger.debug(
            "%s:%d: %s expects %s",
            self._context.file,
            region.anchor.start_point[0] + 1,
            region.label,
            ", ".join(str(t) for t in expected),
        )
        return self._policy.report(expected=expected, region=region, context=self._context)


def scan_expectations(
    *,
    root: Node,
    context: AnalysisContext,
    policy: ExpectationPolicy,
) -> list[Diagnostic]:
    """Run ``policy`` over every expectation block under ``root``."""
    return ExpectationScanner(context=context, policy=policy).scan(root)


def match_assert_throws(
    invocation: Node, model: SemanticModel,
) -> AssertThrowsArguments | None:
    """Locate the expected-type and executable arguments of an assertThrows call."""
    if node_text(invocation_name(invocation)) not in ALL_ASSERT_THROWS.names:
        return None
    arguments: list[Node] = invocation_arguments(invocation)
    if len(arguments) < 2:
        return None
    symbol: MethodSymbol | None = model.resolve_invocation(invocation)
    if JUNIT4_ASSERT_THROWS_WITH_MESSAGE.matches(symbol):
        return AssertThrowsArguments(expected_type=arguments[1], executable=arguments[2])
    if ALL_ASSERT_THROWS.matches(symbol):
        return AssertThrowsArguments(expected_type=arguments[0], executable=arguments[1])
    return None


def expected_exception_type(expression: Node, model: SemanticModel) -> JavaType | None:
    """Type named by a ``Simple.class`` literal, None for anything else."""
    if expression.type != CLASS_LITERAL:
        return None
    parts: list[Node] = named_children(expression)
    if len(parts) != 1 or parts[0].type != TYPE_IDENTIFIER:
        return None
    return model.resolve_type(parts[0])


def caught_types(try_node: Node, model: SemanticModel) -> tuple[JavaType, ...]:
    """Catch parameter types in clause order; union alternatives in written order."""
    types: list[JavaType] = []
    for clause in named_children(try_node):
        if clause.type != CATCH_CLAUSE:
            continue
        for parameter in named_children(clause):
            if parameter.type != CATCH_FORMAL_PARAMETER:
                continue
            for catch_type in named_children(parameter):
                if catch_type.type == CATCH_TYPE:
                    types.extend(model.resolve_type(t) for t in named_children(catch_type))
    return tuple(types)


def is_try_catch_fail(try_node: Node, model: SemanticModel) -> bool:
    """Whether the try block's last statement is an unconditional failure call."""
    body: Node | None = try_node.child_by_field_name("body")
    if body is None:
        return False
    statements: list[Node] = block_statements(body)
    if not statements:
        return False
    last: Node = statements[-1]
    if last.type != EXPRESSION_STATEMENT:
        return False
    expression: list[Node] = named_children(last)
    if not expression or expression[0].type != METHOD_INVOCATION:
        return False
    return FAIL_METHOD.matches(model.resolve_invocation(expression[0]))


def try_catch_region(try_node: Node) -> GuardedRegion:
    body: Node | None = try_node.child_by_field_name("body")
    if body is None:
        raise ValueError("try statement has no body")
    return GuardedRegion(tree=body, anchor=try_node.children[0], label=TRY_CATCH_LABEL)


def assert_throws_region(invocation: Node, executable: Node) -> GuardedRegion | None:
    # method references and variables hide the code they run
    if executable.type != LAMBDA_EXPRESSION:
        return None
    body: Node | None = executable.child_by_field_name("body")
    if body is None:
        return None
    return GuardedRegion(
        tree=body, anchor=invocation_name(invocation), label=ASSERT_THROWS_LABEL,
    )


def is_checked(exception: JavaType, model: SemanticModel) -> bool:
    """Checked unless it derives from RuntimeException or Error."""
    return not (
        model.is_subtype(exception, RUNTIME_EXCEPTION_TYPE)
        or model.is_subtype(exception, ERROR_TYPE)
    )


def secondary_locations(
    call_sites: list[Node], *, source_lines: tuple[str, ...],
) -> tuple[SecondaryLocation, ...]:
    return tuple(
        SecondaryLocation(
            location=location_of(site, source_lines=source_lines),
            message=SECONDARY_MESSAGE,
        )
        for site in call_sites
    )
