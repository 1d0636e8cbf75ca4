"""Declarative method signature matchers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from junitguard.catalog import (
    ASSERTJ_ASSERTIONS,
    ASSERTJ_FAIL,
    FEST_FAIL,
    JUNIT3_ASSERT,
    JUNIT3_TEST_CASE,
    JUNIT4_ASSERT,
    JUNIT5_ASSERTIONS,
)
from junitguard.symbols import STRING_TYPE, MethodSymbol

ANY: Final[str] = "*"


@dataclass(frozen=True, slots=True)
class MethodMatcher:
    """Matches a resolved symbol on declaring type, name and parameters.

    ``parameters`` of None accepts any parameter list; otherwise the
    symbol must declare exactly that many parameters and each entry must
    equal the parameter's type name or be ``ANY``.
    """

    owners: frozenset[str]
    names: frozenset[str]
    parameters: tuple[str, ...] | None = None

    def matches(self, symbol: MethodSymbol | None) -> bool:
        if symbol is None:
            return False
        if symbol.owner not in self.owners or symbol.name not in self.names:
            return False
        if self.parameters is None:
            return True
        if len(symbol.parameter_types) != len(self.parameters):
            return False
        return all(
            expected == ANY or expected == actual.name
            for expected, actual in zip(self.parameters, symbol.parameter_types)
        )


@dataclass(frozen=True, slots=True)
class MatcherGroup:
    """Matches when any member matcher does."""

    members: tuple[MethodMatcher, ...]

    def matches(self, symbol: MethodSymbol | None) -> bool:
        return any(m.matches(symbol) for m in self.members)


JUNIT4_ASSERT_THROWS_WITH_MESSAGE: Final[MethodMatcher] = MethodMatcher(
    owners=frozenset({JUNIT4_ASSERT}),
    names=frozenset({"assertThrows"}),
    parameters=(STRING_TYPE, ANY, ANY),
)

ALL_ASSERT_THROWS: Final[MethodMatcher] = MethodMatcher(
    owners=frozenset({JUNIT4_ASSERT, JUNIT5_ASSERTIONS}),
    names=frozenset({"assertThrows"}),
)

FAIL_METHOD: Final[MatcherGroup] = MatcherGroup(members=(
    MethodMatcher(
        owners=frozenset({
            JUNIT4_ASSERT,
            JUNIT5_ASSERTIONS,
            JUNIT3_ASSERT,
            JUNIT3_TEST_CASE,
            ASSERTJ_ASSERTIONS,
            ASSERTJ_FAIL,
            FEST_FAIL,
        }),
        names=frozenset({"fail"}),
    ),
    MethodMatcher(
        owners=frozenset({ASSERTJ_ASSERTIONS, ASSERTJ_FAIL}),
        names=frozenset({"failBecauseExceptionWasNotThrown", "shouldHaveThrown"}),
    ),
))

ASSERTION_LIBRARY: Final[MethodMatcher] = MethodMatcher(
    owners=frozenset({
        JUNIT4_ASSERT,
        JUNIT5_ASSERTIONS,
        JUNIT3_ASSERT,
        JUNIT3_TEST_CASE,
        ASSERTJ_ASSERTIONS,
        ASSERTJ_FAIL,
        FEST_FAIL,
    }),
    names=frozenset({
        "assertThrows",
        "fail",
        "failBecauseExceptionWasNotThrown",
        "shouldHaveThrown",
    }),
)
