"""Tests for method signature matchers."""
from __future__ import annotations

import pytest

from junitguard.catalog import library_methods
from junitguard.matchers import (
    ALL_ASSERT_THROWS,
    ANY,
    ASSERTION_LIBRARY,
    FAIL_METHOD,
    JUNIT4_ASSERT_THROWS_WITH_MESSAGE,
    MethodMatcher,
)
from junitguard.symbols import JavaType, MethodSymbol


def _symbol(owner: str, name: str, *params: str) -> MethodSymbol:
    return MethodSymbol(
        owner=owner, name=name, parameter_types=tuple(JavaType(p) for p in params),
    )


class TestMethodMatcher:
    def test_none_never_matches(self) -> None:
        assert ALL_ASSERT_THROWS.matches(None) is False

    def test_owner_and_name_must_match(self) -> None:
        matcher: MethodMatcher = MethodMatcher(
            owners=frozenset({"com.example.Api"}), names=frozenset({"call"}),
        )
        assert matcher.matches(_symbol("com.example.Api", "call"))
        assert not matcher.matches(_symbol("com.example.Other", "call"))
        assert not matcher.matches(_symbol("com.example.Api", "invoke"))

    def test_parameter_list_is_exact_with_wildcards(self) -> None:
        matcher: MethodMatcher = MethodMatcher(
            owners=frozenset({"com.example.Api"}),
            names=frozenset({"call"}),
            parameters=("java.lang.String", ANY),
        )
        assert matcher.matches(_symbol("com.example.Api", "call", "java.lang.String", "int"))
        assert not matcher.matches(_symbol("com.example.Api", "call", "int", "int"))
        assert not matcher.matches(_symbol("com.example.Api", "call", "java.lang.String"))


class TestAssertThrowsMatchers:
    def test_junit4_message_overload(self) -> None:
        overloads: list[MethodSymbol] = library_methods(
            owner="org.junit.Assert", name="assertThrows",
        )
        matched: list[bool] = [
            JUNIT4_ASSERT_THROWS_WITH_MESSAGE.matches(s) for s in overloads
        ]
        assert matched == [False, True]

    def test_junit5_three_argument_overloads_are_not_message_first(self) -> None:
        overloads: list[MethodSymbol] = library_methods(
            owner="org.junit.jupiter.api.Assertions", name="assertThrows",
        )
        assert len(overloads) == 3
        assert not any(JUNIT4_ASSERT_THROWS_WITH_MESSAGE.matches(s) for s in overloads)
        assert all(ALL_ASSERT_THROWS.matches(s) for s in overloads)

    def test_other_owner_is_rejected(self) -> None:
        assert not ALL_ASSERT_THROWS.matches(
            _symbol("com.example.MyAsserts", "assertThrows", "java.lang.Class", "java.lang.Runnable"),
        )


class TestFailMatchers:
    @pytest.mark.parametrize(
        ("owner", "name"),
        [
            ("org.junit.Assert", "fail"),
            ("org.junit.jupiter.api.Assertions", "fail"),
            ("junit.framework.Assert", "fail"),
            ("junit.framework.TestCase", "fail"),
            ("org.assertj.core.api.Assertions", "fail"),
            ("org.assertj.core.api.Fail", "failBecauseExceptionWasNotThrown"),
            ("org.assertj.core.api.Assertions", "shouldHaveThrown"),
            ("org.fest.assertions.Fail", "fail"),
        ],
    )
    def test_failure_calls(self, owner: str, name: str) -> None:
        assert FAIL_METHOD.matches(_symbol(owner, name))
        assert ASSERTION_LIBRARY.matches(_symbol(owner, name))

    def test_junit_has_no_fail_because(self) -> None:
        assert not FAIL_METHOD.matches(
            _symbol("org.junit.Assert", "failBecauseExceptionWasNotThrown"),
        )

    def test_assertion_library_excludes_other_helpers(self) -> None:
        assert not ASSERTION_LIBRARY.matches(_symbol("org.junit.Assert", "assertEquals"))
