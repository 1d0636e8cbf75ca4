"""Rule registry for JUnitGuard."""
from __future__ import annotations

from junitguard.rules.base import Rule
from junitguard.rules.exc001 import EXC001Rule
from junitguard.rules.exc002 import EXC002Rule
from junitguard.types import JUnitGuardConfig


def get_enabled_rules(*, config: JUnitGuardConfig) -> list[Rule]:
    """Return rule instances that are not OFF in the given config."""
    all_rules: list[Rule] = _all_rules()
    return [rule for rule in all_rules if config.is_rule_enabled(rule.code)]


def _all_rules() -> list[Rule]:
    """Return all registered rule instances."""
    rules: list[Rule] = [
        EXC001Rule(),
        EXC002Rule(),
    ]
    return rules
