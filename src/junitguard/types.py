"""Common types and dataclasses for JUnitGuard."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from junitguard.constants import (
    DEFAULT_EXCLUDES,
    DEFAULT_SEVERITIES,
    ColorMode,
    OutputFormat,
    Severity,
)


@dataclass(frozen=True, slots=True)
class EXC001Options:
    """Options for EXC001 (one expected checked exception) rule."""

    include_supertypes: bool = True


@dataclass(frozen=True, slots=True)
class EXC002Options:
    """Options for EXC002 (one expected runtime exception) rule."""

    count_unresolved: bool = True


@dataclass(frozen=True, slots=True)
class IgnoreGovernance:
    """Configuration for ignore/skip governance."""

    require_reason: bool = True
    disallow: frozenset[str] = field(default_factory=lambda: frozenset())
    max_per_file: int | None = None


@dataclass(frozen=True, slots=True)
class RuleConfig:
    """Configuration for all rules."""

    severities: MappingProxyType[str, Severity] = field(
        default_factory=lambda: MappingProxyType(DEFAULT_SEVERITIES)
    )
    exc001: EXC001Options = field(default_factory=EXC001Options)
    exc002: EXC002Options = field(default_factory=EXC002Options)


@dataclass(frozen=True, slots=True)
class JUnitGuardConfig:
    """Complete JUnitGuard configuration."""

    config_path: Path | None = None
    include: tuple[str, ...] = ("**/*.java",)
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES
    output_format: OutputFormat = OutputFormat.TEXT
    show_source: bool = True
    color: ColorMode = ColorMode.AUTO
    rules: RuleConfig = field(default_factory=RuleConfig)
    ignores: IgnoreGovernance = field(default_factory=IgnoreGovernance)

    def get_severity(self, rule_code: str) -> Severity:
        """Get the severity for a rule code."""
        return self.rules.severities.get(rule_code, Severity.OFF)

    def is_rule_enabled(self, rule_code: str) -> bool:
        """Check if a rule is enabled (not OFF)."""
        return self.get_severity(rule_code) != Severity.OFF


class ConfigError(Exception):
    """Error during configuration loading or validation."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)
