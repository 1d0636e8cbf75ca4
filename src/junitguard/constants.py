"""Constants and enums for JUnitGuard configuration."""
from __future__ import annotations

from enum import Enum
from typing import Final

__version__: Final[str] = "0.1.0"


class Severity(Enum):
    """Rule severity levels."""

    ERROR = "error"
    WARN = "warn"
    OFF = "off"


class OutputFormat(Enum):
    """Output format options."""

    TEXT = "text"
    JSON = "json"
    GITHUB = "github"


class ColorMode(Enum):
    """Color output modes."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


RULE_CODES: Final[frozenset[str]] = frozenset({
    "EXC001",  # One expected checked exception per expectation block
    "EXC002",  # One expected runtime exception per expectation block
})

DEFAULT_SEVERITIES: Final[dict[str, Severity]] = {
    "EXC001": Severity.WARN,
    "EXC002": Severity.WARN,
}

SYNTAX_ERROR_CODE: Final[str] = "SYN001"

IGN001_CODE: Final[str] = "IGN001"
IGN002_CODE: Final[str] = "IGN002"
IGN003_CODE: Final[str] = "IGN003"

SECONDARY_MESSAGE: Final[str] = "Throws an exception"

CONFIG_FILE_NAME: Final[str] = "junitguard.toml"

DEFAULT_EXCLUDES: Final[tuple[str, ...]] = (
    "**/.*",
    "**/.git/**",
    "**/.gradle/**",
    "**/.idea/**",
    "**/node_modules/**",
    "**/target/**",
    "**/build/**",
    "**/out/**",
)
