"""Configuration loading and validation for JUnitGuard."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Any

from junitguard.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_EXCLUDES,
    DEFAULT_SEVERITIES,
    RULE_CODES,
    ColorMode,
    OutputFormat,
    Severity,
)
from junitguard.types import (
    ConfigError,
    EXC001Options,
    EXC002Options,
    IgnoreGovernance,
    JUnitGuardConfig,
    RuleConfig,
)

logger: logging.Logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and validates JUnitGuard configuration."""

    @staticmethod
    def find_config_file(start_path: Path | None = None) -> Path | None:
        """
        Find junitguard.toml or pyproject.toml by walking up from start_path.

        In each directory junitguard.toml wins over pyproject.toml.

        Args:
            start_path: Directory to start searching from. Defaults to cwd.

        Returns:
            Path to the configuration file if found, None otherwise.
        """
        if start_path is None:
            start_path = Path.cwd()

        start_path = start_path.resolve()

        for directory in [start_path, *start_path.parents]:
            for name in (CONFIG_FILE_NAME, "pyproject.toml"):
                config_path: Path = directory / name
                if config_path.is_file():
                    return config_path

        return None

    @staticmethod
    def load(path: Path | None = None) -> JUnitGuardConfig:
        """
        Load configuration from junitguard.toml or pyproject.toml.

        Args:
            path: Explicit path to a configuration file. If None, searches upward.

        Returns:
            Validated JUnitGuardConfig instance.

        Raises:
            ConfigError: If configuration is invalid.
        """
        if path is None:
            path = ConfigLoader.find_config_file()

        if path is None:
            logger.debug("No configuration file found, using defaults")
            return JUnitGuardConfig()

        try:
            with open(path, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML: {e}", path=path) from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=path) from e

        tool_config: dict[str, Any]
        if path.name == CONFIG_FILE_NAME:
            tool_config = data
        else:
            tool_config = data.get("tool", {}).get("junitguard", {})

        logger.debug("Loaded configuration from %s", path)
        return ConfigLoader._parse_config(tool_config, config_path=path)

    @staticmethod
    def _parse_config(
        data: dict[str, Any],
        *,
        config_path: Path | None = None,
    ) -> JUnitGuardConfig:
        """Parse and validate configuration dictionary."""
        errors: list[str] = []

        # Parse include patterns
        include: tuple[str, ...] = ("**/*.java",)
        raw_include: Any = data.get("include", ("**/*.java",))
        if isinstance(raw_include, list):
            include = tuple(raw_include)
        elif not isinstance(raw_include, tuple):
            errors.append(f"include must be a list, got {type(raw_include).__name__}")

        # Parse exclude patterns
        exclude: tuple[str, ...] = DEFAULT_EXCLUDES
        raw_exclude: Any = data.get("exclude", DEFAULT_EXCLUDES)
        if isinstance(raw_exclude, list):
            exclude = tuple(raw_exclude)
        elif not isinstance(raw_exclude, tuple):
            errors.append(f"exclude must be a list, got {type(raw_exclude).__name__}")

        # Parse output_format
        output_format: OutputFormat = OutputFormat.TEXT
        if "output_format" in data:
            try:
                output_format = OutputFormat(data["output_format"])
            except ValueError:
                valid: list[str] = [f.value for f in OutputFormat]
                errors.append(f"output_format must be one of {valid}")

        # Parse show_source
        show_source: bool = data.get("show_source", True)
        if not isinstance(show_source, bool):
            errors.append("show_source must be a boolean")
            show_source = True

        # Parse color
        color: ColorMode = ColorMode.AUTO
        if "color" in data:
            try:
                color = ColorMode(data["color"])
            except ValueError:
                valid = [c.value for c in ColorMode]
                errors.append(f"color must be one of {valid}")

        rules: RuleConfig = ConfigLoader._parse_rules(data.get("rules", {}), errors)

        ignores: IgnoreGovernance = ConfigLoader._parse_ignores(
            data.get("ignores", {}), errors
        )

        if errors:
            error_msg: str = "Configuration errors:\n" + "\n".join(
                f"  - {e}" for e in errors
            )
            raise ConfigError(error_msg, path=config_path)

        return JUnitGuardConfig(
            config_path=config_path,
            include=include,
            exclude=exclude,
            output_format=output_format,
            show_source=show_source,
            color=color,
            rules=rules,
            ignores=ignores,
        )

    @staticmethod
    def _parse_rules(data: dict[str, Any], errors: list[str]) -> RuleConfig:
        """Parse rules configuration."""
        severities: dict[str, Severity] = dict(DEFAULT_SEVERITIES)

        for key, value in data.items():
            if key.upper() in RULE_CODES:
                rule_code: str = key.upper()
                if isinstance(value, str):
                    try:
                        severities[rule_code] = Severity(value.lower())
                    except ValueError:
                        valid: list[str] = [s.value for s in Severity]
                        errors.append(f"rules.{key} must be one of {valid}")
                elif isinstance(value, dict) and "severity" in value:
                    raw_severity: Any = value["severity"]
                    if not isinstance(raw_severity, str):
                        errors.append(f"rules.{key}.severity must be a string")
                        continue
                    try:
                        severities[rule_code] = Severity(raw_severity.lower())
                    except ValueError:
                        valid = [s.value for s in Severity]
                        errors.append(f"rules.{key}.severity must be one of {valid}")
            else:
                errors.append(f"rules.{key} is not a known rule code")

        # Parse EXC001 options
        exc001_data: Any = data.get("EXC001", {})
        exc001: EXC001Options = EXC001Options()
        if isinstance(exc001_data, dict):
            include_supertypes: Any = exc001_data.get("include_supertypes", True)
            if isinstance(include_supertypes, bool):
                exc001 = EXC001Options(include_supertypes=include_supertypes)
            else:
                errors.append("rules.EXC001.include_supertypes must be a boolean")

        # Parse EXC002 options
        exc002_data: Any = data.get("EXC002", {})
        exc002: EXC002Options = EXC002Options()
        if isinstance(exc002_data, dict):
            count_unresolved: Any = exc002_data.get("count_unresolved", True)
            if isinstance(count_unresolved, bool):
                exc002 = EXC002Options(count_unresolved=count_unresolved)
            else:
                errors.append("rules.EXC002.count_unresolved must be a boolean")

        return RuleConfig(
            severities=MappingProxyType(severities),
            exc001=exc001,
            exc002=exc002,
        )

    @staticmethod
    def _parse_ignores(data: dict[str, Any], errors: list[str]) -> IgnoreGovernance:
        """Parse ignore governance configuration."""
        require_reason: bool = data.get("require_reason", True)
        if not isinstance(require_reason, bool):
            errors.append("ignores.require_reason must be a boolean")
            require_reason = True

        raw_disallow: Any = data.get("disallow", [])
        disallow: frozenset[str]
        if isinstance(raw_disallow, list) and not all(
            isinstance(c, str) for c in raw_disallow
        ):
            errors.append("ignores.disallow entries must be strings")
            disallow = frozenset()
        elif isinstance(raw_disallow, list):
            invalid_codes: list[str] = [
                c for c in raw_disallow if c.upper() not in RULE_CODES
            ]
            if invalid_codes:
                errors.append(
                    f"ignores.disallow contains unknown rule codes: {invalid_codes}"
                )
            disallow = frozenset(
                c.upper() for c in raw_disallow if c.upper() in RULE_CODES
            )
        else:
            errors.append("ignores.disallow must be a list")
            disallow = frozenset()

        max_per_file: int | None = data.get("max_per_file")
        if max_per_file is not None and not isinstance(max_per_file, int):
            errors.append("ignores.max_per_file must be an integer or null")
            max_per_file = None

        return IgnoreGovernance(
            require_reason=require_reason,
            disallow=disallow,
            max_per_file=max_per_file,
        )


def load_config(path: Path | None = None) -> JUnitGuardConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Optional explicit path to a configuration file.

    Returns:
        Validated configuration.
    """
    return ConfigLoader.load(path)
