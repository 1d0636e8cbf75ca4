"""Command-line interface for JUnitGuard using Click."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Final

import click

from junitguard.config import load_config
from junitguard.constants import DEFAULT_SEVERITIES, ColorMode, OutputFormat, __version__
from junitguard.explain import RULE_CATALOG, RuleInfo, format_rule_detail, format_rule_table
from junitguard.runner import LintResult, format_results, lint_paths
from junitguard.types import ConfigError, JUnitGuardConfig


_OPTION_NOTES: Final[dict[str, str]] = {
    "include_supertypes": "calls declaring a broader throws clause count",
    "count_unresolved": "calls JUnitGuard cannot resolve count",
}


def _rule_options(*, config: JUnitGuardConfig) -> dict[str, dict[str, bool]]:
    return {
        "EXC001": {"include_supertypes": config.rules.exc001.include_supertypes},
        "EXC002": {"count_unresolved": config.rules.exc002.count_unresolved},
    }


def format_config_text(*, config: JUnitGuardConfig) -> str:
    """Render the resolved configuration the way ``junitguard config`` prints it."""
    lines: list[str] = [
        "JUnitGuard Configuration",
        "=" * 40,
        f"Loaded from: {config.config_path or '(built-in defaults)'}",
        "",
        "Java Sources:",
        f"  Include: {', '.join(config.include)}",
        f"  Exclude: {', '.join(config.exclude[:5])}{'...' if len(config.exclude) > 5 else ''}",
        "",
        "Report:",
        f"  Format: {config.output_format.value}, color {config.color.value}, "
        f"source lines {'shown' if config.show_source else 'hidden'}",
        "",
        "Rules:",
    ]

    options: dict[str, dict[str, bool]] = _rule_options(config=config)
    for code, severity in sorted(config.rules.severities.items()):
        info: RuleInfo | None = RULE_CATALOG.get(code)
        title: str = info.name if info is not None else code
        lines.append(f"  {code} [{severity.value.upper()}] {title}")
        for key, value in options.get(code, {}).items():
            lines.append(f"    {key} = {str(value).lower()}  ({_OPTION_NOTES[key]})")

    max_display: str = (
        str(config.ignores.max_per_file) if config.ignores.max_per_file is not None else "no limit"
    )
    lines.extend([
        "",
        "Ignore Pragmas (// junitguard: ignore[CODE] because: reason):",
        f"  Reason required: {'yes' if config.ignores.require_reason else 'no'}",
        f"  Never ignorable: {', '.join(sorted(config.ignores.disallow)) or '(none)'}",
        f"  Pragmas per file: {max_display}",
    ])

    return "\n".join(lines)


def format_config_json(*, config: JUnitGuardConfig) -> str:
    """Render the resolved configuration as JSON, one object per rule."""
    options: dict[str, dict[str, bool]] = _rule_options(config=config)
    data: dict[str, Any] = {
        "config_path": str(config.config_path) if config.config_path else None,
        "include": list(config.include),
        "exclude": list(config.exclude),
        "output_format": config.output_format.value,
        "show_source": config.show_source,
        "color": config.color.value,
        "rules": {
            code: {"severity": sev.value, **options.get(code, {})}
            for code, sev in sorted(config.rules.severities.items())
        },
        "ignores": {
            "require_reason": config.ignores.require_reason,
            "disallow": sorted(config.ignores.disallow),
            "max_per_file": config.ignores.max_per_file,
        },
    }
    return json.dumps(data, indent=2)


class ConfigType(click.ParamType):
    """Custom Click parameter type for config path."""

    name: str = "path"

    def convert(
        self,
        value: str | Path | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Path | None:
        if value is None:
            return None
        return Path(value)


CONFIG_TYPE: Final[ConfigType] = ConfigType()


@click.group()
@click.version_option(version=__version__, prog_name="junitguard")
@click.option(
    "--config",
    "config_path",
    type=CONFIG_TYPE,
    default=None,
    help="Path to junitguard.toml or pyproject.toml (default: search upward)",
)
@click.option("--verbose", is_flag=True, help="Show progress and timing")
@click.option("--debug", is_flag=True, help="Show detailed trace")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """JUnitGuard - A linter for exception expectations in Java unit tests."""
    level: int = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    try:
        cfg: JUnitGuardConfig = load_config(path=config_path)
        ctx.obj["config"] = cfg
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        if e.path:
            click.echo(f"  in: {e.path}", err=True)
        ctx.exit(1)


@cli.command()
@click.option("--validate", is_flag=True, help="Only validate configuration, don't print")
@click.option("--json", "as_json", is_flag=True, help="Output configuration as JSON")
@click.pass_context
def config(ctx: click.Context, *, validate: bool, as_json: bool) -> None:
    """Show or validate configuration."""
    cfg: JUnitGuardConfig = ctx.obj["config"]

    if validate:
        click.echo(f"Configuration valid: {cfg.config_path or '(defaults)'}")
        return

    if as_json:
        click.echo(format_config_json(config=cfg))
    else:
        click.echo(format_config_text(config=cfg))


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "github"]),
    default=None,
    help="Output format (overrides config)",
)
@click.option(
    "--color",
    type=click.Choice(["auto", "always", "never"]),
    default=None,
    help="Color output mode (overrides config)",
)
@click.option("--show-source/--no-show-source", default=None, help="Show source code snippets")
@click.pass_context
def lint(
    ctx: click.Context,
    paths: tuple[Path, ...],
    *,
    output_format: str | None,
    color: str | None,
    show_source: bool | None,
) -> None:
    """Run linting on Java test files."""
    cfg: JUnitGuardConfig = ctx.obj["config"]

    # Apply CLI overrides
    overrides: dict[str, Any] = {}
    if output_format is not None:
        overrides["output_format"] = OutputFormat(output_format)
    if color is not None:
        overrides["color"] = ColorMode(color)
    if show_source is not None:
        overrides["show_source"] = show_source

    if overrides:
        cfg = replace(cfg, **overrides)

    if not paths:
        paths = (Path("."),)

    result: LintResult = lint_paths(paths=paths, config=cfg)
    output: str = format_results(result=result, config=cfg)
    if output:
        click.echo(output)
    ctx.exit(result.exit_code)


@cli.command()
@click.argument("rule_code", required=False, default=None)
@click.option("--all", "show_all", is_flag=True, help="List all rules with summaries")
@click.pass_context
def explain(ctx: click.Context, rule_code: str | None, *, show_all: bool) -> None:
    """Show rule documentation and examples."""
    cfg: JUnitGuardConfig = ctx.obj["config"]

    if show_all:
        severities: dict[str, str] = {
            code: sev.value for code, sev in cfg.rules.severities.items()
        }
        click.echo(format_rule_table(catalog=RULE_CATALOG, severities=severities))
        return

    if rule_code is None:
        known: str = ", ".join(sorted(RULE_CATALOG))
        click.echo(f"Usage: junitguard explain <RULE_CODE> (one of {known}) or junitguard explain --all")
        ctx.exit(1)
        return

    code: str = rule_code.upper()
    if code not in RULE_CATALOG:
        click.echo(f"Error: Unknown rule code '{code}'.", err=True)
        ctx.exit(1)
        return

    sev = DEFAULT_SEVERITIES.get(code)
    severity_str: str = sev.value if sev is not None else "off"
    click.echo(format_rule_detail(
        info=RULE_CATALOG[code],
        default_severity=severity_str,
    ))


def main() -> None:
    """Main entry point for junitguard CLI."""
    cli()


if __name__ == "__main__":
    main()
