"""Tests for JUnitGuard CLI."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from junitguard.cli import cli
from junitguard.constants import __version__

_AMBIGUOUS_SOURCE: str = """\
import static org.junit.Assert.fail;

class ParserTest {
    void test() {
        try {
            parse("a");
            parse("b");
            fail();
        } catch (IllegalArgumentException e) {
        }
    }
}
"""


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_help_shows_usage(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "JUnitGuard" in result.output
        assert "config" in result.output
        assert "lint" in result.output
        assert "explain" in result.output

    def test_version_shows_version(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestConfigCommand:
    """Test the config command."""

    def test_config_shows_resolved_config(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        assert "JUnitGuard Configuration" in result.output
        assert "Java Sources:" in result.output
        assert "EXC001 [WARN] One Expected Checked Exception" in result.output
        assert "Ignore Pragmas" in result.output

    def test_config_json_outputs_valid_json(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["config", "--json"])

        assert result.exit_code == 0
        data: dict[str, Any] = json.loads(result.output)
        assert "include" in data
        assert "rules" in data
        assert data["rules"]["EXC001"] == {"severity": "warn", "include_supertypes": True}
        assert "ignores" in data

    def test_config_validate_succeeds(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["config", "--validate"])

        assert result.exit_code == 0
        assert "Configuration valid" in result.output

    def test_max_per_file_zero_displays_zero(self, tmp_path: Path) -> None:
        config_path: Path = tmp_path / "pyproject.toml"
        config_path.write_text("[tool.junitguard.ignores]\nmax_per_file = 0\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_path), "config"])

        assert result.exit_code == 0
        assert "Pragmas per file: 0" in result.output
        assert "no limit" not in result.output

    def test_rule_options_are_displayed(self, junitguard_toml: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--config", str(junitguard_toml), "config"])

        assert result.exit_code == 0
        assert "include_supertypes = false" in result.output
        assert "count_unresolved = true" in result.output


class TestLintCommand:
    """Test the lint command."""

    def test_lint_clean_directory(self, tmp_path: Path) -> None:
        (tmp_path / "GoodTest.java").write_text("class GoodTest {}\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", str(tmp_path)])

        assert result.exit_code == 0
        assert "No issues found." in result.output
        assert "Checked 1 file." in result.output

    def test_lint_syntax_error(self, tmp_path: Path) -> None:
        (tmp_path / "BrokenTest.java").write_text("class BrokenTest {\n    int x = ;\n}\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", str(tmp_path)])

        assert result.exit_code == 1
        assert "SYN001" in result.output
        assert "1 error" in result.output

    def test_lint_empty_directory(self, tmp_path: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", str(tmp_path)])

        assert result.exit_code == 0
        assert "Checked 0 files." in result.output

    def test_lint_reports_runtime_expectation(self, tmp_path: Path) -> None:
        (tmp_path / "ParserTest.java").write_text(_AMBIGUOUS_SOURCE)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", str(tmp_path)])

        assert result.exit_code == 0
        assert (
            "WARN [EXC002] Refactor the body of this try/catch to have only one "
            "invocation possibly throwing a runtime exception"
        ) in result.output

    def test_lint_error_severity_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "ParserTest.java").write_text(_AMBIGUOUS_SOURCE)
        config_path: Path = tmp_path / "junitguard.toml"
        config_path.write_text('[rules]\nEXC002 = "error"\n')
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_path), "lint", str(tmp_path)])

        assert result.exit_code == 1
        assert "ERROR [EXC002]" in result.output

    def test_lint_json_format(self, tmp_path: Path) -> None:
        (tmp_path / "ParserTest.java").write_text(_AMBIGUOUS_SOURCE)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", "--format", "json", str(tmp_path)])

        assert '"code": "EXC002"' in result.output

    def test_lint_github_format(self, tmp_path: Path) -> None:
        (tmp_path / "ParserTest.java").write_text(_AMBIGUOUS_SOURCE)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", "--format", "github", str(tmp_path)])

        assert "::warning file=" in result.output
        assert "line=5,col=9,title=EXC002::" in result.output

    def test_lint_no_show_source(self, tmp_path: Path) -> None:
        (tmp_path / "BrokenTest.java").write_text("class BrokenTest {\n    int x = ;\n}\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", "--no-show-source", str(tmp_path)])

        assert result.exit_code == 1
        assert "    ^" not in result.output


class TestErrorHandling:
    """Test CLI error handling."""

    def test_invalid_config_exits_with_error(self, tmp_path: Path) -> None:
        config_path: Path = tmp_path / "pyproject.toml"
        config_path.write_text('[tool.junitguard]\noutput_format = "invalid"\n')

        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_path), "config"])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_lint_path_is_usage_error(self, tmp_path: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["lint", str(tmp_path / "missing")])

        assert result.exit_code == 2
