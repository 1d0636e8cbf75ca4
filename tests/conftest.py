"""Pytest fixtures for JUnitGuard tests."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def temp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[tool.junitguard]
include = ["src/test/**/*.java"]
exclude = ["**/generated/**"]
output_format = "text"
show_source = false
color = "never"

[tool.junitguard.rules]
EXC001 = "error"

[tool.junitguard.rules.EXC002]
severity = "off"
count_unresolved = false

[tool.junitguard.ignores]
require_reason = false
disallow = ["EXC001"]
max_per_file = 10
"""
    )
    return config_path


@pytest.fixture
def junitguard_toml(tmp_path: Path) -> Path:
    """Create a standalone junitguard.toml file."""
    config_path: Path = tmp_path / "junitguard.toml"
    config_path.write_text(
        """
output_format = "json"

[rules.EXC001]
severity = "warn"
include_supertypes = false
"""
    )
    return config_path


@pytest.fixture
def empty_pyproject(tmp_path: Path) -> Path:
    """Create a pyproject.toml without [tool.junitguard] section."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[project]
name = "test-project"
version = "0.1.0"
"""
    )
    return config_path


@pytest.fixture
def invalid_toml(tmp_path: Path) -> Path:
    """Create an invalid TOML file."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text("invalid [ toml content")
    return config_path


@pytest.fixture
def invalid_config(tmp_path: Path) -> Path:
    """Create a pyproject.toml with invalid junitguard config."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[tool.junitguard]
output_format = "invalid_format"
color = "maybe"

[tool.junitguard.rules]
EXC001 = "super_error"
FAKE001 = "warn"

[tool.junitguard.ignores]
disallow = ["FAKE002"]
"""
    )
    return config_path
