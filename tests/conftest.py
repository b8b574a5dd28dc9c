"""Shared test fixtures for maru.

Provides reusable fixtures for loading document fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from maru.models import Argument, Command
from maru.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app_document() -> dict[str, Any]:
    """The decoded form shared by app.toml, app.json and app.yaml."""
    return {
        "name": "app_clap_serde",
        "version": "1.0",
        "author": "toml_tester",
        "about": "test-clap-serde",
        "after_help": "help",
        "subcommands": {
            "sub1": {"about": "subcommand_1"},
            "sub2": {
                "about": "subcommand_2",
                "subcommands": {"deep": {"about": "nested"}},
            },
        },
        "args": {
            "apple": {"short": "a"},
            "banana": {"short": "b", "long": "banana", "aliases": ["musa_spp"]},
        },
    }


@pytest.fixture
def app_command() -> Command:
    """The tree described by the app fixtures, built with the builder API."""
    return (
        Command(name="app_clap_serde")
        .with_version("1.0")
        .with_author("toml_tester")
        .with_about("test-clap-serde")
        .with_after_help("help")
        .subcommand(Command(name="sub1").with_about("subcommand_1"))
        .subcommand(
            Command(name="sub2")
            .with_about("subcommand_2")
            .subcommand(Command(name="deep").with_about("nested"))
        )
        .arg(Argument(name="apple").with_short("a"))
        .arg(
            Argument(name="banana")
            .with_short("b")
            .with_long("banana")
            .with_aliases(["musa_spp"])
        )
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config. Clears all MARU_* environment
    variables and $SHELL, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("maru.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["MARU_MAX_DEPTH", "MARU_SHELL", "SHELL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
