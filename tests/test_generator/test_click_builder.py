"""Tests for maru.generator.click_builder."""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from maru.generator.click_builder import build_click_command, build_param
from maru.models import Argument, Command
from maru.output import OutputFormat, OutputManager, set_output


@pytest.fixture
def plain_output() -> OutputManager:
    """Route diagnostics through plain ``print`` so capsys sees whole lines."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Commands and groups
# ---------------------------------------------------------------------------


class TestBuildClickCommand:
    def test_leaf_becomes_command(self) -> None:
        cli = build_click_command(Command(name="tool").with_about("Does things"))
        assert isinstance(cli, click.Command)
        assert not isinstance(cli, click.Group)
        assert cli.name == "tool"
        assert cli.help == "Does things"

    def test_subcommands_make_a_group(self, app_command: Command) -> None:
        cli = build_click_command(app_command)
        assert isinstance(cli, click.Group)
        assert list(cli.commands) == ["sub1", "sub2"]
        assert isinstance(cli.commands["sub2"], click.Group)
        assert "deep" in cli.commands["sub2"].commands
        assert cli.invoke_without_command is True

    def test_after_help_is_epilog(self, app_command: Command) -> None:
        cli = build_click_command(app_command)
        assert cli.epilog == "help"

    def test_help_output(self, app_command: Command) -> None:
        result = CliRunner().invoke(build_click_command(app_command), ["--help"])
        assert result.exit_code == 0
        assert "test-clap-serde" in result.output
        assert "subcommand_1" in result.output
        assert "--banana" in result.output
        assert "--musa_spp" in result.output

    def test_version_option(self, app_command: Command) -> None:
        result = CliRunner().invoke(build_click_command(app_command), ["--version"])
        assert result.exit_code == 0
        assert result.output == "app_clap_serde 1.0\n"

    def test_no_version_no_option(self) -> None:
        cli = build_click_command(Command(name="tool"))
        assert all("--version" not in p.opts for p in cli.params)

    def test_subcommand_invocation(self, app_command: Command) -> None:
        result = CliRunner().invoke(build_click_command(app_command), ["sub2", "deep"])
        assert result.exit_code == 0

    def test_group_runs_without_subcommand(self, app_command: Command) -> None:
        result = CliRunner().invoke(build_click_command(app_command), ["-a", "x"])
        assert result.exit_code == 0

    def test_parsed_values(self, app_command: Command) -> None:
        cli = build_click_command(app_command)
        ctx = cli.make_context("app_clap_serde", ["-a", "red", "--musa_spp", "long"])
        assert ctx.params == {"apple": "red", "banana": "long"}

    def test_unknown_option_is_rejected(self) -> None:
        cli = build_click_command(Command(name="tool"))
        result = CliRunner().invoke(cli, ["--nope"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class TestBuildParam:
    def test_short_only_option(self) -> None:
        param = build_param(Argument(name="apple", short="a"))
        assert isinstance(param, click.Option)
        assert param.name == "apple"
        assert param.opts == ["-a"]

    def test_long_and_aliases(self) -> None:
        param = build_param(
            Argument(name="banana", short="b", long="banana", aliases=("musa_spp",))
        )
        assert isinstance(param, click.Option)
        assert param.opts == ["-b", "--banana", "--musa_spp"]

    def test_bare_argument_is_optional_positional(self) -> None:
        param = build_param(Argument(name="input"))
        assert isinstance(param, click.Argument)
        assert param.required is False

    def test_dashed_name_becomes_identifier(self) -> None:
        param = build_param(Argument(name="dry-run", long="dry-run"))
        assert param.name == "dry_run"

    def test_positional_value(self) -> None:
        cli = build_click_command(Command(name="tool").arg(Argument(name="input")))
        assert cli.make_context("tool", ["file.txt"]).params == {"input": "file.txt"}
        assert cli.make_context("tool", []).params == {"input": None}

    def test_bare_argument_is_an_option_when_not_positional(self) -> None:
        param = build_param(Argument(name="dry-run"), positional=False)
        assert isinstance(param, click.Option)
        assert param.opts == ["--dry-run"]
        assert param.name == "dry_run"


class TestGroupArguments:
    """Bare arguments on a command with subcommands."""

    @pytest.fixture
    def cli(self) -> click.Command:
        leaf = Command(name="build").arg(Argument(name="input"))
        return build_click_command(
            Command(name="app").arg(Argument(name="target")).subcommand(leaf)
        )

    def test_rendered_as_option(self, cli: click.Command) -> None:
        (param,) = cli.params
        assert isinstance(param, click.Option)
        assert param.opts == ["--target"]

    def test_subcommand_name_is_not_captured(self, cli: click.Command) -> None:
        assert cli.make_context("app", ["build"]).params == {"target": None}

    def test_option_value_before_subcommand(self, cli: click.Command) -> None:
        ctx = cli.make_context("app", ["--target", "x86", "build"])
        assert ctx.params == {"target": "x86"}

    def test_leaf_keeps_its_positional(self, cli: click.Command) -> None:
        result = CliRunner().invoke(cli, ["--target", "x86", "build", "file.txt"])
        assert result.exit_code == 0, result.output
        leaf = cli.commands["build"]
        assert leaf.make_context("build", ["file.txt"]).params == {"input": "file.txt"}


# ---------------------------------------------------------------------------
# Duplicates
# ---------------------------------------------------------------------------


class TestDuplicates:
    def test_last_subcommand_wins(
        self, plain_output: OutputManager, capsys: pytest.CaptureFixture[str]
    ) -> None:
        command = (
            Command(name="app")
            .subcommand(Command(name="a").with_about("first"))
            .subcommand(Command(name="a").with_about("second"))
        )
        cli = build_click_command(command)
        assert cli.commands["a"].help == "second"
        err = capsys.readouterr().err
        assert "Duplicate subcommand 'a' in 'app'" in err

    def test_last_argument_wins(
        self, plain_output: OutputManager, capsys: pytest.CaptureFixture[str]
    ) -> None:
        command = (
            Command(name="app")
            .arg(Argument(name="x", short="x"))
            .arg(Argument(name="x", short="y"))
        )
        cli = build_click_command(command)
        assert [p.opts for p in cli.params] == [["-y"]]
        assert "Duplicate argument 'x' in 'app'" in capsys.readouterr().err
