"""Generate command -- print a shell completion script for a command document.

``maru generate`` loads a TOML, JSON or YAML document, rebuilds its
command tree, converts it into a click command and prints the completion
script for the requested shell. ``--self`` generates the script for maru
itself instead.
"""

from __future__ import annotations

from typing import Optional

import click
import typer

from maru.exceptions import InvalidUsageError, MaruError
from maru.models import MAX_DEPTH_LIMIT
from maru.output import debug, error, print_data, suggest


def generate_command(
    shell: Optional[str] = typer.Option(
        None,
        "--shell",
        "-s",
        help="Target shell (bash, zsh, fish). Defaults to config, MARU_SHELL or $SHELL.",
    ),
    from_toml: Optional[str] = typer.Option(
        None, "--from-toml", help="Read the command document from a TOML file."
    ),
    from_yaml: Optional[str] = typer.Option(
        None, "--from-yaml", help="Read the command document from a YAML file."
    ),
    from_json: Optional[str] = typer.Option(
        None, "--from-json", help="Read the command document from a JSON file."
    ),
    source: Optional[str] = typer.Option(
        None,
        "--from",
        help="Document path, URL or '-' for stdin; the format is detected.",
    ),
    self_: bool = typer.Option(
        False, "--self", help="Generate completion for maru itself."
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        min=1,
        max=MAX_DEPTH_LIMIT,
        help="Maximum subcommand nesting depth.",
    ),
    prog_name: Optional[str] = typer.Option(
        None,
        "--prog-name",
        help="Executable name to register completion for (default: the root command name).",
    ),
) -> None:
    """Print a shell completion script for a command document.

    Exactly one of ``--from-toml``, ``--from-yaml``, ``--from-json``,
    ``--from`` or ``--self`` must be given.

    Args:
        shell: Target shell. Falls back to ``default_shell`` from config
            (or ``MARU_SHELL``) and then to ``$SHELL``.
        from_toml: Path of a TOML document.
        from_yaml: Path of a YAML document.
        from_json: Path of a JSON document.
        source: Path, URL or ``-``; the format is detected from content.
        self_: Generate the completion script of maru itself.
        max_depth: Override the configured nesting ceiling.
        prog_name: Executable name used in the script.

    Raises:
        typer.Exit: With the error's exit code when the document cannot
            be loaded or is invalid, or with code 2 for bad usage.

    Example::

        maru generate --shell bash --from-toml cli.toml > cli.bash
        maru generate --shell zsh --self
    """
    from maru.config import resolve_config
    from maru.generator import build_click_command, detect_shell, generate_completion
    from maru.schema import command_from_source

    sources = [
        (fmt, value)
        for fmt, value in (
            ("toml", from_toml),
            ("yaml", from_yaml),
            ("json", from_json),
            (None, source),
        )
        if value is not None
    ]

    try:
        if len(sources) + int(self_) != 1:
            raise InvalidUsageError(
                "Exactly one of --from-toml, --from-yaml, --from-json, --from "
                "or --self is required."
            )

        config = resolve_config(cli_max_depth=max_depth)
        resolved_shell = shell or config.default_shell or detect_shell()
        if resolved_shell is None:
            raise InvalidUsageError("Could not detect the shell. Pass --shell.")

        if self_:
            cli = _self_command()
            name = prog_name or "maru"
        else:
            fmt, path = sources[0]
            debug(f"Loading command document from {path}")
            command = command_from_source(path, fmt, config.max_depth)
            debug(
                f"Built command '{command.name}' with {len(command.subcommands)} "
                f"subcommand(s) and {len(command.args)} argument(s)"
            )
            cli = build_click_command(command)
            name = prog_name

        script = generate_completion(cli, resolved_shell, name)
    except MaruError as exc:
        error(str(exc))
        if isinstance(exc, InvalidUsageError):
            suggest("Run: maru generate --help")
        raise typer.Exit(code=exc.exit_code) from None

    print_data(script)


def _self_command() -> click.Command:
    """Return the click command backing the maru CLI."""
    from maru.app import app

    return typer.main.get_command(app)
