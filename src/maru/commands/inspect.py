"""Inspect command -- show the command tree a document describes.

``maru inspect`` loads a document, rebuilds its command tree and prints it:
a Rich tree on an interactive terminal, indented text when piped, or the
canonical JSON document with ``--json``. Any structural error is reported
with its location, so the command doubles as a validator.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.tree import Tree

from maru.exceptions import MaruError
from maru.models import MAX_DEPTH_LIMIT, Argument, Command
from maru.output import OutputFormat, error, format_data, get_output, print_data


def inspect_command(
    source: str = typer.Argument(
        help="Document path, URL or '-' for stdin."
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Document format (toml, json, yaml). Detected when omitted.",
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        min=1,
        max=MAX_DEPTH_LIMIT,
        help="Maximum subcommand nesting depth.",
    ),
) -> None:
    """Show the command tree described by a document.

    Args:
        source: Path, URL or ``-``.
        fmt: Optional format hint.
        max_depth: Override the configured nesting ceiling.

    Raises:
        typer.Exit: With the error's exit code when the document cannot
            be loaded or is invalid.

    Example::

        maru inspect cli.toml
        maru --json inspect cli.yaml
    """
    from maru.config import resolve_config
    from maru.schema import command_from_source

    try:
        config = resolve_config(cli_max_depth=max_depth)
        command = command_from_source(source, fmt, config.max_depth)
    except MaruError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output = get_output()
    if output.format == OutputFormat.JSON:
        format_data(command.to_document())
    elif output.format == OutputFormat.RICH:
        output.print_renderable(build_tree(command))
    else:
        for line in render_lines(command):
            print_data(line)


def describe_argument(argument: Argument) -> str:
    """Return ``name -s --long (aliases: a, b)`` or ``name (positional)``."""
    flags = []
    if argument.short is not None:
        flags.append(f"-{argument.short}")
    if argument.long is not None:
        flags.append(f"--{argument.long}")
    text = " ".join([argument.name, *flags])
    if argument.aliases:
        text += f" (aliases: {', '.join(argument.aliases)})"
    if not flags and not argument.aliases:
        text += " (positional)"
    return text


def _describe_command(command: Command) -> str:
    text = command.name
    if command.version:
        text += f" {command.version}"
    if command.about:
        text += f" -- {command.about}"
    return text


def render_lines(command: Command, indent: int = 0) -> list[str]:
    """Render *command* as indented plain-text lines."""
    pad = "  " * indent
    lines = [pad + _describe_command(command)]
    for argument in command.args:
        lines.append(f"{pad}  arg {describe_argument(argument)}")
    for sub in command.subcommands:
        lines.extend(render_lines(sub, indent + 1))
    return lines


def build_tree(command: Command, tree: Optional[Tree] = None) -> Tree:
    """Render *command* as a Rich :class:`~rich.tree.Tree`."""
    label = f"[bold]{escape(_describe_command(command))}[/bold]"
    node = Tree(label) if tree is None else tree.add(label)
    for argument in command.args:
        node.add(f"[cyan]{escape(describe_argument(argument))}[/cyan]")
    for sub in command.subcommands:
        build_tree(sub, node)
    return node
