"""Convert a :class:`~maru.models.Command` tree into a click command.

A command with subcommands becomes a :class:`click.Group`, any other
command a :class:`click.Command`. Each :class:`~maru.models.Argument`
becomes either a ``--flag`` option taking a value (when it declares
``short``, ``long`` or ``aliases``) or an optional positional argument.
On a group a bare argument is rendered as a ``--<name>`` option instead,
so a positional never swallows a subcommand name.

Attribute mapping:

* ``about`` -> help text
* ``after_help`` -> epilog
* ``version`` -> an eager ``--version`` option printing ``<name> <version>``
* ``author`` -> not rendered (click has no counterpart)

Sibling subcommands or arguments sharing a name are resolved in document
order: the last definition wins and a warning is printed to stderr.
"""

from __future__ import annotations

from typing import Any

import click

from maru.models import Argument, Command
from maru.output import warning


def build_click_command(command: Command) -> click.Command:
    """Build a click command (or group) mirroring *command*.

    Args:
        command: The root of the tree, as built by
            :func:`~maru.schema.engine.parse_command`.

    Returns:
        A :class:`click.Group` when *command* has subcommands, otherwise a
        :class:`click.Command`.

    Example::

        cli = build_click_command(parse_command({"name": "app"}))
        cli.main(["--help"], standalone_mode=False)
    """
    params = _build_params(command)
    if not command.subcommands:
        return click.Command(
            name=command.name,
            help=command.about,
            epilog=command.after_help,
            params=params,
        )

    group = click.Group(
        name=command.name,
        help=command.about,
        epilog=command.after_help,
        params=params,
        invoke_without_command=True,
    )
    for sub in command.subcommands:
        if sub.name in group.commands:
            warning(
                f"Duplicate subcommand '{sub.name}' in '{command.name}'; "
                "the last definition wins."
            )
        group.add_command(build_click_command(sub))
    return group


def build_param(argument: Argument, positional: bool = True) -> click.Parameter:
    """Build the click parameter for a single argument.

    A bare argument (no short, long or alias flag) is positional unless
    *positional* is false, in which case it becomes a ``--<name>`` option.
    """
    ident = argument.name.replace("-", "_")
    if argument.short is None and argument.long is None and not argument.aliases:
        if positional:
            return click.Argument([ident], required=False)
        return click.Option(_with_ident([_long_flag(argument.name)], ident))

    decls: list[str] = []
    if argument.short is not None:
        decls.append(f"-{argument.short}")
    if argument.long is not None:
        decls.append(_long_flag(argument.long))
    decls.extend(_long_flag(alias) for alias in argument.aliases)
    return click.Option(_with_ident(decls, ident))


def _with_ident(decls: list[str], ident: str) -> list[str]:
    if ident.isidentifier():
        decls.append(ident)
    return decls


def _long_flag(name: str) -> str:
    return name if name.startswith("-") else f"--{name}"


def _build_params(command: Command) -> list[click.Parameter]:
    positional = not command.subcommands
    params: dict[str, click.Parameter] = {}
    for argument in command.args:
        if argument.name in params:
            warning(
                f"Duplicate argument '{argument.name}' in '{command.name}'; "
                "the last definition wins."
            )
        params[argument.name] = build_param(argument, positional=positional)
    result = list(params.values())
    if command.version is not None:
        result.append(_version_option(command.version))
    return result


def _version_option(version: str) -> click.Option:
    def _show_version(ctx: click.Context, param: click.Parameter, value: Any) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"{ctx.info_name} {version}")
        ctx.exit()

    return click.Option(
        ["--version"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show_version,
        help="Show the version and exit.",
    )
