"""Shell completion scripts for click commands.

Scripts are rendered by :mod:`click.shell_completion`. At completion time
the shell calls the completed program with ``_<PROG>_COMPLETE`` set, so the
program named by ``prog_name`` must be a click application with the same
command structure as the document it was generated from.

Supported shells: bash, zsh, fish.
"""

from __future__ import annotations

import os
from typing import Optional

import click
from click.shell_completion import get_completion_class

from maru.exceptions import InvalidUsageError

SUPPORTED_SHELLS = ("bash", "zsh", "fish")


def complete_var_for(prog_name: str) -> str:
    """Return the environment variable click uses to trigger completion."""
    return f"_{prog_name}_COMPLETE".replace("-", "_").replace(".", "_").upper()


def generate_completion(
    cli: click.Command,
    shell: str,
    prog_name: Optional[str] = None,
) -> str:
    """Render the completion script of *cli* for *shell*.

    Args:
        cli: The command to complete.
        shell: One of :data:`SUPPORTED_SHELLS`.
        prog_name: Executable name the script registers completion for.
            Defaults to ``cli.name``.

    Returns:
        The completion script source.

    Raises:
        InvalidUsageError: If *shell* is not supported.
    """
    shell = shell.lower()
    completion_class = (
        get_completion_class(shell) if shell in SUPPORTED_SHELLS else None
    )
    if completion_class is None:
        raise InvalidUsageError(
            f"Unsupported shell: {shell}. Supported: {', '.join(SUPPORTED_SHELLS)}"
        )
    name = prog_name or cli.name or "cli"
    return completion_class(cli, {}, name, complete_var_for(name)).source()


def detect_shell() -> Optional[str]:
    """Return the supported shell named by ``$SHELL``, if any."""
    shell = os.path.basename(os.environ.get("SHELL", "")).lower()
    return shell if shell in SUPPORTED_SHELLS else None
