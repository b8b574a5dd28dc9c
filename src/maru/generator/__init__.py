"""CLI generator -- turn a command tree into click objects and completion scripts.

This sub-package is responsible for the second half of the maru pipeline:
taking a :class:`~maru.models.Command` (produced by :mod:`maru.schema`)
and handing it to click, which owns argument matching and completion.

Typical usage::

    from maru.generator import build_click_command, generate_completion

    cli = build_click_command(command)
    print(generate_completion(cli, "bash"))

Sub-modules:

* :mod:`~maru.generator.click_builder` -- One-way conversion of the
  command tree into :class:`click.Group` / :class:`click.Command` objects.
* :mod:`~maru.generator.completion` -- bash, zsh and fish completion
  scripts via :mod:`click.shell_completion`.
"""

from maru.generator.click_builder import build_click_command
from maru.generator.completion import (
    SUPPORTED_SHELLS,
    detect_shell,
    generate_completion,
)

__all__ = [
    "SUPPORTED_SHELLS",
    "build_click_command",
    "detect_shell",
    "generate_completion",
]
