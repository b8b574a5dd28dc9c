"""Command documents -- decode TOML/JSON/YAML and rebuild the command tree.

This sub-package is responsible for the first half of the maru pipeline:
turning a raw document (local file, remote URL or stdin) into a
:class:`~maru.models.Command` tree that the generator can consume.

Typical usage::

    from maru.schema import command_from_source

    command = command_from_source("cli.toml")

Sub-modules:

* :mod:`~maru.schema.loader` -- I/O layer (URL, file, stdin) plus format
  detection and decoding.
* :mod:`~maru.schema.engine` -- Recursive descent deserializer walking the
  decoded document with one visitor per schema position.
"""

from __future__ import annotations

from typing import Optional

from maru.models import DEFAULT_MAX_DEPTH, Command
from maru.schema.engine import parse_argument, parse_command
from maru.schema.loader import load_document


def command_from_source(
    source: str,
    fmt: Optional[str] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Command:
    """Load *source* and build its command tree.

    Args:
        source: A URL, file path, or '-' for stdin.
        fmt: Optional format hint (``toml``, ``json`` or ``yaml``).
        max_depth: Deepest subcommand nesting accepted.

    Raises:
        DocumentLoadError: If the document cannot be loaded or decoded.
        DocumentError: If the decoded document does not describe a command.
    """
    return parse_command(load_document(source, fmt), max_depth=max_depth)


__all__ = ["command_from_source", "load_document", "parse_argument", "parse_command"]
