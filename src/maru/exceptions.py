"""Exception hierarchy for maru.

All exceptions inherit from :class:`MaruError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`maru.exit_codes`.
The top-level error handler in :func:`maru.app.main` catches
``MaruError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    MaruError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ConfigError              (exit 1)
    +-- DocumentLoadError        (exit 7)
    +-- DocumentError            (exit 7)
        +-- UnknownFieldError
        +-- MissingFieldError
        +-- ArityError
        +-- TypeMismatchError
        +-- WrongShapeError
        +-- RecursionLimitError

:class:`DocumentError` subclasses are raised by the deserialization engine
and carry the *location path* of the offending value -- a tuple of map keys
and sequence indices leading from the document root to it.
"""

from __future__ import annotations

from typing import Sequence, Union

from maru.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)

PathElement = Union[str, int]
Location = tuple[PathElement, ...]


def format_location(path: Sequence[PathElement]) -> str:
    """Render a location path as ``subcommands.build.args[0].short``.

    Args:
        path: Map keys (``str``) and sequence indices (``int``).

    Returns:
        The dotted representation, or ``<root>`` for an empty path.
    """
    if not path:
        return "<root>"
    rendered = ""
    for element in path:
        if isinstance(element, int):
            rendered += f"[{element}]"
        elif rendered:
            rendered += f".{element}"
        else:
            rendered = str(element)
    return rendered


class MaruError(Exception):
    """Base exception for all maru errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`maru.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(MaruError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(MaruError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class DocumentLoadError(MaruError):
    """Raised when a document cannot be read or decoded as TOML, JSON or YAML."""

    exit_code = EXIT_DOCUMENT_ERROR


class DocumentError(MaruError):
    """Base class for structural errors found while deserializing a document.

    Args:
        message: Description of the problem, without location.
        path: Location path of the offending value.
    """

    exit_code = EXIT_DOCUMENT_ERROR

    def __init__(self, message: str, path: Sequence[PathElement] = ()):
        self.path: Location = tuple(path)
        self.reason = message
        super().__init__(f"{format_location(self.path)}: {message}")


class UnknownFieldError(DocumentError):
    """A key outside the recognized set for the current node kind."""

    def __init__(
        self,
        field: str,
        expected: Sequence[str],
        path: Sequence[PathElement] = (),
    ):
        self.field = field
        self.expected = tuple(expected)
        listed = ", ".join(f"`{name}`" for name in self.expected)
        super().__init__(f"unknown field `{field}`, expected one of {listed}", path)


class MissingFieldError(DocumentError):
    """A required name could not be determined."""

    def __init__(self, field: str, path: Sequence[PathElement] = ()):
        self.field = field
        super().__init__(f"missing field `{field}`", path)


class ArityError(DocumentError):
    """A single-entry record holds more than one entry, so its name is ambiguous."""

    def __init__(self, length: int, path: Sequence[PathElement] = ()):
        self.length = length
        super().__init__(
            f"invalid length {length}, expected a single-entry map", path
        )


class TypeMismatchError(DocumentError):
    """A value was present but of the wrong type (e.g. a two-letter ``short``)."""

    def __init__(self, expected: str, actual: str, path: Sequence[PathElement] = ()):
        self.expected = expected
        self.actual = actual
        super().__init__(f"invalid type: {actual}, expected {expected}", path)


class WrongShapeError(DocumentError):
    """A map or sequence was required but something else was found."""

    def __init__(self, expected: str, actual: str, path: Sequence[PathElement] = ()):
        self.expected = expected
        self.actual = actual
        super().__init__(f"invalid shape: {actual}, expected {expected}", path)


class RecursionLimitError(DocumentError):
    """Subcommands are nested deeper than the configured ceiling."""

    def __init__(self, limit: int, path: Sequence[PathElement] = ()):
        self.limit = limit
        super().__init__(
            f"subcommands nested deeper than the limit of {limit}", path
        )
