"""Recursive descent deserializer turning a decoded document into a :class:`Command`.

The input is the generic, self-describing data model shared by every
decoder in :mod:`maru.schema.loader`: mappings, sequences and scalars.
:func:`deserialize` inspects a value's shape and hands it to a
:class:`Visitor`, which accepts the shapes that are valid at that schema
position and rejects the rest.

**Visitors**

* :class:`CommandVisitor` -- a command body (``about``, ``name``, ...,
  ``subcommands``, ``args``).
* :class:`SubcommandsVisitor` -- the ``subcommands`` collection, either a
  map of ``name -> body`` or a sequence of single-entry maps.
* :class:`SubcommandEntryVisitor` -- one single-entry map of the sequence form.
* :class:`ArgsVisitor` / :class:`ArgEntryVisitor` -- the same pair for ``args``.
* :class:`ArgumentVisitor` -- an argument body (``short``, ``long``, ``aliases``).

A name supplied by the container (map key, or sole key of a single-entry
map) is injected into the child node *before* its body is walked, see
:func:`seed_command` and :func:`seed_argument`. An explicit ``name`` key in a
command body still overwrites the seeded name.

Every error is raised immediately as a :class:`~maru.exceptions.DocumentError`
carrying the location path of the offending value; no partial tree is
returned.
"""

from __future__ import annotations

import dataclasses
import datetime
from collections.abc import Mapping
from typing import Any, Callable, Generic, Optional, TypeVar

from maru.exceptions import (
    ArityError,
    Location,
    MissingFieldError,
    PathElement,
    RecursionLimitError,
    TypeMismatchError,
    UnknownFieldError,
    WrongShapeError,
)
from maru.models import DEFAULT_MAX_DEPTH, Argument, Command

T = TypeVar("T")

COMMAND_FIELDS: tuple[str, ...] = (
    "after_help",
    "about",
    "author",
    "name",
    "version",
    "subcommands",
    "args",
)
"""Keys recognized in a command body."""

ARGUMENT_FIELDS: tuple[str, ...] = ("short", "long", "aliases")
"""Keys recognized in an argument body."""

PLACEHOLDER_NAME = "tmp_name"
"""Name given to an unseeded root command until its ``name`` key is read."""

_COMMAND_SETTERS: dict[str, Callable[[Command, str], Command]] = {
    "after_help": Command.with_after_help,
    "about": Command.with_about,
    "author": Command.with_author,
    "name": Command.with_name,
    "version": Command.with_version,
}


# ---------------------------------------------------------------------------
# Traversal context
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class Context:
    """Where the engine currently is in the document.

    Attributes:
        path: Keys and indices leading from the root to the current value.
        depth: Number of enclosing subcommand bodies (the root is ``0``).
        max_depth: Deepest subcommand nesting accepted.
    """

    path: Location = ()
    depth: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH

    def child(self, key: PathElement) -> Context:
        return dataclasses.replace(self, path=self.path + (key,))

    def nested(self, key: PathElement) -> Context:
        """Enter a subcommand body, enforcing the depth ceiling."""
        path = self.path + (key,)
        if self.depth + 1 > self.max_depth:
            raise RecursionLimitError(self.max_depth, path)
        return dataclasses.replace(self, path=path, depth=self.depth + 1)


def describe(value: Any) -> str:
    """Return a short human description of a decoded value for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"boolean `{str(value).lower()}`"
    if isinstance(value, int):
        return f"integer `{value}`"
    if isinstance(value, float):
        return f"floating point `{value}`"
    if isinstance(value, str):
        return f"string {value!r}"
    if isinstance(value, (datetime.date, datetime.time)):
        return f"date `{value.isoformat()}`"
    if isinstance(value, Mapping):
        return "map"
    if isinstance(value, (list, tuple)):
        return "sequence"
    return type(value).__name__


# ---------------------------------------------------------------------------
# Shape dispatch
# ---------------------------------------------------------------------------


class Visitor(Generic[T]):
    """Base visitor: every shape is rejected unless a subclass accepts it."""

    expecting = "a value"

    def visit_map(self, value: Mapping[Any, Any], ctx: Context) -> T:
        raise self.invalid(value, ctx)

    def visit_seq(self, value: list[Any], ctx: Context) -> T:
        raise self.invalid(value, ctx)

    def visit_none(self, ctx: Context) -> T:
        raise self.invalid(None, ctx)

    def visit_scalar(self, value: Any, ctx: Context) -> T:
        raise self.invalid(value, ctx)

    def invalid(self, value: Any, ctx: Context) -> WrongShapeError:
        return WrongShapeError(self.expecting, describe(value), ctx.path)


def deserialize(value: Any, visitor: Visitor[T], ctx: Context) -> T:
    """Dispatch *value* to the method of *visitor* matching its shape."""
    if isinstance(value, Mapping):
        return visitor.visit_map(value, ctx)
    if isinstance(value, (list, tuple)):
        return visitor.visit_seq(list(value), ctx)
    if value is None:
        return visitor.visit_none(ctx)
    return visitor.visit_scalar(value, ctx)


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------


def _expect_key(key: Any, ctx: Context) -> str:
    if not isinstance(key, str):
        raise TypeMismatchError("a string key", describe(key), ctx.path)
    return key


def _expect_str(value: Any, ctx: Context) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError("a string", describe(value), ctx.path)
    return value


def _expect_char(value: Any, ctx: Context) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise TypeMismatchError("a character", describe(value), ctx.path)
    return value


def _expect_str_list(value: Any, ctx: Context) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise TypeMismatchError("a sequence of strings", describe(value), ctx.path)
    return [_expect_str(item, ctx.child(index)) for index, item in enumerate(value)]


def _single_entry(
    value: Mapping[Any, Any], field: str, ctx: Context
) -> tuple[str, Any]:
    """Return the sole ``(name, body)`` pair of a single-entry map."""
    if len(value) == 0:
        raise MissingFieldError(field, ctx.path)
    if len(value) > 1:
        raise ArityError(len(value), ctx.path)
    ((key, body),) = value.items()
    return _expect_key(key, ctx), body


# ---------------------------------------------------------------------------
# Name seeding
# ---------------------------------------------------------------------------


def seed_command(name: str) -> Command:
    """Build the command node for a name taken from its container."""
    return Command(name=name)


def seed_argument(name: str) -> Argument:
    """Build the argument node for a name taken from its container."""
    return Argument(name=name)


# ---------------------------------------------------------------------------
# Command visitors
# ---------------------------------------------------------------------------


class CommandVisitor(Visitor[Command]):
    """Walk a command body and return the fully attributed command.

    Args:
        seed: Partially built node whose name is already known. When
            ``None`` the body must provide a ``name`` key.
    """

    expecting = "a command map"

    def __init__(self, seed: Optional[Command] = None):
        self.seed = seed

    def visit_map(self, value: Mapping[Any, Any], ctx: Context) -> Command:
        command = self.seed if self.seed is not None else Command(name=PLACEHOLDER_NAME)
        named = self.seed is not None
        for raw_key, item in value.items():
            key = _expect_key(raw_key, ctx)
            field_ctx = ctx.child(key)
            setter = _COMMAND_SETTERS.get(key)
            if setter is not None:
                command = setter(command, _expect_str(item, field_ctx))
                named = named or key == "name"
            elif key == "subcommands":
                command = deserialize(item, SubcommandsVisitor(command), field_ctx)
            elif key == "args":
                command = deserialize(item, ArgsVisitor(command), field_ctx)
            else:
                raise UnknownFieldError(key, COMMAND_FIELDS, field_ctx.path)
        if not named:
            raise MissingFieldError("name", ctx.path)
        return command

    def visit_none(self, ctx: Context) -> Command:
        # `build:` with no value in YAML declares a subcommand with no attributes.
        if self.seed is None:
            raise self.invalid(None, ctx)
        return self.seed


class SubcommandsVisitor(Visitor[Command]):
    """Append every subcommand of a ``subcommands`` value to *parent*."""

    expecting = "a map or sequence of subcommands"

    def __init__(self, parent: Command):
        self.parent = parent

    def visit_map(self, value: Mapping[Any, Any], ctx: Context) -> Command:
        command = self.parent
        for raw_name, body in value.items():
            name = _expect_key(raw_name, ctx)
            sub = deserialize(body, CommandVisitor(seed_command(name)), ctx.nested(name))
            command = command.subcommand(sub)
        return command

    def visit_seq(self, value: list[Any], ctx: Context) -> Command:
        command = self.parent
        for index, element in enumerate(value):
            sub = deserialize(element, SubcommandEntryVisitor(), ctx.child(index))
            command = command.subcommand(sub)
        return command


class SubcommandEntryVisitor(Visitor[Command]):
    """Parse one ``{name: body}`` element of the sequence form."""

    expecting = "a single-entry map naming a subcommand"

    def visit_map(self, value: Mapping[Any, Any], ctx: Context) -> Command:
        name, body = _single_entry(value, "subcommand", ctx)
        return deserialize(body, CommandVisitor(seed_command(name)), ctx.nested(name))


# ---------------------------------------------------------------------------
# Argument visitors
# ---------------------------------------------------------------------------


class ArgsVisitor(Visitor[Command]):
    """Append every argument of an ``args`` value to *parent*."""

    expecting = "a map or sequence of arguments"

    def __init__(self, parent: Command):
        self.parent = parent

    def visit_map(self, value: Mapping[Any, Any], ctx: Context) -> Command:
        command = self.parent
        for raw_name, body in value.items():
            name = _expect_key(raw_name, ctx)
            argument = deserialize(
                body, ArgumentVisitor(seed_argument(name)), ctx.child(name)
            )
            command = command.arg(argument)
        return command

    def visit_seq(self, value: list[Any], ctx: Context) -> Command:
        command = self.parent
        for index, element in enumerate(value):
            argument = deserialize(element, ArgEntryVisitor(), ctx.child(index))
            command = command.arg(argument)
        return command


class ArgEntryVisitor(Visitor[Argument]):
    """Parse one ``{name: body}`` element of the argument sequence form."""

    expecting = "a single-entry map naming an argument"

    def visit_map(self, value: Mapping[Any, Any], ctx: Context) -> Argument:
        name, body = _single_entry(value, "argument", ctx)
        return deserialize(body, ArgumentVisitor(seed_argument(name)), ctx.child(name))


class ArgumentVisitor(Visitor[Argument]):
    """Walk an argument body and return the fully attributed argument."""

    expecting = "an argument map"

    def __init__(self, seed: Argument):
        self.seed = seed

    def visit_map(self, value: Mapping[Any, Any], ctx: Context) -> Argument:
        argument = self.seed
        for raw_key, item in value.items():
            key = _expect_key(raw_key, ctx)
            field_ctx = ctx.child(key)
            if key == "short":
                argument = argument.with_short(_expect_char(item, field_ctx))
            elif key == "long":
                argument = argument.with_long(_expect_str(item, field_ctx))
            elif key == "aliases":
                argument = argument.with_aliases(_expect_str_list(item, field_ctx))
            else:
                raise UnknownFieldError(key, ARGUMENT_FIELDS, field_ctx.path)
        return argument

    def visit_none(self, ctx: Context) -> Argument:
        return self.seed


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def parse_command(
    document: Any,
    seed: Optional[Command] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Command:
    """Build a :class:`~maru.models.Command` tree from a decoded document.

    Args:
        document: The decoded document, normally a ``dict`` produced by
            :func:`~maru.schema.loader.load_document`.
        seed: Optional partially built command to continue from. Its name
            is kept unless the document carries a ``name`` key.
        max_depth: Deepest subcommand nesting accepted.

    Returns:
        The fully built command tree.

    Raises:
        DocumentError: On the first structural problem found.

    Example::

        >>> parse_command({"name": "app", "args": {"apple": {"short": "a"}}}).args[0].short
        'a'
    """
    return deserialize(document, CommandVisitor(seed), Context(max_depth=max_depth))


def parse_argument(document: Any, name: str) -> Argument:
    """Build an :class:`~maru.models.Argument` named *name* from an argument body."""
    return deserialize(document, ArgumentVisitor(seed_argument(name)), Context())
