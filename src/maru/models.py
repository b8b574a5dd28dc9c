"""Canonical Pydantic models shared across all maru modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Command tree models** -- produced by the deserialization engine and
consumed by the click builder:
    :class:`Argument` and :class:`Command`.

**Configuration models** -- serialised as JSON in the user's config
directory or in a project-local ``maru.json``:
    :class:`OutputConfig` and :class:`GlobalConfig`.

The command tree models are frozen. Every setter returns a new node, so a
node handed to one part of the tree can never be changed from another::

    root = Command(name="app").with_about("demo")
    root = root.subcommand(Command(name="build"))
    root = root.arg(Argument(name="verbose").with_short("v"))
"""

from __future__ import annotations

from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_MAX_DEPTH = 64
"""Default ceiling for subcommand nesting depth."""

MAX_DEPTH_LIMIT = 128
"""Highest nesting ceiling a user may configure; keeps the walk below Python's recursion limit."""


# --- Command tree ---


class Argument(BaseModel):
    """A single CLI flag, option or positional argument.

    An argument declaring ``short``, ``long`` or ``aliases`` becomes a
    ``--flag`` option on the generated click command; an argument declaring
    none of them becomes an optional positional argument.

    Example::

        Argument(name="banana").with_short("b").with_long("banana")
    """

    model_config = ConfigDict(frozen=True)

    name: str
    short: Optional[str] = Field(
        default=None, min_length=1, max_length=1, description="Single-character flag"
    )
    long: Optional[str] = Field(default=None, description="Long flag without dashes")
    aliases: tuple[str, ...] = Field(
        default=(), description="Additional long flags"
    )

    def with_short(self, short: str) -> Argument:
        return self.model_copy(update={"short": short})

    def with_long(self, long: str) -> Argument:
        return self.model_copy(update={"long": long})

    def with_aliases(self, aliases: Iterable[str]) -> Argument:
        return self.model_copy(update={"aliases": tuple(aliases)})

    def to_document(self) -> dict[str, Any]:
        """Return the argument body in canonical document form (name excluded)."""
        body: dict[str, Any] = {}
        if self.short is not None:
            body["short"] = self.short
        if self.long is not None:
            body["long"] = self.long
        if self.aliases:
            body["aliases"] = list(self.aliases)
        return body


class Command(BaseModel):
    """One CLI command or subcommand, with its arguments and nested subcommands.

    Ownership is a strict tree: each child belongs to exactly one parent.
    Children keep their insertion order, duplicates included.

    See Also:
        :func:`~maru.schema.engine.parse_command`: Build a tree from a document.
        :func:`~maru.generator.click_builder.build_click_command`: Convert a
            tree into a click command.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    about: Optional[str] = None
    after_help: Optional[str] = None
    author: Optional[str] = None
    version: Optional[str] = None
    subcommands: tuple[Command, ...] = ()
    args: tuple[Argument, ...] = ()

    def with_name(self, name: str) -> Command:
        return self.model_copy(update={"name": name})

    def with_about(self, about: str) -> Command:
        return self.model_copy(update={"about": about})

    def with_after_help(self, after_help: str) -> Command:
        return self.model_copy(update={"after_help": after_help})

    def with_author(self, author: str) -> Command:
        return self.model_copy(update={"author": author})

    def with_version(self, version: str) -> Command:
        return self.model_copy(update={"version": version})

    def subcommand(self, sub: Command) -> Command:
        """Return a copy with *sub* appended to the subcommands."""
        return self.model_copy(update={"subcommands": self.subcommands + (sub,)})

    def subcommands_from(self, subs: Iterable[Command]) -> Command:
        return self.model_copy(
            update={"subcommands": self.subcommands + tuple(subs)}
        )

    def arg(self, argument: Argument) -> Command:
        """Return a copy with *argument* appended to the arguments."""
        return self.model_copy(update={"args": self.args + (argument,)})

    def args_from(self, arguments: Iterable[Argument]) -> Command:
        return self.model_copy(update={"args": self.args + tuple(arguments)})

    def find_subcommand(self, name: str) -> Optional[Command]:
        """Return the last subcommand called *name*, or ``None``."""
        for sub in reversed(self.subcommands):
            if sub.name == name:
                return sub
        return None

    def find_arg(self, name: str) -> Optional[Argument]:
        """Return the last argument called *name*, or ``None``."""
        for argument in reversed(self.args):
            if argument.name == name:
                return argument
        return None

    def to_document(self) -> dict[str, Any]:
        """Return the canonical document for this command.

        Unset attributes are omitted. Children are emitted in map form,
        falling back to the sequence-of-single-entry-maps form when two
        siblings share a name, so that feeding the result back to
        :func:`~maru.schema.engine.parse_command` rebuilds an equal tree.
        """
        doc: dict[str, Any] = {}
        for key in ("after_help", "about", "author", "name", "version"):
            value = getattr(self, key)
            if value is not None:
                doc[key] = value
        if self.subcommands:
            doc["subcommands"] = _children_document(
                [(sub.name, _subcommand_body(sub)) for sub in self.subcommands]
            )
        if self.args:
            doc["args"] = _children_document(
                [(a.name, a.to_document()) for a in self.args]
            )
        return doc


def _subcommand_body(sub: Command) -> dict[str, Any]:
    body = sub.to_document()
    body.pop("name", None)
    return body


def _children_document(entries: list[tuple[str, dict[str, Any]]]) -> Any:
    names = [name for name, _ in entries]
    if len(set(names)) == len(names):
        return dict(entries)
    return [{name: body} for name, body in entries]


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/maru/config.json``.

    Loaded and saved by :func:`~maru.config.load_global_config` and
    :func:`~maru.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~maru.config.resolve_config`
    for the full precedence chain.
    """

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=MAX_DEPTH_LIMIT,
        description="Maximum nesting depth of subcommands in a document",
    )
    default_shell: Optional[Literal["bash", "zsh", "fish"]] = Field(
        default=None, description="Shell used by `generate` when --shell is omitted"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
