"""maru -- Build CLI definitions and shell completions from TOML, JSON or YAML.

This package reads a declarative document describing a command-line
interface (a tree of commands, nested subcommands and arguments) and
reconstructs an equivalent in-memory command tree. The tree is converted
into a :mod:`click` command, from which shell completion scripts are
generated.

Typical workflow::

    maru generate --shell bash --from-toml cli.toml > app.bash
    maru inspect cli.yaml

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the command tree and configuration.
    schema: Document loading and the recursive deserialization engine.
    generator: Conversion to click and completion script generation.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
