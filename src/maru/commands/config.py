"""Config commands -- view and modify global configuration.

Provides the ``maru config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~maru.models.GlobalConfig`). Settings control defaults such as
the subcommand nesting ceiling, the default shell and the output format.
"""

from __future__ import annotations

import typer

from maru.exceptions import MaruError
from maru.output import error, format_data, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Resolves the full precedence chain (global config, ``./maru.json``,
    environment variables) and prints the result.

    Example::

        maru config show
        maru --json config show
    """
    from maru.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except MaruError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_data(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a global configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type and the updated config is validated against
    :class:`~maru.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or Pydantic validation fails.

    Example::

        maru config set max_depth 16
        maru config set default_shell zsh
        maru config set output.format json
    """
    from maru.config import load_global_config, save_global_config
    from maru.models import GlobalConfig

    try:
        config = load_global_config()
    except MaruError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    # Navigate the dot-separated key path.
    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        maru config reset
        maru --force config reset
    """
    from maru.config import save_global_config
    from maru.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
