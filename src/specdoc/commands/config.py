"""Config commands -- view and modify the user configuration.

Provides the ``specdoc config`` sub-command group for reading, updating and
resetting the user's :class:`~specdoc.models.DocsConfig` file. Project
files (``./specdoc.json``) and environment variables still take precedence
over what is stored here; ``config show --resolved`` prints the merged
result.
"""

from __future__ import annotations

import typer

from specdoc.exceptions import SpecdocError
from specdoc.output import error, info, print_settings, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    resolved: bool = typer.Option(
        False, "--resolved", help="Show the configuration after applying precedence."
    ),
) -> None:
    """Show the current configuration.

    Example::

        specdoc config show
        specdoc --json config show --resolved
    """
    from specdoc.config import get_config_dir, load_config, resolve_config

    try:
        config = resolve_config() if resolved else load_config()
    except SpecdocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    print_settings(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key: spec_filenames, host or collapse."),
    value: str = typer.Argument(help="Value to set. Lists are comma-separated."),
) -> None:
    """Set a configuration value.

    ``spec_filenames`` takes a comma-separated list, ``collapse`` a boolean
    (``true``/``false``) and ``host`` a ``host[:port]`` string; an empty
    ``host`` clears it.

    Example::

        specdoc config set spec_filenames petstore.json,users.yaml
        specdoc config set collapse true
    """
    from specdoc.config import load_config, save_config
    from specdoc.models import DocsConfig

    try:
        data = load_config().model_dump()
    except SpecdocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if key not in data:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    if key == "spec_filenames":
        coerced: object = [v.strip() for v in value.split(",") if v.strip()]
    elif key == "collapse":
        coerced = value.lower() in ("true", "1", "yes", "on")
    else:
        coerced = value or None
    data[key] = coerced

    path = save_config(DocsConfig.model_validate(data))
    success(f"Set {key} = {coerced}")
    info(f"Saved to {path}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Reset the user configuration to defaults.

    Example::

        specdoc config reset --yes
    """
    from specdoc.config import save_config
    from specdoc.models import DocsConfig

    if not yes and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_config(DocsConfig())
    success("Configuration reset to defaults.")
