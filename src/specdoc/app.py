"""Typer application and CLI entry point for specdoc.

The CLI is a thin inspection layer over the documentation model: it resolves
a :class:`~specdoc.models.DocsConfig`, loads every configured specification
into the process-wide :class:`~specdoc.suite.APISuite`, and prints groups,
methods, resources, examples and security schemes.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.

See Also:
    :mod:`specdoc.config`: Configuration precedence.
    :mod:`specdoc.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from specdoc import __version__
from specdoc.commands.config import config_app
from specdoc.commands.inspect import (
    example_command,
    groups_command,
    methods_command,
    resources_command,
    security_command,
)
from specdoc.exit_codes import EXIT_GENERIC_FAILURE

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="specdoc",
    help="Build API documentation models from Swagger/OpenAPI specs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("groups")(groups_command)
app.command("methods")(methods_command)
app.command("resources")(resources_command)
app.command("example")(example_command)
app.command("security")(security_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specdoc {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Route the ``specdoc`` logger hierarchy to stderr through Rich.

    WARNING and above are shown by default, everything with ``verbose``.
    Calling it again replaces the previously installed handler.
    """
    root = logging.getLogger("specdoc")
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    spec: Optional[list[str]] = typer.Option(
        None, "--spec", "-s", help="Specification file, URL or '-' (repeatable)."
    ),
    host: Optional[str] = typer.Option(
        None, "--host", help="host[:port] serving the specification files."
    ),
    collapse: Optional[bool] = typer.Option(
        None,
        "--collapse/--no-collapse",
        help="Merge all specification files into one documentation set.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~specdoc.output.OutputManager` and the log
    handler, and stores the configuration flags in ``ctx.obj`` for
    :func:`~specdoc.commands.inspect.load_suite`.
    """
    from specdoc.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))
    configure_logging(verbose=verbose, no_color=no_color)

    ctx.ensure_object(dict)
    ctx.obj["specs"] = spec or None
    ctx.obj["host"] = host
    ctx.obj["collapse"] = collapse


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``specdoc`` console script.

    :class:`~specdoc.exceptions.SpecdocError` instances escaping a command
    exit with the error's ``exit_code``; any other exception exits with
    :data:`~specdoc.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specdoc.exceptions import SpecdocError
        from specdoc.output import error

        if isinstance(exc, SpecdocError):
            error(str(exc))
            sys.exit(exc.exit_code)
        logger.debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
