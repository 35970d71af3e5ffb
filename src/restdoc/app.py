"""Typer application and CLI entry point for restdoc.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``probe``, ``inspect``, ``diagnostics``, ``build``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app,
mapping :class:`~restdoc.exceptions.RestDocError` to its exit code.

See Also:
    :mod:`restdoc.config`: Build configuration resolution.
    :mod:`restdoc.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any

import typer

from restdoc import __version__
from restdoc.commands.build import build_command
from restdoc.commands.inspect import diagnostics_command, inspect_command, probe_command
from restdoc.exit_codes import EXIT_GENERIC_FAILURE

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="restdoc",
    help="Build REST documentation models from OpenAPI 3.0 descriptions.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("probe")(probe_command)
app.command("inspect")(inspect_command)
app.command("diagnostics")(diagnostics_command)
app.command("build")(build_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"restdoc {__version__}")
        raise typer.Exit()


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
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~restdoc.output.OutputManager` and the
    package logger from CLI flags, and stores ``verbose`` in the Typer
    context for sub-commands.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from restdoc.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``restdoc`` console script.

    Unhandled :class:`~restdoc.exceptions.RestDocError` instances cause a
    clean exit with the error's ``exit_code``. Any other exception is logged
    with its traceback and exits with a generic failure.

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
        from restdoc.exceptions import RestDocError
        from restdoc.output import error

        if isinstance(exc, RestDocError):
            error(str(exc))
            sys.exit(exc.exit_code)
        logger.debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
