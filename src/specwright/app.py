"""Typer application factory and CLI entry point for specwright.

This module wires together the top-level Typer application and registers the
built-in commands (``render``, ``merge``, ``resolve`` and the ``inspect``
group).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~specwright.exceptions.SpecwrightError` subclasses map to their exit
code. Any other unhandled exception is written to a crash log under the data
directory.

See Also:
    :mod:`specwright.config`: Configuration resolution.
    :mod:`specwright.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specwright import __version__
from specwright.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specwright",
    help="Assemble, merge and inspect OpenAPI 3.1 documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from specwright.commands.document import merge_command, render_command, resolve_command  # noqa: E402
from specwright.commands.inspect import inspect_app  # noqa: E402

app.command("render")(render_command)
app.command("merge")(merge_command)
app.command("resolve")(resolve_command)
app.add_typer(inspect_app, name="inspect", help="Inspect document contents.")


_log_handler: Optional[logging.Handler] = None


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specwright {__version__}")
        raise typer.Exit()


def _configure_logging(handler: logging.Handler, level: int) -> None:
    """Route the package's log records to *handler*, replacing any previous one."""
    global _log_handler
    package_logger = logging.getLogger("specwright")
    if _log_handler is not None:
        package_logger.removeHandler(_log_handler)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    _log_handler = handler


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
        False, "--json", help="JSON output for tables and info."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only report errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~specwright.output.OutputManager` from
    CLI flags, routes library logging to stderr, and stores shared options in
    the Typer context so that sub-commands can read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress everything on stderr except errors.
        verbose: Enable debug-level diagnostic output.
    """
    from specwright.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    _configure_logging(output.log_handler(), output.log_level)

    ctx.ensure_object(dict)
    ctx.obj["output_format"] = fmt.value if fmt != OutputFormat.AUTO else None
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specwright.config import get_data_dir

    logs_dir = get_data_dir()
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specwright`` console script.

    Unhandled :class:`~specwright.exceptions.SpecwrightError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

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
        from specwright.exceptions import SpecwrightError
        from specwright.output import error

        if isinstance(exc, SpecwrightError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
