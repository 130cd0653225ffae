"""Typer application wiring for the drawsmith CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler
from rich.traceback import Traceback
import typer

from drawsmith.core.settings import configure

from .commands.convert import convert
from .commands.locate import locate
from .commands.render import render
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Render draw.io diagrams through the drawio desktop CLI.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _configure_logging(verbosity: int) -> None:
    if verbosity < 2:
        return
    level = logging.DEBUG if verbosity >= 3 else logging.INFO
    handler = RichHandler(console=get_cli_state().err_console, show_path=False)
    logger = logging.getLogger("drawsmith")
    logger.handlers[:] = [handler]
    logger.setLevel(level)


@app.callback()
def _app_root(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Show full tracebacks when an unexpected error occurs.",
    ),
    headless: bool | None = typer.Option(
        None,
        "--headless/--no-headless",
        help="Force (or disable) the xvfb-run wrapper instead of probing for a display.",
    ),
) -> None:
    ctx.obj = get_cli_state()
    set_cli_state(verbosity=verbose, debug=debug)
    _configure_logging(verbose)
    configure(headless=headless)


app.command(name="render")(render)
app.command(name="convert")(convert)
app.command(name="locate")(locate)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
