"""Implementation of the `drawsmith locate` command."""

from __future__ import annotations

import shutil

from rich.table import Table
import typer

from drawsmith.adapters.headless import XVFB_SHIM, is_headless
from drawsmith.adapters.locator import detect_os, locate_drawio
from drawsmith.core.diagnostics import format_render_error
from drawsmith.core.exceptions import DrawioRenderingError
from drawsmith.core.settings import headless_override

from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state


def locate() -> None:
    """Report where drawio lives and whether a virtual display is needed."""
    state = get_cli_state()
    emitter = CliEmitter()
    try:
        os_kind = detect_os()
        binary = locate_drawio(os_kind, emitter=emitter)
    except DrawioRenderingError as exc:
        emit_error(format_render_error(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    override = headless_override()
    headless = is_headless(override)
    shim = shutil.which(XVFB_SHIM)

    table = Table(show_header=False, box=None)
    table.add_column("key", style="bold")
    table.add_column("value")
    table.add_row("os", os_kind.value)
    table.add_row("drawio", binary)
    headless_text = "yes" if headless else "no"
    if override is not None:
        headless_text = f"{headless_text} (forced)"
    table.add_row("headless", headless_text)
    table.add_row(XVFB_SHIM, shim or "not found")
    state.console.print(table)

    if headless and shim is None:
        emit_error(f"No display is available and {XVFB_SHIM} is not installed.")
        raise typer.Exit(code=1)
