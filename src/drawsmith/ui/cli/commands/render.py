"""Implementation of the `drawsmith render` command."""

from __future__ import annotations

from typing import Any

import typer

from drawsmith.core.diagnostics import format_render_error
from drawsmith.core.exceptions import DrawioRenderingError
from drawsmith.core.options import OnError, OutputKind
from drawsmith.engine import render_diagram

from .._options import (
    BorderOption,
    CropOption,
    EngineOptsOption,
    EnginePathOption,
    FigPathOption,
    FormatOption,
    LabelOption,
    OnErrorOption,
    OutputKindOption,
    PageIndexOption,
    PageRangeOption,
    SourceArgument,
    TimeoutOption,
    TransparentOption,
)
from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, get_cli_state


def render(
    source: SourceArgument,
    fmt: FormatOption = None,
    output_kind: OutputKindOption = OutputKind.OTHER,
    label: LabelOption = None,
    fig_path: FigPathOption = None,
    crop: CropOption = True,
    transparent: TransparentOption = False,
    border: BorderOption = None,
    page_index: PageIndexOption = None,
    page_range: PageRangeOption = None,
    engine_path: EnginePathOption = None,
    engine_opts: EngineOptsOption = None,
    on_error: OnErrorOption = OnError.STOP,
    timeout: TimeoutOption = None,
) -> None:
    """Render a draw.io diagram and print the path of the produced file."""
    options: dict[str, Any] = {
        "src": str(source),
        "label": label,
        "format": fmt,
        "crop": crop,
        "transparent": transparent,
        "border": border,
        "page.index": page_index,
        "page.range": page_range,
        "engine.path": engine_path,
        "engine.opts": list(engine_opts) if engine_opts else None,
        "fig.path": fig_path,
        "on.error": on_error,
        "timeout": timeout,
    }

    try:
        outcome = render_diagram(options, output_kind=output_kind, emitter=CliEmitter())
    except DrawioRenderingError as exc:
        if debug_enabled():
            raise
        emit_error(format_render_error(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if outcome.artifact is None:
        return
    get_cli_state().console.print(str(outcome.artifact), highlight=False, soft_wrap=True)
