"""Implementation of the `drawsmith convert` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import markdown
import typer

from drawsmith.adapters.markdown_extensions.drawio import DrawioExtension
from drawsmith.core.diagnostics import format_render_error
from drawsmith.core.exceptions import DrawioRenderingError
from drawsmith.core.options import OutputKind

from .._options import FigPathOption, OutputKindOption
from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, get_cli_state


def convert(
    input_path: Annotated[
        Path,
        typer.Argument(
            metavar="INPUT",
            help="Markdown document containing drawio fences.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write HTML here instead of stdout."),
    ] = None,
    output_kind: OutputKindOption = OutputKind.HTML,
    fig_path: FigPathOption = None,
) -> None:
    """Convert a Markdown document to HTML, rendering drawio fences on the way."""
    source = input_path.read_text(encoding="utf-8")
    extension = DrawioExtension(
        output_kind=output_kind.value,
        fig_path=fig_path or "",
        emitter=CliEmitter(),
    )
    try:
        html = markdown.markdown(source, extensions=["fenced_code", extension])
    except DrawioRenderingError as exc:
        if debug_enabled():
            raise
        emit_error(f"{input_path}: {format_render_error(exc)}", exception=exc)
        raise typer.Exit(code=1) from exc

    if output is None:
        get_cli_state().console.print(html, markup=False, highlight=False, soft_wrap=True)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html + "\n", encoding="utf-8")
