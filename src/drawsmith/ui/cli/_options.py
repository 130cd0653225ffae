"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from drawsmith.core.options import DiagramFormat, OnError, OutputKind


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"
ENGINE_PANEL = "Engine"

SourceArgument = Annotated[
    Path,
    typer.Argument(
        metavar="SOURCE",
        help="draw.io diagram to render.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

FormatOption = Annotated[
    DiagramFormat | None,
    typer.Option(
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format. Defaults to the one suited to --output-kind.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputKindOption = Annotated[
    OutputKind,
    typer.Option(
        "--output-kind",
        case_sensitive=False,
        help="Family of the target document, used to pick the default format.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

LabelOption = Annotated[
    str | None,
    typer.Option(
        "--label",
        "-l",
        help="Name of the output file, without extension (defaults to the source stem).",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

FigPathOption = Annotated[
    str | None,
    typer.Option(
        "--fig-path",
        help="Directory receiving the rendered diagram; created when missing.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

CropOption = Annotated[
    bool,
    typer.Option(
        "--crop/--no-crop",
        help="Crop the diagram to its content.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

TransparentOption = Annotated[
    bool,
    typer.Option(
        "--transparent",
        help="Use a transparent background (PNG only).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

BorderOption = Annotated[
    int | None,
    typer.Option(
        "--border",
        min=0,
        help="Border width around the diagram.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

PageIndexOption = Annotated[
    int | None,
    typer.Option(
        "--page-index",
        help="Page of the diagram to export.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

PageRangeOption = Annotated[
    str | None,
    typer.Option(
        "--page-range",
        help="Pages to export, written FROM..TO (PDF only).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

EnginePathOption = Annotated[
    str | None,
    typer.Option(
        "--engine-path",
        help="Path to the drawio executable.",
        rich_help_panel=ENGINE_PANEL,
    ),
]

EngineOptsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--engine-opt",
        help="Extra argument forwarded to drawio (repeatable).",
        rich_help_panel=ENGINE_PANEL,
    ),
]

OnErrorOption = Annotated[
    OnError,
    typer.Option(
        "--on-error",
        case_sensitive=False,
        help="What to do when drawio reports an error.",
        rich_help_panel=ENGINE_PANEL,
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        min=0.0,
        help="Seconds to wait for drawio before aborting.",
        rich_help_panel=ENGINE_PANEL,
    ),
]
