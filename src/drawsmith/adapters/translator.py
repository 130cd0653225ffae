"""Translate render options into a drawio command line."""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Any

from drawsmith.core.diagnostics import DiagnosticEmitter, emit_warning
from drawsmith.core.exceptions import (
    OptionFormatMismatchWarning,
    SourceNotFoundError,
    SourceUnspecifiedError,
)
from drawsmith.core.invocation import PlannedInvocation, resolve_output_path
from drawsmith.core.options import DiagramFormat, OutputKind, RenderOptions

from .locator import check_binary, locate_drawio


def translate_options(
    options: RenderOptions | Mapping[str, Any],
    *,
    output_kind: OutputKind | str = OutputKind.OTHER,
    emitter: DiagnosticEmitter | None = None,
) -> PlannedInvocation:
    """Build the drawio invocation matching ``options``.

    Flags follow the order drawio expects: export, crop, transparent, border,
    page index, page range, passthrough arguments, then ``--output <path>`` and
    the source file as the last two entries.
    """
    opts = RenderOptions.from_mapping(options)

    if not opts.src:
        raise SourceUnspecifiedError()
    if not Path(opts.src).exists():
        raise SourceNotFoundError(opts.src, cwd=os.getcwd())

    fmt = opts.resolved_format(output_kind)

    explicit = opts.engine_path_for()
    if explicit:
        executable = check_binary(explicit, emitter=emitter)
    else:
        executable = locate_drawio(emitter=emitter)

    args: list[str] = ["--export"]

    if opts.crop:
        args.append("--crop")

    if opts.transparent:
        if fmt is not DiagramFormat.PNG:
            # Passed through anyway, drawio ignores it.
            emit_warning(
                emitter,
                f"'transparent' is only supported when 'format' is 'png' (format was "
                f"'{fmt.value}'). Continuing: the result will not be transparent.",
                OptionFormatMismatchWarning,
            )
        args.append("--transparent")

    if opts.border is not None:
        args.extend(["--border", str(opts.border)])

    if opts.page_index is not None:
        args.extend(["--page-index", str(opts.page_index)])

    if opts.page_range is not None:
        if fmt is not DiagramFormat.PDF:
            emit_warning(
                emitter,
                f"'page.range' is only supported when 'format' is 'pdf' (format was "
                f"'{fmt.value}'). Continuing: the result will not respect the range.",
                OptionFormatMismatchWarning,
            )
        args.extend(["--page-range", opts.page_range])

    args.extend(opts.engine_args_for())

    output = resolve_output_path(opts.resolved_label(), fmt.value, opts.fig_path)
    args.extend(["--output", str(output), opts.src])

    return PlannedInvocation(executable=executable, arguments=tuple(args), output_path=output)


__all__ = ["translate_options"]
