"""Render draw.io diagrams for documents through the drawio desktop CLI."""

from __future__ import annotations

from drawsmith.adapters.headless import is_headless, wrap_xvfb
from drawsmith.adapters.locator import OSKind, detect_os, locate_drawio
from drawsmith.adapters.runner import (
    Classification,
    ErrorDetector,
    ExecutionResult,
    SubstringErrorDetector,
    execute,
)
from drawsmith.adapters.translator import translate_options
from drawsmith.core.exceptions import (
    BinaryNotExecutableWarning,
    BinaryNotFoundError,
    BinaryPathMissingWarning,
    DrawioRenderingError,
    DrawioWarning,
    InvalidOptionsError,
    OptionFormatMismatchWarning,
    RendererLaunchError,
    RendererReportedError,
    RendererReportedWarning,
    RendererTimeoutError,
    ShimNotFoundError,
    SourceNotFoundError,
    SourceUnspecifiedError,
    UnrecognizedOSError,
)
from drawsmith.core.invocation import PlannedInvocation
from drawsmith.core.options import DiagramFormat, OnError, OutputKind, RenderOptions
from drawsmith.core.settings import configure, get_settings, reset_settings
from drawsmith.engine import RenderOutcome, Severity, render_diagram, source_checksum
from drawsmith.plugin import install, uninstall
from drawsmith.version import get_version


__version__ = get_version()

__all__ = [
    "BinaryNotExecutableWarning",
    "BinaryNotFoundError",
    "BinaryPathMissingWarning",
    "Classification",
    "DiagramFormat",
    "DrawioRenderingError",
    "DrawioWarning",
    "ErrorDetector",
    "ExecutionResult",
    "InvalidOptionsError",
    "OSKind",
    "OnError",
    "OptionFormatMismatchWarning",
    "OutputKind",
    "PlannedInvocation",
    "RenderOptions",
    "RenderOutcome",
    "RendererLaunchError",
    "RendererReportedError",
    "RendererReportedWarning",
    "RendererTimeoutError",
    "Severity",
    "ShimNotFoundError",
    "SourceNotFoundError",
    "SourceUnspecifiedError",
    "SubstringErrorDetector",
    "UnrecognizedOSError",
    "__version__",
    "configure",
    "detect_os",
    "execute",
    "get_settings",
    "get_version",
    "install",
    "is_headless",
    "locate_drawio",
    "render_diagram",
    "reset_settings",
    "source_checksum",
    "translate_options",
    "uninstall",
    "wrap_xvfb",
]
