"""Diagnostic abstractions shared across the rendering pipeline."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable
import warnings

from .exceptions import DrawioRenderingError, DrawioWarning, InvalidOptionsError, exception_hint


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def ensure_emitter(emitter: DiagnosticEmitter | None) -> DiagnosticEmitter:
    """Return a usable emitter, defaulting to the null implementation."""
    return emitter if emitter is not None else NullEmitter()


def emit_warning(
    emitter: DiagnosticEmitter | None,
    message: str,
    category: type[DrawioWarning] = DrawioWarning,
    *,
    stacklevel: int = 3,
) -> None:
    """Send a warning through the emitter or fall back to Python warnings."""
    logger.debug("%s: %s", category.__name__, message)
    if emitter is not None:
        emitter.warning(message)
        return
    warnings.warn(message, category, stacklevel=stacklevel)


def record_event(
    emitter: DiagnosticEmitter | None,
    event: str,
    payload: Mapping[str, Any],
) -> None:
    """Forward a structured diagnostic event."""
    ensure_emitter(emitter).event(event, payload)


def format_render_error(error: DrawioRenderingError) -> str:
    """Return a concise rendering failure summary suitable for end users."""
    summary = str(error)
    cause = error.__cause__
    # validation failures already list every problem
    if cause is None or isinstance(error, InvalidOptionsError):
        return summary
    summary = summary.rstrip(".")
    hint = exception_hint(cause)
    if hint and hint not in summary:
        summary = f"{summary}: {hint.rstrip('.')}"
    return f"{summary}. Re-run with --debug for technical details."


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "drawio_render":
        source = data.get("src") or "<unknown>"
        output = data.get("output") or "<unknown>"
        details: list[str] = []
        if data.get("headless"):
            details.append("xvfb")
        if data.get("format"):
            details.append(str(data["format"]))
        suffix = f" ({', '.join(details)})" if details else ""
        return f"Rendering: {source} -> {output}{suffix}"

    if name == "drawio_headless":
        if data.get("override") is not None:
            return f"Headless mode forced to {data['override']}"
        return None

    if name == "drawio_error":
        policy = data.get("policy") or "stop"
        count = len(data.get("lines") or ())
        return f"drawio reported an error ({count} line(s), policy: {policy})"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "emit_warning",
    "ensure_emitter",
    "format_event_message",
    "format_render_error",
    "record_event",
]
