"""Exception and warning hierarchy for draw.io rendering."""

from __future__ import annotations

from collections.abc import Sequence


class DrawioRenderingError(RuntimeError):
    """Base exception for fatal draw.io rendering failures."""


class UnrecognizedOSError(DrawioRenderingError):
    """Raised when the operating system cannot be classified."""

    def __init__(self, os_name: str) -> None:
        self.os_name = os_name
        super().__init__(
            f"Can't find the path to drawio: your OS '{os_name}' was not recognized. "
            "Set the path to drawio with the 'engine.path' option."
        )


class BinaryNotFoundError(DrawioRenderingError):
    """Raised when no draw.io executable can be located."""

    def __init__(self, os_kind: str) -> None:
        self.os_kind = os_kind
        super().__init__(
            f"Can't find the path to drawio. Is drawio installed on your OS ('{os_kind}')? "
            "Set the path to drawio with the 'engine.path' option."
        )


class ShimNotFoundError(DrawioRenderingError):
    """Raised when a headless environment lacks the xvfb-run shim."""

    def __init__(self) -> None:
        super().__init__(
            "xvfb-run must be installed in a headless environment: no display was "
            "detected and drawio requires one. If this should not be a headless "
            "environment, make sure the DISPLAY environment variable is set."
        )


class SourceUnspecifiedError(DrawioRenderingError):
    """Raised when the diagram source path is missing or empty."""

    def __init__(self) -> None:
        super().__init__(
            "Path to source file 'src' must be specified. "
            "Set the 'src' option to a valid drawio diagram."
        )


class SourceNotFoundError(DrawioRenderingError):
    """Raised when the diagram source path does not exist."""

    def __init__(self, src: str, cwd: str | None = None) -> None:
        self.src = src
        self.cwd = cwd
        message = f"Source file '{src}' does not exist. Set the 'src' option to a valid drawio diagram."
        if cwd:
            message = f"{message} (current directory was '{cwd}')"
        super().__init__(message)


class InvalidOptionsError(DrawioRenderingError):
    """Raised when an option set fails validation."""


class RendererLaunchError(DrawioRenderingError):
    """Raised when the renderer process cannot be started at all."""


class RendererTimeoutError(DrawioRenderingError):
    """Raised when the renderer does not finish within the allotted time."""

    def __init__(self, timeout: float, command: Sequence[str] = ()) -> None:
        self.timeout = timeout
        self.command = tuple(command)
        super().__init__(f"drawio did not finish within {timeout:g} seconds")


class RendererReportedError(DrawioRenderingError):
    """Raised when drawio reported an error and the policy is 'stop'."""

    def __init__(self, lines: Sequence[str]) -> None:
        self.lines = tuple(lines)
        detail = "\n".join(self.lines)
        super().__init__(f"drawio reported an error:\n{detail}" if detail else "drawio reported an error")


class DrawioWarning(UserWarning):
    """Base category for non-fatal draw.io diagnostics."""


class BinaryPathMissingWarning(DrawioWarning):
    """The drawio path does not exist; execution is attempted anyway."""


class BinaryNotExecutableWarning(DrawioWarning):
    """The drawio path is not executable; execution is attempted anyway."""


class OptionFormatMismatchWarning(DrawioWarning):
    """An option is not meaningful for the selected output format."""


class RendererReportedWarning(DrawioWarning):
    """drawio reported an error that the 'skip'/'continue' policy downgrades."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "BinaryNotExecutableWarning",
    "BinaryNotFoundError",
    "BinaryPathMissingWarning",
    "DrawioRenderingError",
    "DrawioWarning",
    "InvalidOptionsError",
    "OptionFormatMismatchWarning",
    "RendererLaunchError",
    "RendererReportedError",
    "RendererReportedWarning",
    "RendererTimeoutError",
    "ShimNotFoundError",
    "SourceNotFoundError",
    "SourceUnspecifiedError",
    "UnrecognizedOSError",
    "exception_hint",
    "exception_messages",
]
