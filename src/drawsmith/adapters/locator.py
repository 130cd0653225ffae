"""Locate the drawio executable on the current platform."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
import logging
import os
from pathlib import Path
import platform
import shutil

from drawsmith.core.diagnostics import DiagnosticEmitter, emit_warning
from drawsmith.core.exceptions import (
    BinaryNotExecutableWarning,
    BinaryNotFoundError,
    BinaryPathMissingWarning,
    UnrecognizedOSError,
)


_log = logging.getLogger(__name__)


class OSKind(str, Enum):
    """Operating system families with distinct install conventions."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


_UNIX_LIKE = {"linux", "unix", "freebsd", "openbsd", "netbsd", "dragonfly", "sunos"}

UNIX_BINARY_NAMES: tuple[str, ...] = ("drawio", "draw.io")
WINDOWS_BINARY_NAMES: tuple[str, ...] = ("drawio.exe", "draw.io.exe")

LINUX_HINT_PATHS: tuple[str, ...] = (
    "/bin/drawio",
    "/bin/draw.io",
    "/usr/bin/drawio",
    "/usr/bin/draw.io",
    "/usr/local/bin/drawio",
    "/usr/local/bin/draw.io",
    "/opt/drawio/drawio",
    "/opt/drawio/draw.io",
    "/snap/bin/drawio",
)
MACOS_HINT_PATHS: tuple[str, ...] = (
    "/Applications/draw.io.app/Contents/MacOS/draw.io",
    "~/Applications/draw.io.app/Contents/MacOS/draw.io",
    "~/bin/drawio",
    "~/bin/draw.io",
    *LINUX_HINT_PATHS,
)


def detect_os(system: str | None = None) -> OSKind:
    """Classify the running (or given) operating system."""
    name = platform.system() if system is None else system
    token = name.strip().lower()
    if token == "darwin":
        return OSKind.MACOS
    if token == "windows":
        return OSKind.WINDOWS
    if token in _UNIX_LIKE:
        return OSKind.LINUX
    raise UnrecognizedOSError(name or "<unknown>")


def binary_names(os_kind: OSKind) -> tuple[str, ...]:
    """Return executable names looked up on ``PATH``."""
    return WINDOWS_BINARY_NAMES if os_kind is OSKind.WINDOWS else UNIX_BINARY_NAMES


def hint_paths(os_kind: OSKind) -> tuple[Path, ...]:
    """Return well-known install locations probed after ``PATH``."""
    if os_kind is OSKind.MACOS:
        raw = MACOS_HINT_PATHS
    elif os_kind is OSKind.LINUX:
        raw = LINUX_HINT_PATHS
    else:
        raw = ()
    return tuple(Path(candidate).expanduser() for candidate in raw)


def _resolve_cli(names: Sequence[str], hints: Sequence[Path]) -> tuple[str | None, bool]:
    """Return an executable path and whether it was discovered via $PATH."""
    for name in names:
        resolved = shutil.which(name)
        if resolved:
            return resolved, True
    for candidate in hints:
        if candidate.exists():
            return str(candidate), False
    return None, False


def check_binary(path: str, *, emitter: DiagnosticEmitter | None = None) -> str:
    """Warn when ``path`` looks unusable; the process call has the final word."""
    candidate = Path(path)
    if not candidate.exists():
        emit_warning(
            emitter,
            f"The drawio path '{path}' does not exist. "
            "Set the path to drawio with the 'engine.path' option.",
            BinaryPathMissingWarning,
        )
    elif not os.access(candidate, os.X_OK):
        emit_warning(
            emitter,
            f"The drawio binary '{path}' must be executable. "
            "Make sure the binary is executable or set 'engine.path'.",
            BinaryNotExecutableWarning,
        )
    return path


def locate_drawio(
    os_kind: OSKind | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> str:
    """Return the path to drawio, searching ``PATH`` then well-known locations."""
    kind = detect_os() if os_kind is None else os_kind
    path, on_path = _resolve_cli(binary_names(kind), hint_paths(kind))
    if path is None:
        raise BinaryNotFoundError(kind.value)
    if not on_path:
        _log.info("drawio found outside PATH at %s", path)
    return check_binary(path, emitter=emitter)


__all__ = [
    "LINUX_HINT_PATHS",
    "MACOS_HINT_PATHS",
    "OSKind",
    "binary_names",
    "check_binary",
    "detect_os",
    "hint_paths",
    "locate_drawio",
]
