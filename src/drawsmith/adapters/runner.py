"""Execute planned invocations and classify drawio's output."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
import logging
import subprocess
from typing import Protocol, runtime_checkable

from drawsmith.core.exceptions import RendererLaunchError, RendererTimeoutError
from drawsmith.core.invocation import PlannedInvocation


_log = logging.getLogger(__name__)

# Electron tries to reach dbus, which containers lack, and still probes the GPU
# with --disable-gpu. Neither affects the export.
BENIGN_PATTERNS: tuple[str, ...] = (
    "Failed to connect to the bus",
    "dri3 extension not supported",
)
ERROR_MARKER = "Error"


class Classification(str, Enum):
    """Outcome of a drawio run as seen from its output."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Combined output of a drawio run and its classification."""

    output: tuple[str, ...]
    classification: Classification
    errors: tuple[str, ...] = ()
    returncode: int | None = None

    @property
    def ok(self) -> bool:
        return self.classification is Classification.SUCCESS


@runtime_checkable
class ErrorDetector(Protocol):
    """Decide whether renderer output denotes a failure."""

    def detect(self, lines: Sequence[str], returncode: int | None = None) -> list[str] | None:
        """Return the lines to report when the run failed, else ``None``."""
        ...


def filter_benign(
    lines: Iterable[str], patterns: Sequence[str] = BENIGN_PATTERNS
) -> list[str]:
    """Drop lines containing any known-harmless environment notice."""
    return [line for line in lines if not any(pattern in line for pattern in patterns)]


class SubstringErrorDetector:
    """Flag output containing ``Error`` once benign noise is removed.

    drawio exits with status 0 even when the export fails, so the exit code is
    ignored. The match is case-sensitive and unanchored; diagram text that
    happens to contain the word will also trigger it.
    """

    def __init__(
        self,
        marker: str = ERROR_MARKER,
        benign: Sequence[str] = BENIGN_PATTERNS,
    ) -> None:
        self.marker = marker
        self.benign = tuple(benign)

    def detect(self, lines: Sequence[str], returncode: int | None = None) -> list[str] | None:
        remaining = filter_benign(lines, self.benign)
        if any(self.marker in line for line in remaining):
            return remaining
        return None


def execute(
    invocation: PlannedInvocation,
    *,
    timeout: float | None = None,
    detector: ErrorDetector | None = None,
) -> ExecutionResult:
    """Run ``invocation`` to completion and classify its combined output."""
    command = invocation.command
    _log.debug("running %s", command)
    try:
        completed = subprocess.run(
            command,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise RendererTimeoutError(timeout or 0.0, command) from exc
    except OSError as exc:
        raise RendererLaunchError(f"Failed to execute drawio ({command[0]}): {exc}") from exc

    lines = tuple((completed.stdout or "").splitlines())
    if completed.returncode != 0:
        _log.debug("drawio exited with status %s", completed.returncode)

    errors = (detector or SubstringErrorDetector()).detect(lines, completed.returncode)
    if errors is None:
        return ExecutionResult(
            output=lines,
            classification=Classification.SUCCESS,
            returncode=completed.returncode,
        )
    return ExecutionResult(
        output=lines,
        classification=Classification.ERROR,
        errors=tuple(errors),
        returncode=completed.returncode,
    )


__all__ = [
    "BENIGN_PATTERNS",
    "ERROR_MARKER",
    "Classification",
    "ErrorDetector",
    "ExecutionResult",
    "SubstringErrorDetector",
    "execute",
    "filter_benign",
]
