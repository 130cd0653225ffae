"""Planned renderer invocations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PlannedInvocation:
    """Executable, ordered arguments and the artifact they will produce."""

    executable: str
    arguments: tuple[str, ...]
    output_path: Path

    @property
    def command(self) -> list[str]:
        """Return the full argv, executable first."""
        return [self.executable, *self.arguments]


def resolve_output_path(label: str, fmt: str, fig_path: str | None = None) -> Path:
    """Return ``{fig_path}/{label}.{fmt}``, creating its parent directory when missing."""
    filename = f"{label}.{fmt}"
    output = Path(fig_path) / filename if fig_path else Path(filename)
    # labels may carry their own subdirectory
    output.parent.mkdir(parents=True, exist_ok=True)
    return output


__all__ = ["PlannedInvocation", "resolve_output_path"]
