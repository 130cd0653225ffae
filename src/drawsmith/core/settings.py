"""Process-wide settings read at the start of every render."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


HEADLESS_ENV = "DRAWSMITH_HEADLESS"
TIMEOUT_ENV = "DRAWSMITH_TIMEOUT"
_TRUE_VALUES = {"1", "true", "on", "yes"}
_FALSE_VALUES = {"0", "false", "off", "no"}


class DrawioSettings(BaseModel):
    """Global knobs shared by every render call in the process."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    headless: bool | None = None
    timeout: float | None = Field(default=None, gt=0)


_SETTINGS = DrawioSettings()


def get_settings() -> DrawioSettings:
    """Return the mutable settings singleton."""
    return _SETTINGS


def configure(**changes: Any) -> DrawioSettings:
    """Update global settings; pass ``None`` to clear a value."""
    for key, value in changes.items():
        setattr(_SETTINGS, key, value)
    return _SETTINGS


def reset_settings() -> None:
    """Restore every global setting to its default."""
    configure(headless=None, timeout=None)


def _coerce_tristate(value: str | None) -> bool | None:
    if value is None:
        return None
    token = value.strip().lower()
    if token in _TRUE_VALUES:
        return True
    if token in _FALSE_VALUES:
        return False
    return None


def headless_override() -> bool | None:
    """Return the headless override: explicit setting, then environment, else unset."""
    if _SETTINGS.headless is not None:
        return _SETTINGS.headless
    return _coerce_tristate(os.environ.get(HEADLESS_ENV))


def default_timeout() -> float | None:
    """Return the timeout applied when a render request does not set one."""
    if _SETTINGS.timeout is not None:
        return _SETTINGS.timeout
    raw = os.environ.get(TIMEOUT_ENV, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


__all__ = [
    "HEADLESS_ENV",
    "TIMEOUT_ENV",
    "DrawioSettings",
    "configure",
    "default_timeout",
    "get_settings",
    "headless_override",
    "reset_settings",
]
