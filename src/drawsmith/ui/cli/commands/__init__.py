"""CLI command implementations."""

from __future__ import annotations

from .convert import convert
from .locate import locate
from .render import render


__all__ = ["convert", "locate", "render"]
