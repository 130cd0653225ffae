"""Convenience alias for the drawio Markdown extension."""

from __future__ import annotations

from .adapters.markdown_extensions.drawio import DrawioExtension, makeExtension


__all__ = ["DrawioExtension", "makeExtension"]
