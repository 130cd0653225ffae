"""Typed option set accepted by the draw.io engine.

RenderOptions

`src` (`str | None`)
: Path to the draw.io source diagram. Required at render time; it must point
  to an existing file.

`label` (`str | None`)
: Identifier used to name the output artifact (`{label}.{format}`). Defaults
  to the stem of `src`.

`format` (`DiagramFormat | None`)
: Output format. When omitted it follows the host output kind: `pdf` for
  LaTeX, `svg` for HTML and `png` otherwise.

`crop` (`bool`)
: Crop the exported diagram to its content (default on).

`transparent` (`bool`)
: Use a transparent background. Only meaningful for `png`.

`border` (`int | None`)
: Border width around the diagram, in pixels.

`page.index` (`int | None`)
: Page of the diagram to export.

`page.range` (`str | None`)
: Range of pages to export, written `from..to`. Only meaningful for `pdf`.

`engine.path` (`str | dict[str, str] | None`)
: Explicit path to the drawio executable, or a mapping keyed by engine name.

`engine.opts` (`str | list[str] | dict | None`)
: Extra arguments passed to drawio, or a mapping keyed by engine name.

`fig.path` (`str | None`)
: Directory prefix of the output artifact; created when missing.

`fig.cap` (`str | None`)
: Caption used by hosts when embedding the artifact.

`on.error` (`OnError`)
: What to do when drawio reports an error: `stop`, `skip` or `continue`.

`eval`, `include`, `cache` (`bool`)
: Host switches: run the engine at all, embed its result, fold the source
  checksum into the host cache key.

`timeout` (`float | None`)
: Seconds to wait for drawio before giving up.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
import os
import re
import shlex
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidOptionsError


ENGINE_NAME = "drawio"
_PAGE_RANGE_RE = re.compile(r"^\s*\d+\s*\.\.\s*\d+\s*$")
_SEPARATORS = tuple({"/", os.sep, os.altsep or "/"})


class DiagramFormat(str, Enum):
    """Export formats understood by drawio."""

    PDF = "pdf"
    PNG = "png"
    JPG = "jpg"
    SVG = "svg"
    VSDX = "vsdx"
    XML = "xml"


class OnError(str, Enum):
    """Policy applied when drawio reports an error."""

    STOP = "stop"
    SKIP = "skip"
    CONTINUE = "continue"


class OutputKind(str, Enum):
    """Family of the document the host is producing."""

    LATEX = "latex"
    HTML = "html"
    OTHER = "other"

    def default_format(self) -> DiagramFormat:
        """Return the vector or bitmap format best suited to this output."""
        if self is OutputKind.LATEX:
            return DiagramFormat.PDF
        if self is OutputKind.HTML:
            return DiagramFormat.SVG
        return DiagramFormat.PNG


EngineOpts = str | list[str]


class RenderOptions(BaseModel):
    """Validated option set for a single diagram render."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    src: str | None = None
    label: str | None = None
    format: DiagramFormat | None = None
    crop: bool = True
    transparent: bool = False
    border: int | None = Field(default=None, ge=0)
    page_index: int | None = Field(default=None, alias="page.index")
    page_range: str | None = Field(default=None, alias="page.range")
    engine_path: str | dict[str, str] | None = Field(default=None, alias="engine.path")
    engine_opts: EngineOpts | dict[str, EngineOpts] | None = Field(
        default=None, alias="engine.opts"
    )
    fig_path: str | None = Field(default=None, alias="fig.path")
    fig_cap: str | None = Field(default=None, alias="fig.cap")
    on_error: OnError = Field(default=OnError.STOP, alias="on.error")
    eval: bool = True
    include: bool = True
    cache: bool = False
    cache_digest: str | None = Field(default=None, alias="cache.digest")
    timeout: float | None = Field(default=None, gt=0)
    engine: str = ENGINE_NAME

    @field_validator("src", "label", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, os.PathLike):
            value = os.fspath(value)
        # YAML reads `label: 2024` as a number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("engine_path", mode="before")
    @classmethod
    def _coerce_engine_path(cls, value: Any) -> Any:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        if isinstance(value, Mapping):
            return {
                key: os.fspath(item) if isinstance(item, os.PathLike) else item
                for key, item in value.items()
            }
        return value

    @field_validator("crop", "eval", "include", mode="before")
    @classmethod
    def _default_on(cls, value: Any) -> Any:
        return True if value is None else value

    @field_validator("transparent", "cache", mode="before")
    @classmethod
    def _default_off(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().lstrip(".") or None
        return value

    @field_validator("on_error", mode="before")
    @classmethod
    def _lower_policy(cls, value: Any) -> Any:
        if value is None:
            return OnError.STOP
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("page_range", mode="before")
    @classmethod
    def _check_page_range(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value)
        if not _PAGE_RANGE_RE.match(text):
            raise ValueError(f"page.range must be written 'from..to', got {text!r}")
        return "..".join(part.strip() for part in text.split(".."))

    @field_validator("fig_path", mode="before")
    @classmethod
    def _strip_separator(cls, value: Any) -> Any:
        if value is None:
            return None
        text = os.fspath(value) if isinstance(value, os.PathLike) else str(value)
        if not text:
            return None
        if len(text) > 1 and text.endswith(_SEPARATORS):
            text = text[:-1]
        return text

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | RenderOptions) -> RenderOptions:
        """Validate a raw option mapping, raising a rendering error on failure."""
        if isinstance(options, RenderOptions):
            return options
        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or '<options>'}: {error['msg']}"
                for error in exc.errors()
            )
            raise InvalidOptionsError(f"Invalid drawio options: {problems}") from exc

    def resolved_format(self, output_kind: OutputKind | str = OutputKind.OTHER) -> DiagramFormat:
        """Return the explicit format or the default for the host output kind."""
        if self.format is not None:
            return self.format
        return OutputKind(output_kind).default_format()

    def resolved_label(self) -> str:
        """Return the artifact label, falling back to the source stem."""
        if self.label:
            return self.label
        if self.src:
            stem = os.path.splitext(os.path.basename(self.src))[0]
            if stem:
                return stem
        return ENGINE_NAME

    def engine_path_for(self, engine: str | None = None) -> str | None:
        """Return the executable override applicable to the given engine."""
        value = self.engine_path
        if isinstance(value, dict):
            return value.get(engine or self.engine)
        return value

    def engine_args_for(self, engine: str | None = None) -> list[str]:
        """Return passthrough arguments applicable to the given engine."""
        value = self.engine_opts
        if isinstance(value, dict):
            value = value.get(engine or self.engine)
        if value is None:
            return []
        if isinstance(value, str):
            return shlex.split(value)
        return [str(item) for item in value]


__all__ = [
    "ENGINE_NAME",
    "DiagramFormat",
    "OnError",
    "OutputKind",
    "RenderOptions",
]
