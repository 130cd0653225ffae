"""Markdown extension rendering ```` ```drawio ```` fences through registered engines.

A fence body is a YAML mapping of render options::

    ```drawio
    src: diagrams/architecture.drawio
    label: architecture
    fig.cap: System overview
    on.error: skip
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from hashlib import sha256
from html import escape
import json
from pathlib import Path
import re
from typing import Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
import yaml

from drawsmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from drawsmith.core.exceptions import InvalidOptionsError
from drawsmith.core.options import OutputKind
from drawsmith.core.registry import HostRegistry, registry as default_registry
from drawsmith.plugin import install


def _load_yaml_mapping(payload: str) -> dict[str, Any]:
    """Parse a YAML string into a mapping, enforcing a dictionary output."""
    if not payload.strip():
        return {}
    try:
        loaded = yaml.safe_load(payload)
    except yaml.YAMLError as exc:
        raise InvalidOptionsError(f"Invalid YAML in drawio fence: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, Mapping):
        raise InvalidOptionsError("drawio fence body must be a YAML mapping.")
    return {str(key): value for key, value in loaded.items()}


def _cache_key(options: Mapping[str, Any]) -> str:
    encoded = json.dumps(options, sort_keys=True, default=str, separators=(",", ":"))
    return sha256(encoded.encode("utf-8")).hexdigest()


def build_figure(artifact: Path, *, alt: str, caption: str | None = None) -> str:
    """Return the HTML embedding a rendered artifact."""
    src = escape(artifact.as_posix(), quote=True)
    image = f'<img src="{src}" alt="{escape(alt, quote=True)}" />'
    if caption:
        return f'<figure class="drawio">{image}<figcaption>{escape(caption)}</figcaption></figure>'
    return f'<figure class="drawio">{image}</figure>'


class _DiagramFencePreprocessor(Preprocessor):
    """Replace engine fences with embedded artifacts."""

    _FENCE_RE = re.compile(r"^\s{0,3}(?P<fence>`{3,}|~{3,})\s*\{?\.?(?P<lang>[\w.+-]*)\}?\s*$")

    def __init__(
        self,
        md: Markdown,
        *,
        host: HostRegistry,
        output_kind: OutputKind,
        fig_path: str | None,
        emitter: DiagnosticEmitter | None,
    ) -> None:
        super().__init__(md)
        self.host = host
        self.output_kind = output_kind
        self.fig_path = fig_path
        self.emitter = emitter
        self.counter = 0
        self.cache: dict[str, Path] = {}

    def run(self, lines: list[str]) -> list[str]:
        result: list[str] = []
        index = 0
        total = len(lines)

        while index < total:
            line = lines[index]
            match = self._FENCE_RE.match(line)
            if match is None:
                result.append(line)
                index += 1
                continue

            fence = match.group("fence")
            end = index + 1
            while end < total:
                closing = self._FENCE_RE.match(lines[end])
                if (
                    closing is not None
                    and not closing.group("lang")
                    and closing.group("fence")[0] == fence[0]
                    and len(closing.group("fence")) >= len(fence)
                ):
                    break
                end += 1

            if end >= total:
                # No closing fence; leave the rest untouched
                result.extend(lines[index:])
                break

            language = match.group("lang")
            if not language or not self.host.has_engine(language):
                result.extend(lines[index : end + 1])
                index = end + 1
                continue

            body = "\n".join(lines[index + 1 : end])
            html = self._render(language, body)
            if html:
                result.extend(["", self.md.htmlStash.store(html), ""])
            index = end + 1

        return result

    def _render(self, language: str, body: str) -> str | None:
        self.counter += 1
        options = _load_yaml_mapping(body)
        options.setdefault("engine", language)
        options.setdefault("label", f"{language}-{self.counter}")
        if self.fig_path and "fig.path" not in options and "fig_path" not in options:
            options["fig.path"] = self.fig_path

        options = self.host.apply_hooks(options)

        key = _cache_key(options) if options.get("cache") else None
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None and cached.exists():
                return self._figure(cached, options)

        engine = self.host.get_engine(language)
        outcome = engine(options, output_kind=self.output_kind, emitter=self.emitter)
        artifact = getattr(outcome, "artifact", None)
        if artifact is None:
            return None
        if key is not None:
            self.cache[key] = Path(artifact)
        if not getattr(outcome, "embed", True):
            return None
        return self._figure(Path(artifact), options)

    @staticmethod
    def _figure(artifact: Path, options: Mapping[str, Any]) -> str | None:
        if options.get("include") is False:
            return None
        caption = options.get("fig.cap") or options.get("fig_cap")
        alt = str(caption or options.get("label") or artifact.stem)
        return build_figure(artifact, alt=alt, caption=str(caption) if caption else None)


class DrawioExtension(Extension):
    """Register the drawio fence preprocessor."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "output_kind": ["html", "Host output family: 'latex', 'html' or 'other'."],
            "fig_path": ["", "Default directory for rendered diagrams."],
            "emitter": ["", "Diagnostic emitter receiving warnings and events (defaults to logging)."],
            "registry": ["", "Host registry providing engines and hooks."],
        }
        self._processor: _DiagramFencePreprocessor | None = None
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        host = self.getConfig("registry") or default_registry
        install(host)
        processor = _DiagramFencePreprocessor(
            md,
            host=host,
            output_kind=OutputKind(str(self.getConfig("output_kind") or "html").lower()),
            fig_path=self.getConfig("fig_path") or None,
            emitter=self.getConfig("emitter") or LoggingEmitter(),
        )
        md.preprocessors.register(processor, "drawsmith_drawio", priority=27)
        md.registerExtension(self)
        self._processor = processor

    def reset(self) -> None:
        """Restart fence numbering between documents."""
        if self._processor is not None:
            self._processor.counter = 0


def makeExtension(**kwargs: Any) -> DrawioExtension:  # noqa: N802 - Markdown expects this entry point name
    """Entry point exposed to Python-Markdown."""
    return DrawioExtension(**kwargs)


__all__ = ["DrawioExtension", "build_figure", "makeExtension"]
