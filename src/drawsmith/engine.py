"""Render entry point tying option translation, display handling and execution."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from hashlib import sha256
import logging
from pathlib import Path
from typing import Any

from drawsmith.adapters.headless import is_headless, wrap_xvfb
from drawsmith.adapters.runner import ErrorDetector, ExecutionResult, execute
from drawsmith.adapters.translator import translate_options
from drawsmith.core.diagnostics import DiagnosticEmitter, emit_warning, record_event
from drawsmith.core.exceptions import RendererReportedError, RendererReportedWarning
from drawsmith.core.invocation import PlannedInvocation
from drawsmith.core.options import ENGINE_NAME, OnError, OutputKind, RenderOptions
from drawsmith.core.settings import default_timeout, headless_override


_log = logging.getLogger(__name__)

CACHE_DIGEST_KEY = "cache.digest"


class Severity(str, Enum):
    """Severity of a render once the ``on.error`` policy has been applied."""

    SUCCESS = "success"
    RECOVERABLE = "recoverable"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class RenderOutcome:
    """What the host should do with a finished render."""

    artifact: Path | None
    embed: bool
    severity: Severity = Severity.SUCCESS
    invocation: PlannedInvocation | None = None
    result: ExecutionResult | None = None

    @property
    def errors(self) -> tuple[str, ...]:
        return self.result.errors if self.result is not None else ()


def render_diagram(
    options: RenderOptions | Mapping[str, Any],
    *,
    output_kind: OutputKind | str = OutputKind.OTHER,
    emitter: DiagnosticEmitter | None = None,
    detector: ErrorDetector | None = None,
) -> RenderOutcome:
    """Render one diagram and apply the ``on.error`` policy.

    Fatal conditions raise a :class:`~drawsmith.core.exceptions.DrawioRenderingError`
    subclass. With ``on.error: skip`` a reported error yields an outcome that
    must not be embedded; with ``continue`` the host may still embed the
    (possibly missing) artifact.
    """
    opts = RenderOptions.from_mapping(options)
    if not opts.eval:
        return RenderOutcome(artifact=None, embed=False)

    invocation = translate_options(opts, output_kind=output_kind, emitter=emitter)

    override = headless_override()
    record_event(emitter, "drawio_headless", {"override": override})
    headless = is_headless(override)
    if headless:
        invocation = wrap_xvfb(invocation)

    record_event(
        emitter,
        "drawio_render",
        {
            "src": opts.src,
            "output": str(invocation.output_path),
            "format": opts.resolved_format(output_kind).value,
            "headless": headless,
        },
    )

    timeout = opts.timeout if opts.timeout is not None else default_timeout()
    result = execute(invocation, timeout=timeout, detector=detector)

    if result.ok:
        return RenderOutcome(
            artifact=invocation.output_path,
            embed=opts.include,
            invocation=invocation,
            result=result,
        )

    policy = opts.on_error
    record_event(emitter, "drawio_error", {"policy": policy.value, "lines": list(result.errors)})
    if policy is OnError.STOP:
        raise RendererReportedError(result.errors)

    detail = "\n".join(result.errors)
    if policy is OnError.SKIP:
        emit_warning(
            emitter,
            f"drawio reported an error, skipping '{opts.src}':\n{detail}",
            RendererReportedWarning,
        )
        return RenderOutcome(
            artifact=None,
            embed=False,
            severity=Severity.RECOVERABLE,
            invocation=invocation,
            result=result,
        )

    emit_warning(
        emitter,
        f"drawio reported an error, continuing with '{invocation.output_path}':\n{detail}",
        RendererReportedWarning,
    )
    return RenderOutcome(
        artifact=invocation.output_path,
        embed=opts.include,
        severity=Severity.RECOVERABLE,
        invocation=invocation,
        result=result,
    )


def source_checksum(src: str | Path) -> str:
    """Return the SHA-256 digest of a diagram source file."""
    digest = sha256()
    with Path(src).open("rb") as handle:
        for chunk in iter(lambda: handle.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def cache_hook(options: dict[str, Any]) -> dict[str, Any]:
    """Fold the source checksum into cached drawio requests."""
    if not options.get("cache") or options.get("engine", ENGINE_NAME) != ENGINE_NAME:
        return options
    src = options.get("src")
    if not src or not Path(str(src)).is_file():
        _log.debug("cache hook: no readable source for %r", src)
        return options
    updated = dict(options)
    updated[CACHE_DIGEST_KEY] = source_checksum(str(src))
    return updated


__all__ = [
    "CACHE_DIGEST_KEY",
    "RenderOutcome",
    "Severity",
    "cache_hook",
    "render_diagram",
    "source_checksum",
]
