from __future__ import annotations

from collections.abc import Mapping
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import markdown
import pytest

from conftest import StubResult
from drawsmith import plugin
from drawsmith.adapters import runner as runner_mod
from drawsmith.adapters.markdown_extensions.drawio import DrawioExtension, build_figure
from drawsmith.core import settings
from drawsmith.core.exceptions import InvalidOptionsError, RendererReportedError
from drawsmith.core.registry import HostRegistry


class _FakeEngine:
    def __init__(self, *, artifact: bool = True, embed: bool = True) -> None:
        self.artifact = artifact
        self.embed = embed
        self.calls: list[dict[str, Any]] = []
        self.contexts: list[dict[str, Any]] = []

    def __call__(self, options: Mapping[str, Any], **context: Any) -> SimpleNamespace:
        self.calls.append(dict(options))
        self.contexts.append(context)
        if not self.artifact:
            return SimpleNamespace(artifact=None, embed=False)
        directory = Path(options.get("fig.path") or ".")
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / f"{options['label']}.svg"
        target.write_text("<svg/>", encoding="utf-8")
        return SimpleNamespace(artifact=target, embed=self.embed)


def _host(engine: _FakeEngine) -> HostRegistry:
    host = plugin.install(HostRegistry())
    host.register_engine("drawio", engine)
    return host


def _convert(text: str, host: HostRegistry, **config: Any) -> str:
    return markdown.markdown(
        text, extensions=["fenced_code", DrawioExtension(registry=host, **config)]
    )


def test_fence_becomes_figure(workdir: Path) -> None:
    engine = _FakeEngine()
    text = "```drawio\nsrc: a.drawio\nlabel: arch\nfig.cap: Overview\n```\n"

    html = _convert(text, _host(engine))

    assert (
        '<figure class="drawio"><img src="arch.svg" alt="Overview" />'
        "<figcaption>Overview</figcaption></figure>"
    ) in html
    assert engine.calls[0]["src"] == "a.drawio"
    assert engine.calls[0]["engine"] == "drawio"
    assert engine.contexts[0]["output_kind"].value == "html"


def test_fences_are_numbered(workdir: Path) -> None:
    engine = _FakeEngine()
    text = "```drawio\nsrc: a.drawio\n```\n\nText\n\n~~~drawio\nsrc: a.drawio\n~~~\n"

    html = _convert(text, _host(engine))

    assert [call["label"] for call in engine.calls] == ["drawio-1", "drawio-2"]
    assert 'src="drawio-1.svg"' in html
    assert 'src="drawio-2.svg"' in html
    assert "<p>Text</p>" in html


def test_reset_restarts_numbering(workdir: Path) -> None:
    engine = _FakeEngine()
    md = markdown.Markdown(extensions=[DrawioExtension(registry=_host(engine))])
    text = "```drawio\nsrc: a.drawio\n```\n"

    md.convert(text)
    md.reset()
    md.convert(text)

    assert [call["label"] for call in engine.calls] == ["drawio-1", "drawio-1"]


def test_skipped_render_embeds_nothing(workdir: Path) -> None:
    engine = _FakeEngine(artifact=False)

    html = _convert("Before\n\n```drawio\nsrc: a.drawio\n```\n\nAfter\n", _host(engine))

    assert "<figure" not in html
    assert "<p>Before</p>" in html
    assert "<p>After</p>" in html


def test_include_false_embeds_nothing(workdir: Path) -> None:
    engine = _FakeEngine(embed=False)

    html = _convert("```drawio\nsrc: a.drawio\ninclude: false\n```\n", _host(engine))

    assert len(engine.calls) == 1
    assert "<figure" not in html


def test_other_languages_pass_through(workdir: Path) -> None:
    engine = _FakeEngine()

    html = _convert("```python\nprint('drawio')\n```\n", _host(engine))

    assert engine.calls == []
    assert '<code class="language-python">' in html


def test_unclosed_fence_is_left_alone(workdir: Path) -> None:
    engine = _FakeEngine()

    _convert("```drawio\nsrc: a.drawio\n", _host(engine))

    assert engine.calls == []


def test_default_fig_path_applies(workdir: Path) -> None:
    engine = _FakeEngine()

    html = _convert("```drawio\nsrc: a.drawio\n```\n", _host(engine), fig_path="figures")

    assert engine.calls[0]["fig.path"] == "figures"
    assert 'src="figures/drawio-1.svg"' in html


def test_explicit_fig_path_wins(workdir: Path) -> None:
    engine = _FakeEngine()

    _convert("```drawio\nsrc: a.drawio\nfig.path: out\n```\n", _host(engine), fig_path="figures")

    assert engine.calls[0]["fig.path"] == "out"


def test_cached_fences_render_once(workdir: Path) -> None:
    engine = _FakeEngine()
    fence = "```drawio\nsrc: a.drawio\nlabel: arch\ncache: true\n```\n"

    html = _convert(f"{fence}\n{fence}", _host(engine))

    assert len(engine.calls) == 1
    assert "cache.digest" in engine.calls[0]
    assert html.count('src="arch.svg"') == 2


@pytest.mark.parametrize("body", ["src: [unclosed", "- a\n- b"])
def test_invalid_fence_body_raises(workdir: Path, body: str) -> None:
    with pytest.raises(InvalidOptionsError):
        _convert(f"```drawio\n{body}\n```\n", _host(_FakeEngine()))


def test_real_engine_stop_policy_propagates(
    workdir: Path, drawio_binary: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        runner_mod.subprocess,
        "run",
        lambda cmd, **_: StubResult(stdout="Error: file is not a diagram\n"),
    )
    settings.configure(headless=False)
    host = plugin.install(HostRegistry())
    text = f"```drawio\nsrc: a.drawio\nengine.path: {drawio_binary}\n```\n"

    with pytest.raises(RendererReportedError):
        _convert(text, host)


def test_real_engine_renders_figure(
    workdir: Path, drawio_binary: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    commands: list[list[str]] = []

    def fake_run(cmd: list[str], **_: Any) -> StubResult:
        commands.append(cmd)
        return StubResult(stdout="a.drawio -> diagram-1.svg\n")

    monkeypatch.setattr(runner_mod.subprocess, "run", fake_run)
    settings.configure(headless=False)
    host = plugin.install(HostRegistry())
    text = f"```drawio\nsrc: a.drawio\nengine.path: {drawio_binary}\n```\n"

    html = _convert(text, host)

    assert commands[0][-3:] == ["--output", "drawio-1.svg", "a.drawio"]
    assert '<img src="drawio-1.svg" alt="drawio-1" />' in html


def test_extension_loads_by_name(workdir: Path) -> None:
    engine = _FakeEngine()

    html = markdown.markdown(
        "```drawio\nsrc: a.drawio\n```\n",
        extensions=["drawsmith.markdown"],
        extension_configs={"drawsmith.markdown": {"registry": _host(engine)}},
    )

    assert 'src="drawio-1.svg"' in html


def test_build_figure_escapes_text() -> None:
    html = build_figure(Path("out/a b.svg"), alt='"quoted"', caption="<b>cap</b>")

    assert html == (
        '<figure class="drawio"><img src="out/a b.svg" alt="&quot;quoted&quot;" />'
        "<figcaption>&lt;b&gt;cap&lt;/b&gt;</figcaption></figure>"
    )


def test_numeric_label_names_the_artifact(
    workdir: Path, drawio_binary: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    commands: list[list[str]] = []

    def fake_run(cmd: list[str], **_: Any) -> StubResult:
        commands.append(cmd)
        return StubResult()

    monkeypatch.setattr(runner_mod.subprocess, "run", fake_run)
    settings.configure(headless=False)
    host = plugin.install(HostRegistry())
    text = f"```drawio\nsrc: a.drawio\nlabel: 2024\nformat: svg\nengine.path: {drawio_binary}\n```\n"

    html = _convert(text, host)

    assert commands[0][-3:] == ["--output", "2024.svg", "a.drawio"]
    assert '<img src="2024.svg" alt="2024" />' in html


def test_skip_warnings_are_logged_by_default(
    workdir: Path,
    drawio_binary: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setattr(
        runner_mod.subprocess,
        "run",
        lambda cmd, **_: StubResult(stdout="Error: file is not a diagram\n"),
    )
    settings.configure(headless=False)
    host = plugin.install(HostRegistry())
    text = f"```drawio\nsrc: a.drawio\non.error: skip\nengine.path: {drawio_binary}\n```\n"

    with caplog.at_level(logging.WARNING, logger="drawsmith"):
        html = _convert(text, host)

    assert "<figure" not in html
    assert "Error: file is not a diagram" in caplog.text
