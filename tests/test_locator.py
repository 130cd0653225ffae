from __future__ import annotations

import os
from pathlib import Path
import warnings

import pytest

from drawsmith.adapters import locator
from drawsmith.adapters.locator import OSKind, check_binary, detect_os, hint_paths, locate_drawio
from drawsmith.core.exceptions import (
    BinaryNotExecutableWarning,
    BinaryNotFoundError,
    BinaryPathMissingWarning,
    UnrecognizedOSError,
)


posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX permissions required")


@pytest.mark.parametrize(
    ("system", "expected"),
    [
        ("Linux", OSKind.LINUX),
        ("Darwin", OSKind.MACOS),
        ("Windows", OSKind.WINDOWS),
        ("FreeBSD", OSKind.LINUX),
        ("unix", OSKind.LINUX),
    ],
)
def test_detect_os_classifies_known_systems(system: str, expected: OSKind) -> None:
    assert detect_os(system) is expected


def test_detect_os_rejects_unknown_systems() -> None:
    with pytest.raises(UnrecognizedOSError, match="Plan9") as excinfo:
        detect_os("Plan9")
    assert excinfo.value.os_name == "Plan9"
    assert "engine.path" in str(excinfo.value)


def test_locate_prefers_the_search_path(
    monkeypatch: pytest.MonkeyPatch, drawio_binary: Path
) -> None:
    asked: list[str] = []

    def fake_which(name: str) -> str | None:
        asked.append(name)
        return str(drawio_binary) if name == "drawio" else None

    monkeypatch.setattr(locator.shutil, "which", fake_which)

    assert locate_drawio(OSKind.LINUX) == str(drawio_binary)
    assert asked == ["drawio"]


def test_locate_accepts_the_dotted_name(
    monkeypatch: pytest.MonkeyPatch, drawio_binary: Path
) -> None:
    monkeypatch.setattr(
        locator.shutil, "which", lambda name: str(drawio_binary) if name == "draw.io" else None
    )

    assert locate_drawio(OSKind.MACOS) == str(drawio_binary)


def test_locate_on_windows_only_searches_exe_names(monkeypatch: pytest.MonkeyPatch) -> None:
    asked: list[str] = []

    def fake_which(name: str) -> str | None:
        asked.append(name)
        return None

    monkeypatch.setattr(locator.shutil, "which", fake_which)

    with pytest.raises(BinaryNotFoundError) as excinfo:
        locate_drawio(OSKind.WINDOWS)
    assert asked == ["drawio.exe", "draw.io.exe"]
    assert excinfo.value.os_kind == "windows"


def test_locate_falls_back_to_well_known_locations(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, drawio_binary: Path
) -> None:
    monkeypatch.setattr(locator.shutil, "which", lambda _name: None)
    monkeypatch.setattr(
        locator, "hint_paths", lambda _kind: (tmp_path / "missing" / "drawio", drawio_binary)
    )

    assert locate_drawio(OSKind.LINUX) == str(drawio_binary)


def test_locate_raises_when_nothing_is_found(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(locator.shutil, "which", lambda _name: None)
    monkeypatch.setattr(locator, "hint_paths", lambda _kind: (tmp_path / "nope",))

    with pytest.raises(BinaryNotFoundError, match="engine.path") as excinfo:
        locate_drawio(OSKind.LINUX)
    assert excinfo.value.os_kind == "linux"


def test_linux_hint_paths_are_ordered() -> None:
    paths = hint_paths(OSKind.LINUX)
    assert paths[0] == Path("/bin/drawio")
    assert paths[1] == Path("/bin/draw.io")
    assert Path("/opt/drawio/drawio") in paths


@posix_only
def test_macos_hint_paths_expand_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    paths = hint_paths(OSKind.MACOS)

    assert paths[0] == Path("/Applications/draw.io.app/Contents/MacOS/draw.io")
    assert paths[1] == tmp_path / "Applications" / "draw.io.app" / "Contents" / "MacOS" / "draw.io"
    assert Path("/usr/local/bin/drawio") in paths


def test_windows_has_no_hint_paths() -> None:
    assert hint_paths(OSKind.WINDOWS) == ()


def test_check_binary_warns_when_path_is_missing(tmp_path: Path) -> None:
    missing = tmp_path / "drawio"
    with pytest.warns(BinaryPathMissingWarning, match="does not exist"):
        assert check_binary(str(missing)) == str(missing)


@posix_only
def test_check_binary_warns_when_not_executable(tmp_path: Path) -> None:
    binary = tmp_path / "drawio"
    binary.write_text("", encoding="utf-8")
    binary.chmod(0o644)

    with pytest.warns(BinaryNotExecutableWarning, match="executable"):
        assert check_binary(str(binary)) == str(binary)


def test_check_binary_is_silent_for_executables(drawio_binary: Path) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert check_binary(str(drawio_binary)) == str(drawio_binary)


def test_check_binary_routes_warnings_to_emitter(tmp_path: Path, emitter) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        check_binary(str(tmp_path / "drawio"), emitter=emitter)

    assert len(emitter.warnings) == 1
    assert "does not exist" in emitter.warnings[0]
