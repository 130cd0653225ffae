"""Detect missing displays and run drawio under a virtual X server."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
import logging
import os
import shutil
import subprocess

from drawsmith.core.exceptions import ShimNotFoundError, UnrecognizedOSError
from drawsmith.core.invocation import PlannedInvocation

from .locator import OSKind, detect_os


_log = logging.getLogger(__name__)

DISPLAY_QUERY_TOOL = "xrandr"
XVFB_SHIM = "xvfb-run"
XVFB_ARGS: tuple[str, ...] = ("--auto-servernum",)
# Electron flags must follow every drawio argument, otherwise drawio takes
# them for input files.
ELECTRON_ARGS: tuple[str, ...] = ("--disable-gpu", "--no-sandbox")


def is_headless(
    override: bool | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> bool:
    """Return whether no graphical display is available.

    An explicit ``override`` is returned as-is without probing. Otherwise
    ``xrandr --query`` decides (non-zero exit means no display); without
    xrandr, only Linux-like systems lacking ``DISPLAY`` count as headless.
    """
    if override is not None:
        return bool(override)

    xrandr = shutil.which(DISPLAY_QUERY_TOOL)
    if xrandr:
        try:
            result = subprocess.run(
                [xrandr, "--query"],
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            _log.debug("xrandr could not be executed: %s", exc)
        else:
            return result.returncode != 0

    env = os.environ if environ is None else environ
    try:
        os_kind = detect_os()
    except UnrecognizedOSError:
        return False
    return os_kind is OSKind.LINUX and not env.get("DISPLAY")


def wrap_xvfb(invocation: PlannedInvocation) -> PlannedInvocation:
    """Return a copy of ``invocation`` running under ``xvfb-run``."""
    shim = shutil.which(XVFB_SHIM)
    if not shim:
        raise ShimNotFoundError()
    arguments = (
        *XVFB_ARGS,
        invocation.executable,
        *invocation.arguments,
        *ELECTRON_ARGS,
    )
    return replace(invocation, executable=shim, arguments=arguments)


__all__ = [
    "DISPLAY_QUERY_TOOL",
    "ELECTRON_ARGS",
    "XVFB_SHIM",
    "is_headless",
    "wrap_xvfb",
]
