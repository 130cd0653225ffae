"""Install the drawio engine and cache hook into a host registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
import weakref

from drawsmith.core.options import ENGINE_NAME
from drawsmith.core.registry import HostRegistry, OptionHook, registry as default_registry
from drawsmith.engine import RenderOutcome, cache_hook, render_diagram


CACHE_HOOK = "cache"

# hook that was active before install(), per registry
_PREVIOUS_HOOKS: weakref.WeakKeyDictionary[HostRegistry, OptionHook | None] = (
    weakref.WeakKeyDictionary()
)


def drawio_engine(options: Mapping[str, Any], **context: Any) -> RenderOutcome:
    """Engine entry point registered under ``drawio``."""
    return render_diagram(options, **context)


def _chain(previous: OptionHook | None) -> OptionHook:
    def hook(options: dict[str, Any]) -> dict[str, Any]:
        if previous is not None:
            options = previous(options)
        return cache_hook(options)

    return hook


def is_installed(target: HostRegistry | None = None) -> bool:
    """Return True when ``install`` has run on the registry."""
    return (target or default_registry) in _PREVIOUS_HOOKS


def install(target: HostRegistry | None = None) -> HostRegistry:
    """Register the engine and chain the cache hook; safe to call repeatedly."""
    reg = target or default_registry
    if reg in _PREVIOUS_HOOKS:
        return reg
    reg.register_engine(ENGINE_NAME, drawio_engine)
    previous = reg.get_hook(CACHE_HOOK)
    reg.set_hook(CACHE_HOOK, _chain(previous))
    _PREVIOUS_HOOKS[reg] = previous
    return reg


def uninstall(target: HostRegistry | None = None) -> None:
    """Remove the engine and restore whatever cache hook preceded ``install``."""
    reg = target or default_registry
    if reg not in _PREVIOUS_HOOKS:
        return
    previous = _PREVIOUS_HOOKS.pop(reg)
    reg.unregister_engine(ENGINE_NAME)
    reg.set_hook(CACHE_HOOK, previous)


__all__ = ["drawio_engine", "install", "is_installed", "uninstall"]
