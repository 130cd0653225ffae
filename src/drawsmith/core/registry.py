"""Registry of rendering engines and option hooks consulted by hosts."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol


OptionHook = Callable[[dict[str, Any]], dict[str, Any]]


class Engine(Protocol):
    """Callable turning an option mapping into a render outcome."""

    def __call__(self, options: Mapping[str, Any], **context: Any) -> Any: ...


class HostRegistry:
    """Registry storing engines by fence language and hooks by option name."""

    def __init__(self) -> None:
        self._engines: dict[str, Engine] = {}
        self._hooks: dict[str, OptionHook] = {}

    def register_engine(self, name: str, engine: Engine) -> None:
        """Register an engine under a unique name."""
        self._engines[name] = engine

    def unregister_engine(self, name: str) -> Engine | None:
        """Remove an engine, returning it when it was registered."""
        return self._engines.pop(name, None)

    def get_engine(self, name: str) -> Engine:
        """Return a registered engine or raise ``KeyError``."""
        return self._engines[name]

    def has_engine(self, name: str) -> bool:
        """Return True when an engine has been registered under the given name."""
        return name in self._engines

    def engines(self) -> list[str]:
        return sorted(self._engines)

    def set_hook(self, name: str, hook: OptionHook | None) -> OptionHook | None:
        """Install (or clear, with ``None``) a hook and return the previous one."""
        previous = self._hooks.get(name)
        if hook is None:
            self._hooks.pop(name, None)
        else:
            self._hooks[name] = hook
        return previous

    def get_hook(self, name: str) -> OptionHook | None:
        return self._hooks.get(name)

    def apply_hooks(self, options: Mapping[str, Any]) -> dict[str, Any]:
        """Run every hook whose option name is present in ``options``."""
        current = dict(options)
        for name, hook in list(self._hooks.items()):
            if name in current:
                current = hook(current)
        return current


registry = HostRegistry()


__all__ = ["Engine", "HostRegistry", "OptionHook", "registry"]
