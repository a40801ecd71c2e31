"""Plugin capabilities attached to a document.

A plugin exports named methods. Attaching it to a document registers those
methods in the document's ``PluginRegistry``; they are invoked explicitly
through ``Document.call`` and always receive the document as their first
argument, so they can use its public operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional

from flt.runtime.telemetry import record_event, span

from .errors import PluginError

if TYPE_CHECKING:
    from .document import Document


@dataclass(frozen=True, slots=True)
class PluginMethod:
    """One exported plugin method bound to its plugin instance."""

    name: str
    plugin: "Plugin"
    handler: Callable[..., Any]

    def __post_init__(self) -> None:
        if not self.name:
            raise PluginError("plugin method name cannot be empty")
        if not callable(self.handler):
            raise PluginError(f"plugin method '{self.name}' is not callable")

    def __call__(self, document: "Document", *args: Any, **kwargs: Any) -> Any:
        return self.handler(document, *args, **kwargs)


class Plugin:
    """Base class for plugins; subclasses list their methods in ``exports``."""

    name: str = "plugin"
    exports: tuple[str, ...] = ()

    def setup(self, document: "Document", *args: Any) -> None:
        """Run once when the plugin is attached."""

        del document, args

    def methods(self) -> Iterator[PluginMethod]:
        for method_name in self.exports:
            handler = getattr(self, method_name, None)
            if handler is None:
                raise PluginError(
                    f"Plugin '{self.name}' exports missing method '{method_name}'"
                )
            yield PluginMethod(name=method_name, plugin=self, handler=handler)


class PluginRegistry:
    """Methods attached to one document, keyed by name."""

    def __init__(self, document: "Document") -> None:
        self._document = document
        self._methods: Dict[str, PluginMethod] = {}
        self._plugins: list[Plugin] = []

    def attach(
        self, plugin: Plugin | type[Plugin], *setup: Any, replace: bool = False
    ) -> Plugin:
        instance = plugin() if isinstance(plugin, type) else plugin
        with span(
            "plugins::attach",
            component="plugins",
            metadata={"plugin": instance.name},
        ) as handle:
            methods = list(instance.methods())
            conflicts = [m.name for m in methods if m.name in self._methods]
            if conflicts and not replace:
                handle.add_metadata("conflicts", ",".join(conflicts))
                raise PluginError(
                    f"Plugin '{instance.name}' conflicts on {sorted(conflicts)}"
                )
            for method in methods:
                self._methods[method.name] = method
            self._plugins.append(instance)
            instance.setup(self._document, *setup)
            record_event(
                "plugins.attached",
                data={"plugin": instance.name, "methods": [m.name for m in methods]},
            )
            return instance

    def get(self, name: str) -> Optional[PluginMethod]:
        return self._methods.get(name)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        method = self._methods.get(name)
        if method is None:
            raise PluginError(f"No plugin method named '{name}'")
        return method(self._document, *args, **kwargs)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._methods))

    @property
    def plugins(self) -> tuple[Plugin, ...]:
        return tuple(self._plugins)

    def __contains__(self, name: object) -> bool:
        return name in self._methods


__all__ = ["Plugin", "PluginMethod", "PluginRegistry"]
