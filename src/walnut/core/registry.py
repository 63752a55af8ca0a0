"""Registry of custom methods keyed by action type."""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

from walnut.core.metadata import PluginMetadata, get_metadata
from walnut.errors import PluginNotFoundError

logger = logging.getLogger(__name__)

MethodCallable = Callable[[Any], Any]


@dataclass(frozen=True)
class MethodPlugin:
    """A method function paired with its metadata."""

    metadata: PluginMetadata
    func: MethodCallable

    @property
    def action_type(self) -> str:
        return self.metadata.action_type

    @classmethod
    def from_function(cls, func: MethodCallable) -> MethodPlugin:
        metadata = get_metadata(func)
        if metadata is None:
            raise ValueError(f"{getattr(func, '__name__', func)!r} has no @walnut_method metadata")
        return cls(metadata=metadata, func=func)


class MethodRegistry:
    """Stores methods and resolves them by action type.

    Action types are unique: registering a second method under the same
    action type is an error.
    """

    def __init__(self) -> None:
        self._methods: dict[str, MethodPlugin] = {}

    def register(self, method: MethodPlugin | MethodCallable) -> MethodPlugin:
        plugin = method if isinstance(method, MethodPlugin) else MethodPlugin.from_function(method)
        if plugin.action_type in self._methods:
            raise ValueError(f"Action type '{plugin.action_type}' is already registered")
        self._methods[plugin.action_type] = plugin
        logger.debug(f"Registered method {plugin.action_type} ({plugin.metadata.context.value})")
        return plugin

    def get(self, action_type: str) -> MethodPlugin | None:
        return self._methods.get(action_type)

    def resolve(self, action_type: str) -> MethodPlugin:
        plugin = self._methods.get(action_type)
        if plugin is None:
            raise PluginNotFoundError(action_type)
        return plugin

    def all(self) -> list[MethodPlugin]:
        return sorted(self._methods.values(), key=lambda p: (p.metadata.category, p.action_type))

    def clear(self) -> None:
        self._methods.clear()

    def __contains__(self, action_type: object) -> bool:
        return action_type in self._methods

    def __iter__(self) -> Iterator[MethodPlugin]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._methods)

    def load_module(self, module: ModuleType | str) -> list[MethodPlugin]:
        """Register every function in ``module`` that declares metadata."""
        if isinstance(module, str):
            module = importlib.import_module(module)
        registered = []
        for _, func in inspect.getmembers(module, inspect.isfunction):
            if func.__module__ != module.__name__:
                continue
            if get_metadata(func) is None:
                continue
            registered.append(self.register(func))
        return registered

    def load_path(self, path: str | Path) -> list[MethodPlugin]:
        """Import a ``.py`` file, or every ``.py`` file in a directory, and register its methods."""
        path = Path(path)
        if path.is_dir():
            registered = []
            for file in sorted(path.glob("*.py")):
                if file.name.startswith("_"):
                    continue
                registered.extend(self.load_path(file))
            return registered

        if not path.exists():
            raise FileNotFoundError(f"Method file not found: {path}")

        module_name = f"walnut_methods_{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load methods from {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        logger.debug(f"Loaded method file {path}")
        return self.load_module(module)


def default_registry() -> MethodRegistry:
    """Return a new registry holding the bundled sample methods."""
    registry = MethodRegistry()
    registry.load_module("walnut.methods.login")
    registry.load_module("walnut.methods.zip_folder")
    return registry
