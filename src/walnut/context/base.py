"""Base execution context shared by every platform variant.

A context is the single object a custom method receives. It is a tagged
variant: ``platform`` selects the capability table, and the table is fixed
when the context is built. Each variant class registers the public members
it adds over :class:`ExecutionContext`; asking any context for a member that
belongs to another variant raises
:class:`~walnut.errors.UnsupportedCapabilityError` instead of a bare
``AttributeError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, ClassVar

from walnut.core.metadata import Platform
from walnut.core.models import LogEntry
from walnut.core.placeholders import PlaceholderResolver
from walnut.core.variables import VariableStore, VariableView
from walnut.errors import UnsupportedCapabilityError

_CAPABILITIES: dict[Platform, frozenset[str]] = {}


def capabilities_of(platform: Platform | str) -> frozenset[str]:
    """Names a platform variant adds over the base context."""
    return _CAPABILITIES.get(Platform(platform), frozenset())


class ExecutionContext:
    """Members common to web, api and shared contexts.

    Attributes:
        platform: The variant discriminant.
        test_base_url: Base URL of the application under test.
        params: The step's resolved params (read-only).
        args: Positional arguments taken from ``${name}`` markers in the
            step description.
        description: The step description with placeholders resolved.
        locator: The resolved element locator, if the step has one.
    """

    platform: ClassVar[Platform]
    capabilities: ClassVar[frozenset[str]] = frozenset()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        platform = cls.__dict__.get("platform")
        if platform is None:
            return
        base = set(dir(ExecutionContext)) | {"platform"}
        cls.capabilities = frozenset(
            name for name in dir(cls) if not name.startswith("_") and name not in base
        )
        _CAPABILITIES[Platform(platform)] = cls.capabilities

    def __init__(
        self,
        *,
        test_base_url: str,
        store: VariableStore,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] = (),
        description: str | None = None,
        locator: str | None = None,
        resolver: PlaceholderResolver | None = None,
        log_sink: list[LogEntry] | None = None,
        action_type: str = "anonymous",
    ) -> None:
        self._test_base_url = test_base_url
        self.params: Mapping[str, Any] = MappingProxyType(dict(params or {}))
        self.args: tuple[Any, ...] = tuple(args)
        self.description = description
        self.locator = locator
        self._store = store
        self._variables = VariableView(store)
        self._resolver = resolver or PlaceholderResolver()
        self._log_sink = log_sink if log_sink is not None else []
        self._logger = logging.getLogger(f"walnut.methods.{action_type}")

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_"):
            owners = sorted(
                p.value for p, names in _CAPABILITIES.items() if name in names and p is not self.platform
            )
            if owners:
                raise UnsupportedCapabilityError(name, self.platform.value, owners)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    @property
    def test_base_url(self) -> str:
        return self._test_base_url

    @property
    def variable_context(self) -> VariableView:
        """Read/write view onto the run's variable store."""
        return self._variables

    @property
    def logs(self) -> list[LogEntry]:
        return list(self._log_sink)

    def replace_placeholders(self, text: str) -> str:
        """Resolve ``{{name}}`` / ``${...}`` placeholders in ``text``."""
        return self._resolver.resolve(text, self.params, self._variables, self.args)

    def log(self, message: str) -> None:
        """Record a debug message for this step."""
        self._log_sink.append(LogEntry(level="debug", message=str(message)))
        self._logger.debug(message)

    def warn(self, message: str) -> None:
        """Record a warning for this step."""
        self._log_sink.append(LogEntry(level="warning", message=str(message)))
        self._logger.warning(message)

    def set_variable(self, name: str, value: Any) -> None:
        """Store a value for later steps of this run. Committed immediately."""
        self._store.set(name, value)

    def get_variable(self, name: str) -> Any:
        """Read a variable; returns ``ABSENT`` if it was never set."""
        return self._store.get(name)

    def resolve_url(self, url: str) -> str:
        """Join a relative URL onto ``test_base_url``; absolute URLs pass through."""
        if "://" in url or not self.test_base_url:
            return url
        return f"{self.test_base_url.rstrip('/')}/{url.lstrip('/')}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(platform={self.platform.value!r}, test_base_url={self.test_base_url!r})"
