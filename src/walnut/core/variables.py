"""Run-scoped variable store shared between steps.

A :class:`VariableStore` is created when a run starts, written by any step
through ``ctx.set_variable`` and read through ``ctx.get_variable``. Steps of
one run never execute in parallel, so writes are visible to every later step
in program order without locking.

Example:
    >>> store = VariableStore()
    >>> store.set("order_id", 42)
    >>> store.get("order_id")
    42
    >>> store.get("missing") is ABSENT
    True
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import Any


class _Absent:
    """Marker for a variable that was never set."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __copy__(self) -> _Absent:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Absent:
        return self


ABSENT = _Absent()


class VariableStore:
    """Mutable name -> value mapping owned by one run.

    Last write wins, keys are case-sensitive, there is no versioning.
    Reading a name that was never set returns :data:`ABSENT` rather than
    raising, so a step can use "was this ever set" as a control-flow signal.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def set(self, name: str, value: Any) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Variable names must be strings, got {type(name).__name__}")
        self._data[name] = value

    def get(self, name: str) -> Any:
        return self._data.get(name, ABSENT)

    def has(self, name: str) -> bool:
        return name in self._data

    def delete(self, name: str) -> None:
        self._data.pop(name, None)

    def snapshot(self) -> dict[str, Any]:
        """Return a shallow copy of the current variables."""
        return dict(self._data)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"VariableStore({self._data!r})"


class VariableView(MutableMapping[str, Any]):
    """Dictionary-style window onto a :class:`VariableStore`.

    This is what ``ctx.variable_context`` returns. It holds a reference to
    the store, so writes through the view are writes to the run's store.
    """

    def __init__(self, store: VariableStore) -> None:
        self._store = store

    def __getitem__(self, name: str) -> Any:
        if name not in self._store:
            raise KeyError(name)
        return self._store.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self._store.set(name, value)

    def __delitem__(self, name: str) -> None:
        if name not in self._store:
            raise KeyError(name)
        self._store.delete(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._store.snapshot())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"VariableView({self._store.snapshot()!r})"
