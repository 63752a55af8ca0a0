"""Method metadata and the ``walnut_method`` declaration.

Every custom method carries a :class:`PluginMetadata`. The runtime reads it
before invocation to decide which context variant to build and whether an
element locator has to be resolved first.

Metadata can be attached with the decorator::

    @walnut_method(
        name="Login to Application",
        action_type="custom_login",
        context="web",
        category="Authentication",
    )
    async def login(ctx):
        ...

or written as a docstring block, which is what exported methods look like::

    async def login(ctx):
        '''@walnut_method
        name: Login to Application
        description: Login with username and password using test data
        actionType: custom_login
        context: web
        needsLocator: false
        category: Authentication
        '''
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

METADATA_ATTR = "__walnut_method__"
DOCSTRING_MARKER = "@walnut_method"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class Platform(str, Enum):
    """Context variant a method runs under."""

    WEB = "web"
    API = "api"
    SHARED = "shared"


@dataclass(frozen=True)
class PluginMetadata:
    """Static descriptor of one custom method."""

    name: str
    action_type: str
    context: Platform = Platform.SHARED
    description: str = ""
    needs_locator: bool = False
    category: str = "General"

    def __post_init__(self) -> None:
        if not self.action_type:
            raise ValueError("action_type is required")
        object.__setattr__(self, "context", Platform(self.context))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PluginMetadata:
        """Build metadata from a mapping with snake_case or camelCase keys."""
        normalized = {_snake(k): v for k, v in data.items()}
        needs_locator = normalized.get("needs_locator", False)
        if isinstance(needs_locator, str):
            needs_locator = needs_locator.strip().lower() in ("true", "yes", "1")
        return cls(
            name=str(normalized.get("name") or normalized.get("action_type", "")),
            action_type=str(normalized.get("action_type", "")),
            context=Platform(str(normalized.get("context", "shared")).strip().lower()),
            description=str(normalized.get("description", "")),
            needs_locator=bool(needs_locator),
            category=str(normalized.get("category", "General")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "action_type": self.action_type,
            "context": self.context.value,
            "needs_locator": self.needs_locator,
            "category": self.category,
        }


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key.strip()).lower()


def walnut_method(
    *,
    name: str,
    action_type: str,
    context: Platform | str = Platform.SHARED,
    description: str = "",
    needs_locator: bool = False,
    category: str = "General",
) -> Callable[[F], F]:
    """Attach :class:`PluginMetadata` to a method function."""
    metadata = PluginMetadata(
        name=name,
        action_type=action_type,
        context=Platform(context),
        description=description,
        needs_locator=needs_locator,
        category=category,
    )

    def decorator(func: F) -> F:
        setattr(func, METADATA_ATTR, metadata)
        return func

    return decorator


def parse_metadata_block(doc: str | None) -> PluginMetadata | None:
    """Parse a ``@walnut_method`` docstring block.

    Returns None when the docstring carries no marker. Lines after the
    marker are ``key: value`` pairs; parsing stops at the first blank line.
    """
    if not doc:
        return None
    lines = inspect.cleandoc(doc).splitlines()
    for start, line in enumerate(lines):
        stripped = line.strip().lstrip("*").strip()
        if stripped.startswith(DOCSTRING_MARKER):
            break
    else:
        return None

    fields: dict[str, str] = {}
    for line in lines[start + 1 :]:
        stripped = line.strip().lstrip("*").strip()
        if not stripped or stripped == "*/":
            break
        key, sep, value = stripped.partition(":")
        if not sep:
            continue
        fields[key.strip()] = value.strip()

    return PluginMetadata.from_dict(fields)


def get_metadata(func: Callable[..., Any]) -> PluginMetadata | None:
    """Return the metadata declared on ``func`` by decorator or docstring."""
    metadata = getattr(func, METADATA_ATTR, None)
    if isinstance(metadata, PluginMetadata):
        return metadata
    return parse_metadata_block(getattr(func, "__doc__", None))
