"""Platform-specific execution contexts handed to custom methods."""

from walnut.context.api import ApiContext
from walnut.context.base import ExecutionContext, capabilities_of
from walnut.context.factory import ContextFactory, RunEnvironment
from walnut.context.shared import SharedContext
from walnut.context.web import WebContext

__all__ = [
    "ExecutionContext",
    "WebContext",
    "ApiContext",
    "SharedContext",
    "ContextFactory",
    "RunEnvironment",
    "capabilities_of",
]
