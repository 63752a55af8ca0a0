"""Walnut - execution context for custom test methods.

A custom method is a single function that receives a context. The context's
variant (web, api or shared) follows the method's metadata, and carries the
step's params, the run's variable store and the platform's capabilities.

Quick Start:
    from walnut import TestRun, StepInvocation, default_registry

    run = TestRun(default_registry(), base_url="https://shop.example", page=page)
    result = await run.execute([
        StepInvocation("custom_login", params={"username": "bob", "password": "secret"}),
    ])
"""

from __future__ import annotations

from walnut.config import WalnutConfig, load_config
from walnut.context import (
    ApiContext,
    ContextFactory,
    ExecutionContext,
    RunEnvironment,
    SharedContext,
    WebContext,
)
from walnut.core import (
    ABSENT,
    MethodPlugin,
    MethodRegistry,
    Platform,
    PlaceholderResolver,
    PluginMetadata,
    Precedence,
    RunResult,
    StepInvocation,
    StepResult,
    StepStatus,
    VariableStore,
    default_registry,
    walnut_method,
)
from walnut.errors import (
    AssertionFailure,
    CancelledError,
    ContextBuildError,
    ExtractionError,
    LocatorResolutionError,
    PlaceholderResolutionError,
    PluginExecutionError,
    PluginNotFoundError,
    TimeoutError,
    TransportError,
    UnsupportedCapabilityError,
    WalnutError,
)
from walnut.http import ApiResponse, HttpxTransport, RequestOptions
from walnut.runner import PluginInvoker, TestRun, load_suite

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "WalnutConfig",
    "load_config",
    # Core
    "ABSENT",
    "VariableStore",
    "PlaceholderResolver",
    "Precedence",
    "Platform",
    "PluginMetadata",
    "walnut_method",
    "MethodPlugin",
    "MethodRegistry",
    "default_registry",
    "StepInvocation",
    "StepResult",
    "StepStatus",
    "RunResult",
    # Contexts
    "ExecutionContext",
    "WebContext",
    "ApiContext",
    "SharedContext",
    "ContextFactory",
    "RunEnvironment",
    # HTTP
    "ApiResponse",
    "RequestOptions",
    "HttpxTransport",
    # Running
    "PluginInvoker",
    "TestRun",
    "load_suite",
    # Errors
    "WalnutError",
    "PlaceholderResolutionError",
    "LocatorResolutionError",
    "UnsupportedCapabilityError",
    "ContextBuildError",
    "PluginNotFoundError",
    "TimeoutError",
    "CancelledError",
    "TransportError",
    "ExtractionError",
    "AssertionFailure",
    "PluginExecutionError",
]
