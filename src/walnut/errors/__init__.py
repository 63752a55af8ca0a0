"""Walnut error taxonomy.

All runtime failures derive from :class:`WalnutError`. Resolution and locator
errors are raised before any I/O for a step; the others surface from
capability calls or from the method body itself.
"""

from walnut.errors.base import (
    AssertionFailure,
    CancelledError,
    ConfigValidationError,
    ContextBuildError,
    ErrorCode,
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

__all__ = [
    "WalnutError",
    "ErrorCode",
    # Resolution
    "PlaceholderResolutionError",
    "LocatorResolutionError",
    "ConfigValidationError",
    # Context
    "UnsupportedCapabilityError",
    "ContextBuildError",
    "PluginNotFoundError",
    # Execution
    "TimeoutError",
    "CancelledError",
    "TransportError",
    "ExtractionError",
    "AssertionFailure",
    "PluginExecutionError",
]
