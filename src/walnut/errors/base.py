"""Exception hierarchy for custom method execution.

Every error raised by the runtime derives from :class:`WalnutError` and
carries an :class:`ErrorCode` plus the structured fields a report needs
(action type, expected/actual values, placeholder name). A failure can be
rendered with :meth:`WalnutError.report_line` without looking at a stack.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable identifiers for runtime failures."""

    UNKNOWN = "W000"
    PLACEHOLDER_UNRESOLVED = "W100"
    LOCATOR_UNRESOLVED = "W101"
    CONFIG_INVALID = "W102"
    UNSUPPORTED_CAPABILITY = "W200"
    CONTEXT_BUILD_FAILED = "W201"
    PLUGIN_NOT_FOUND = "W202"
    TIMEOUT = "W300"
    CANCELLED = "W301"
    TRANSPORT_FAILED = "W400"
    EXTRACTION_FAILED = "W401"
    ASSERTION_FAILED = "W500"
    PLUGIN_EXECUTION_FAILED = "W600"


class WalnutError(Exception):
    """Base class for all custom method runtime errors.

    Attributes:
        message: Human readable description.
        code: The error code.
        action_type: Action type of the step that failed, once known.
        details: Extra structured fields rendered into the report line.
    """

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        action_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.action_type = action_type
        self.details = details or {}
        super().__init__(message)

    def report_line(self) -> str:
        """Render the error as a single readable line."""
        prefix = f"[{self.code.value}]"
        if self.action_type:
            prefix = f"{prefix} {self.action_type}:"
        line = f"{prefix} {self.message}"
        if self.details:
            fields = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
            line = f"{line} ({fields})"
        return line

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "type": type(self).__name__,
            "message": self.message,
            "action_type": self.action_type,
            "details": dict(self.details),
        }


class PlaceholderResolutionError(WalnutError):
    """A ``{{name}}`` or ``${...}`` placeholder has no value."""

    code = ErrorCode.PLACEHOLDER_UNRESOLVED

    def __init__(
        self,
        name: str,
        text: str | None = None,
        chain: tuple[str, ...] | None = None,
        **kwargs: Any,
    ) -> None:
        self.name = name
        self.text = text
        self.chain = chain
        details: dict[str, Any] = {"placeholder": name}
        if text is not None:
            details["text"] = text
        message = f"Unresolved placeholder '{name}'"
        if chain:
            details["chain"] = " -> ".join(chain)
            message = f"Placeholder '{name}' never resolves to plain text"
        super().__init__(message, details=details, **kwargs)


class LocatorResolutionError(WalnutError):
    """The method needs an element locator but none was resolved."""

    code = ErrorCode.LOCATOR_UNRESOLVED

    def __init__(self, action_type: str) -> None:
        super().__init__(
            "Method requires an element locator but none was provided",
            action_type=action_type,
        )


class ConfigValidationError(WalnutError):
    """A configuration value is invalid."""

    code = ErrorCode.CONFIG_INVALID

    def __init__(self, message: str, field: str, value: Any = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message, details={"field": field, "value": value})


class UnsupportedCapabilityError(WalnutError):
    """A capability was used on a context variant that does not declare it."""

    code = ErrorCode.UNSUPPORTED_CAPABILITY

    def __init__(self, capability: str, platform: str, available_on: list[str]) -> None:
        self.capability = capability
        self.platform = platform
        self.available_on = available_on
        super().__init__(
            f"Capability '{capability}' is not available on the {platform} context",
            details={"capability": capability, "platform": platform, "available_on": available_on},
        )


class ContextBuildError(WalnutError):
    """The ambient state needed to build a context variant is missing."""

    code = ErrorCode.CONTEXT_BUILD_FAILED


class PluginNotFoundError(WalnutError):
    """No method is registered for an action type."""

    code = ErrorCode.PLUGIN_NOT_FOUND

    def __init__(self, action_type: str) -> None:
        super().__init__(f"No method registered for action type '{action_type}'", action_type=action_type)


class TimeoutError(WalnutError):  # noqa: A001
    """An operation exceeded its time bound."""

    code = ErrorCode.TIMEOUT

    def __init__(self, operation: str, timeout_ms: float, elapsed_ms: float | None = None) -> None:
        self.operation = operation
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms
        details: dict[str, Any] = {"timeout_ms": timeout_ms}
        if elapsed_ms is not None:
            details["elapsed_ms"] = round(elapsed_ms, 1)
        super().__init__(f"Timed out waiting for {operation}", details=details)


class CancelledError(WalnutError):
    """The run was aborted while the step was in flight."""

    code = ErrorCode.CANCELLED

    def __init__(self, reason: str = "run aborted", **kwargs: Any) -> None:
        self.reason = reason
        super().__init__(f"Step cancelled: {reason}", **kwargs)


class TransportError(WalnutError):
    """Network-level failure; distinct from a non-2xx HTTP status."""

    code = ErrorCode.TRANSPORT_FAILED

    def __init__(self, message: str, method: str | None = None, url: str | None = None) -> None:
        self.method = method
        self.url = url
        details = {}
        if method and url:
            details["request"] = f"{method} {url}"
        super().__init__(message, details=details)


class ExtractionError(WalnutError):
    """A JSON path did not resolve against a response body."""

    code = ErrorCode.EXTRACTION_FAILED

    def __init__(self, json_path: str, reason: str = "no match") -> None:
        self.json_path = json_path
        super().__init__(
            f"JSON path '{json_path}' did not resolve: {reason}",
            details={"json_path": json_path},
        )


class AssertionFailure(WalnutError):
    """An expectation did not match.

    Attributes:
        kind: Assertion kind (``status``, ``header``, ``body_equals`` ...).
        target: JSON path, header name, selector or predicate involved.
        expected: Expected value.
        actual: Observed value.
    """

    code = ErrorCode.ASSERTION_FAILED

    def __init__(
        self,
        kind: str,
        expected: Any,
        actual: Any,
        target: str | None = None,
        message: str | None = None,
    ) -> None:
        self.kind = kind
        self.target = target
        self.expected = expected
        self.actual = actual
        details: dict[str, Any] = {"expected": expected, "actual": actual}
        if target is not None:
            details = {"target": target, **details}
        if message is None:
            where = f" at {target}" if target is not None else ""
            message = f"Assertion '{kind}' failed{where}: expected {expected!r}, got {actual!r}"
        super().__init__(message, details=details)


class PluginExecutionError(WalnutError):
    """An unexpected exception escaped the method body."""

    code = ErrorCode.PLUGIN_EXECUTION_FAILED

    def __init__(self, action_type: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(
            f"{type(cause).__name__}: {cause}",
            action_type=action_type,
        )
        self.__cause__ = cause
