"""Tests for the error taxonomy and report lines."""

from __future__ import annotations

import builtins

import pytest

from walnut.errors import (
    AssertionFailure,
    CancelledError,
    ErrorCode,
    LocatorResolutionError,
    PlaceholderResolutionError,
    PluginExecutionError,
    TimeoutError,
    UnsupportedCapabilityError,
    WalnutError,
)


class TestReportLine:
    def test_placeholder_error_names_the_placeholder(self) -> None:
        error = PlaceholderResolutionError("orderId", action_type="custom_checkout")
        line = error.report_line()
        assert line.startswith("[W100] custom_checkout:")
        assert "orderId" in line

    def test_assertion_failure_has_expected_and_actual(self) -> None:
        error = AssertionFailure("body_equals", expected="bob", actual="alice", target="$.name")
        line = error.report_line()
        assert "'bob'" in line and "'alice'" in line and "$.name" in line

    def test_unsupported_capability(self) -> None:
        error = UnsupportedCapabilityError("click", "api", ["web"])
        assert error.code is ErrorCode.UNSUPPORTED_CAPABILITY
        assert "click" in error.report_line()

    def test_timeout_rounds_elapsed(self) -> None:
        error = TimeoutError("#spinner to be hidden", timeout_ms=50, elapsed_ms=51.234)
        assert error.details == {"timeout_ms": 50, "elapsed_ms": 51.2}


class TestTaxonomy:
    @pytest.mark.parametrize(
        "error",
        [
            PlaceholderResolutionError("x"),
            LocatorResolutionError("custom_click"),
            CancelledError(),
            TimeoutError("op", 10),
            PluginExecutionError("custom_x", RuntimeError("boom")),
        ],
    )
    def test_all_derive_from_walnut_error(self, error: WalnutError) -> None:
        assert isinstance(error, WalnutError)
        assert error.to_dict()["code"] == error.code.value

    def test_walnut_timeout_is_not_builtin_timeout(self) -> None:
        assert not issubclass(TimeoutError, builtins.TimeoutError)

    def test_plugin_execution_error_keeps_cause(self) -> None:
        cause = KeyError("username")
        error = PluginExecutionError("custom_login", cause)
        assert error.__cause__ is cause
        assert error.action_type == "custom_login"
        assert "KeyError" in error.message
