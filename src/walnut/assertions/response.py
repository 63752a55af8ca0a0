"""Assertions over API responses.

Each function returns None when the expectation holds and raises
:class:`~walnut.errors.AssertionFailure` otherwise. Nothing here mutates the
response or the variable store.

Example:
    >>> assert_status(response, 200)
    >>> assert_body_equals(response, "$.user.name", "bob")
    >>> assert_response_time(response, 500)
"""

from __future__ import annotations

import json
import re
from typing import Any

from walnut.errors import AssertionFailure, ExtractionError
from walnut.http.extract import body_data, query
from walnut.http.models import ApiResponse


def assert_status(response: ApiResponse, expected: int) -> None:
    """Assert the HTTP status code equals ``expected``."""
    if response.status != expected:
        raise AssertionFailure("status", expected=expected, actual=response.status)


def assert_body_contains(response: ApiResponse, text: str) -> None:
    """Assert the body, as text, contains ``text``."""
    body = response.body
    if isinstance(body, bytes):
        haystack = body.decode(errors="replace")
    elif isinstance(body, str):
        haystack = body
    else:
        haystack = json.dumps(body, default=str)
    if text not in haystack:
        raise AssertionFailure(
            "body_contains",
            expected=text,
            actual=_truncate(haystack),
            message=f"Assertion 'body_contains' failed: body does not contain {text!r}",
        )


def assert_response_time(response: ApiResponse, max_ms: float) -> None:
    """Assert the response took at most ``max_ms`` milliseconds (inclusive)."""
    if response.response_time > max_ms:
        raise AssertionFailure(
            "response_time",
            expected=f"<= {max_ms}ms",
            actual=f"{response.response_time:.1f}ms",
        )


def assert_header(response: ApiResponse, header_name: str, expected: str) -> None:
    """Assert header ``header_name`` (case-insensitive) equals ``expected``."""
    actual = response.header(header_name)
    if actual != expected:
        raise AssertionFailure("header", target=header_name, expected=expected, actual=actual)


def assert_body_equals(response: ApiResponse, json_path: str, expected: Any) -> None:
    """Assert the value at ``json_path`` equals ``expected``."""
    actual = _value_at(response, json_path, "body_equals", expected)
    if actual != expected:
        raise AssertionFailure("body_equals", target=json_path, expected=expected, actual=actual)


def assert_body_matches(response: ApiResponse, json_path: str, regex: str | re.Pattern[str]) -> None:
    """Assert the value at ``json_path``, as text, matches ``regex``."""
    pattern = re.compile(regex) if isinstance(regex, str) else regex
    actual = _value_at(response, json_path, "body_matches", pattern.pattern)
    text = actual if isinstance(actual, str) else json.dumps(actual, default=str)
    if not pattern.search(text):
        raise AssertionFailure(
            "body_matches",
            target=json_path,
            expected=pattern.pattern,
            actual=actual,
        )


def _value_at(response: ApiResponse, json_path: str, kind: str, expected: Any) -> Any:
    try:
        matches = query(body_data(response), json_path)
    except ExtractionError as e:
        raise AssertionFailure(kind, target=json_path, expected=expected, actual=None, message=e.message) from e
    if not matches:
        raise AssertionFailure(
            kind,
            target=json_path,
            expected=expected,
            actual=None,
            message=f"Assertion '{kind}' failed: path {json_path} did not resolve",
        )
    return matches[0] if len(matches) == 1 else matches


def _truncate(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."
