"""Response assertions used by api methods."""

from walnut.assertions.response import (
    assert_body_contains,
    assert_body_equals,
    assert_body_matches,
    assert_header,
    assert_response_time,
    assert_status,
)
from walnut.errors import AssertionFailure

__all__ = [
    "AssertionFailure",
    "assert_status",
    "assert_body_contains",
    "assert_response_time",
    "assert_header",
    "assert_body_equals",
    "assert_body_matches",
]
