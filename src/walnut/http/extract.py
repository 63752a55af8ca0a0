"""JSON path queries against response bodies."""

from __future__ import annotations

import json
from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from walnut.errors import ExtractionError
from walnut.http.models import ApiResponse


def query(data: Any, path: str) -> list[Any]:
    """Return every value ``path`` matches in ``data``.

    Raises:
        ExtractionError: If the path is not valid JSON path syntax.
    """
    try:
        expr = jsonpath_parse(path)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise ExtractionError(path, reason=f"invalid path ({e})") from e
    return [match.value for match in expr.find(data)]


def body_data(response: ApiResponse) -> Any:
    """Body as a JSON value; string bodies holding JSON are parsed."""
    body = response.body
    if isinstance(body, (str, bytes)):
        try:
            return json.loads(body)
        except ValueError:
            return body
    return body


def extract(response: ApiResponse, path: str) -> Any:
    """Apply ``path`` to the response body.

    One match returns the value, several matches return a list.

    Raises:
        ExtractionError: If the path does not resolve.
    """
    matches = query(body_data(response), path)
    if not matches:
        raise ExtractionError(path)
    if len(matches) == 1:
        return matches[0]
    return matches
