"""HTTP context for ``api`` methods."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from walnut.assertions import response as checks
from walnut.context.base import ExecutionContext
from walnut.core.metadata import Platform
from walnut.http.auth import apply_auth
from walnut.http.extract import extract
from walnut.http.models import ApiResponse, Auth, PreparedRequest, RequestOptions, make_auth
from walnut.http.transport import Transport

logger = logging.getLogger(__name__)

Options = RequestOptions | Mapping[str, Any] | None


class ApiContext(ExecutionContext):
    """Context for methods declared with ``context: api``.

    Default headers and auth set through :meth:`set_header` and
    :meth:`set_auth` apply to every later request made through this context.
    ``opts.auth`` overrides the default for one request without changing it.
    A non-2xx status is returned as data, never raised.
    """

    platform = Platform.API

    def __init__(self, *, transport: Transport, request_timeout: float = 30.0, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._transport = transport
        self._request_timeout = request_timeout
        self._default_headers: dict[str, str] = {}
        self._default_auth: Auth | None = None

    # HTTP methods

    async def request(self, method: str, url: str, body: Any = None, opts: Options = None) -> ApiResponse:
        """Send a request and return the response.

        Raises:
            TransportError: On network-level failure.
            TimeoutError: If the request timed out.
        """
        options = RequestOptions.coerce(opts)
        auth = options.auth if options.auth is not None else self._default_auth
        headers, params = apply_auth(auth, {**self._default_headers, **options.headers}, options.params)
        prepared = PreparedRequest(
            method=method.upper(),
            url=self.resolve_url(url),
            headers=headers,
            params=params,
            body=body,
            timeout=options.timeout if options.timeout is not None else self._request_timeout,
        )
        logger.debug(f"Sending {prepared}")
        return await self._transport.send(prepared)

    async def get(self, url: str, opts: Options = None) -> ApiResponse:
        return await self.request("GET", url, None, opts)

    async def post(self, url: str, body: Any = None, opts: Options = None) -> ApiResponse:
        return await self.request("POST", url, body, opts)

    async def put(self, url: str, body: Any = None, opts: Options = None) -> ApiResponse:
        return await self.request("PUT", url, body, opts)

    async def patch(self, url: str, body: Any = None, opts: Options = None) -> ApiResponse:
        return await self.request("PATCH", url, body, opts)

    async def delete(self, url: str, opts: Options = None) -> ApiResponse:
        return await self.request("DELETE", url, None, opts)

    # State management

    def set_header(self, name: str, value: str) -> None:
        self._default_headers[name] = value

    def set_auth(self, auth_type: str, credentials: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        """Set the default auth, e.g. ``set_auth("bearer", token="abc")``.

        ``auth_type`` is ``bearer``, ``basic`` or ``apiKey``; credentials may
        be given as a mapping, as keyword arguments, or both.
        """
        self._default_auth = make_auth(auth_type, **{**dict(credentials or {}), **kwargs})

    async def get_cookies(self, url: str) -> list[dict[str, Any]]:
        return await self._transport.get_cookies(self.resolve_url(url))

    async def set_cookie(self, cookie: dict[str, Any], url: str | None = None) -> None:
        await self._transport.set_cookie(cookie, self.resolve_url(url) if url else None)

    # Response helpers

    def extract_from_body(self, response: ApiResponse, json_path: str) -> Any:
        """Apply a JSON path to the body; raises ExtractionError on a miss."""
        return extract(response, json_path)

    # Assertions

    def assert_status(self, response: ApiResponse, expected: int) -> None:
        checks.assert_status(response, expected)

    def assert_body_contains(self, response: ApiResponse, text: str) -> None:
        checks.assert_body_contains(response, text)

    def assert_response_time(self, response: ApiResponse, max_ms: float) -> None:
        checks.assert_response_time(response, max_ms)

    def assert_header(self, response: ApiResponse, header_name: str, expected: str) -> None:
        checks.assert_header(response, header_name, expected)

    def assert_body_equals(self, response: ApiResponse, json_path: str, expected: Any) -> None:
        checks.assert_body_equals(response, json_path, expected)

    def assert_body_matches(self, response: ApiResponse, json_path: str, regex: str | re.Pattern[str]) -> None:
        checks.assert_body_matches(response, json_path, regex)
