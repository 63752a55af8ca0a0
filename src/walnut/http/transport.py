"""Async HTTP transports used by the api context.

The api context only depends on the :class:`Transport` protocol. The default
implementation, :class:`HttpxTransport`, wraps ``httpx.AsyncClient``; tests
and embedding platforms can supply their own.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlparse

import httpx

from walnut.errors import TimeoutError, TransportError
from walnut.http.models import ApiResponse, PreparedRequest

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """What the api context needs from an HTTP client."""

    async def send(self, request: PreparedRequest) -> ApiResponse: ...

    async def get_cookies(self, url: str) -> list[dict[str, Any]]: ...

    async def set_cookie(self, cookie: dict[str, Any], url: str | None = None) -> None: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``.

    Cookies persist in the client's jar for the lifetime of the transport,
    which is one run.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout, headers=headers or {})

    async def send(self, request: PreparedRequest) -> ApiResponse:
        kwargs: dict[str, Any] = {
            "headers": request.headers,
            "params": request.params or None,
            "timeout": request.timeout if request.timeout is not None else self.timeout,
        }
        if isinstance(request.body, (str, bytes)):
            kwargs["content"] = request.body
        elif request.body is not None:
            kwargs["json"] = request.body

        start = time.perf_counter()
        try:
            resp = await self._client.request(request.method, request.url, **kwargs)
        except httpx.TimeoutException as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            raise TimeoutError(
                f"response to {request}",
                timeout_ms=kwargs["timeout"] * 1000,
                elapsed_ms=elapsed_ms,
            ) from e
        except httpx.TransportError as e:
            raise TransportError(str(e) or type(e).__name__, method=request.method, url=request.url) from e
        duration_ms = (time.perf_counter() - start) * 1000

        if resp.headers.get("content-type", "").startswith("application/json"):
            try:
                body: Any = resp.json()
            except ValueError:
                body = resp.text
        else:
            body = resp.text

        logger.debug(f"{request} -> {resp.status_code} ({duration_ms:.1f}ms)")
        return ApiResponse(
            status=resp.status_code,
            status_text=resp.reason_phrase,
            headers=dict(resp.headers),
            body=body,
            response_time=duration_ms,
        )

    async def get_cookies(self, url: str) -> list[dict[str, Any]]:
        host = urlparse(url).hostname or ""
        cookies = []
        for cookie in self._client.cookies.jar:
            domain = cookie.domain.lstrip(".")
            if domain and host != domain and not host.endswith(f".{domain}"):
                continue
            cookies.append(
                {
                    "name": cookie.name,
                    "value": cookie.value,
                    "domain": cookie.domain,
                    "path": cookie.path,
                }
            )
        return cookies

    async def set_cookie(self, cookie: dict[str, Any], url: str | None = None) -> None:
        domain = cookie.get("domain") or (urlparse(url).hostname if url else "") or ""
        self._client.cookies.set(
            cookie["name"],
            str(cookie["value"]),
            domain=domain,
            path=cookie.get("path", "/"),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
