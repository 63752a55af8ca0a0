"""HTTP request options, authentication variants and responses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Union


@dataclass(frozen=True)
class BearerAuth:
    token: str

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("bearer auth requires 'token'")


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str

    def __post_init__(self) -> None:
        if not self.username or self.password is None:
            raise ValueError("basic auth requires 'username' and 'password'")


@dataclass(frozen=True)
class ApiKeyAuth:
    """API key sent as a header or as a query parameter."""

    key: str
    value: str
    location: Literal["header", "query"] = "header"

    def __post_init__(self) -> None:
        if not self.key or self.value is None:
            raise ValueError("apiKey auth requires 'key' and 'value'")
        if self.location not in ("header", "query"):
            raise ValueError(f"apiKey location must be 'header' or 'query', got {self.location!r}")


Auth = Union[BearerAuth, BasicAuth, ApiKeyAuth]


def make_auth(auth_type: str, **credentials: Any) -> Auth:
    """Build an auth variant from its type name and credentials.

    ``auth_type`` is ``bearer``, ``basic`` or ``apiKey`` (``api_key`` also
    accepted). API key placement may be given as ``in`` or ``location``.
    """
    kind = auth_type.replace("_", "").lower()
    if kind == "bearer":
        return BearerAuth(token=credentials.get("token", ""))
    if kind == "basic":
        return BasicAuth(
            username=credentials.get("username", ""),
            password=credentials.get("password"),  # type: ignore[arg-type]
        )
    if kind == "apikey":
        return ApiKeyAuth(
            key=credentials.get("key", ""),
            value=credentials.get("value"),  # type: ignore[arg-type]
            location=credentials.get("location") or credentials.get("in") or "header",
        )
    raise ValueError(f"Unknown auth type: {auth_type!r}")


def coerce_auth(auth: Auth | Mapping[str, Any] | None) -> Auth | None:
    if auth is None or isinstance(auth, (BearerAuth, BasicAuth, ApiKeyAuth)):
        return auth
    data = dict(auth)
    auth_type = data.pop("type", None)
    if not auth_type:
        raise ValueError("auth mapping requires a 'type'")
    return make_auth(auth_type, **data)


@dataclass
class RequestOptions:
    """Per-request options.

    Attributes:
        headers: Extra request headers, merged over the context defaults.
        params: URL query parameters.
        timeout: Request timeout in seconds.
        auth: Auth override for this request only.
    """

    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    timeout: float | None = None
    auth: Auth | None = None

    @classmethod
    def coerce(cls, opts: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
        if opts is None:
            return cls()
        if isinstance(opts, RequestOptions):
            return opts
        return cls(
            headers=dict(opts.get("headers") or {}),
            params=dict(opts.get("params") or {}),
            timeout=opts.get("timeout"),
            auth=coerce_auth(opts.get("auth")),
        )


@dataclass(frozen=True)
class PreparedRequest:
    """A fully merged request handed to the transport."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    body: Any = None
    timeout: float | None = None

    def __str__(self) -> str:
        return f"{self.method} {self.url}"


@dataclass(frozen=True)
class ApiResponse:
    """An HTTP response. Immutable once produced.

    Attributes:
        status: HTTP status code.
        status_text: Reason phrase.
        headers: Response headers (read-only).
        body: Parsed JSON body, or the raw text.
        response_time: Elapsed time in milliseconds.
    """

    status: int
    status_text: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    response_time: float = 0.0

    def __post_init__(self) -> None:
        if self.response_time < 0:
            raise ValueError("response_time must be non-negative")
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def json(self) -> Any:
        return self.body
