"""HTTP request model for the api context."""

from walnut.http.auth import apply_auth
from walnut.http.extract import extract
from walnut.http.models import (
    ApiKeyAuth,
    ApiResponse,
    Auth,
    BasicAuth,
    BearerAuth,
    PreparedRequest,
    RequestOptions,
    coerce_auth,
    make_auth,
)
from walnut.http.transport import HttpxTransport, Transport

__all__ = [
    "ApiResponse",
    "RequestOptions",
    "PreparedRequest",
    "Auth",
    "BearerAuth",
    "BasicAuth",
    "ApiKeyAuth",
    "make_auth",
    "coerce_auth",
    "apply_auth",
    "extract",
    "Transport",
    "HttpxTransport",
]
