"""Applying an auth variant to outgoing headers and query params."""

from __future__ import annotations

import base64
from typing import Any

from walnut.http.models import ApiKeyAuth, Auth, BasicAuth, BearerAuth


def apply_auth(
    auth: Auth | None,
    headers: dict[str, str],
    params: dict[str, Any],
) -> tuple[dict[str, str], dict[str, Any]]:
    """Return copies of ``headers`` and ``params`` with ``auth`` injected."""
    headers = dict(headers)
    params = dict(params)

    if auth is None:
        return headers, params

    if isinstance(auth, BearerAuth):
        headers["Authorization"] = f"Bearer {auth.token}"
    elif isinstance(auth, BasicAuth):
        raw = f"{auth.username}:{auth.password}".encode()
        headers["Authorization"] = f"Basic {base64.b64encode(raw).decode('ascii')}"
    elif isinstance(auth, ApiKeyAuth):
        if auth.location == "query":
            params[auth.key] = auth.value
        else:
            headers[auth.key] = auth.value
    else:
        raise TypeError(f"Unsupported auth object: {auth!r}")

    return headers, params
