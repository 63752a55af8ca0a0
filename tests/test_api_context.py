"""Tests for the HTTP context over a mock transport."""

from __future__ import annotations

import pytest

from walnut.errors import AssertionFailure, ExtractionError, TransportError
from walnut.http.models import ApiResponse, BearerAuth, PreparedRequest, RequestOptions
from tests.conftest import MockTransport


@pytest.fixture
def ctx(build_context):
    return build_context("api")


class TestRequests:
    @pytest.mark.asyncio
    async def test_relative_url_joined_onto_base(self, ctx, transport: MockTransport) -> None:
        await ctx.get("/users/1")
        request = transport.requests[0]
        assert request.method == "GET"
        assert request.url == "https://app.example/users/1"
        assert request.timeout == 30.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["post", "put", "patch"])
    async def test_body_methods(self, ctx, transport: MockTransport, method: str) -> None:
        await getattr(ctx, method)("/items", {"name": "walnut"})
        request = transport.requests[0]
        assert request.method == method.upper()
        assert request.body == {"name": "walnut"}

    @pytest.mark.asyncio
    async def test_delete(self, ctx, transport: MockTransport) -> None:
        await ctx.delete("https://other.example/items/1")
        assert transport.requests[0].method == "DELETE"
        assert transport.requests[0].url == "https://other.example/items/1"

    @pytest.mark.asyncio
    async def test_non_2xx_is_data(self, ctx, transport: MockTransport) -> None:
        transport.handler = lambda request: ApiResponse(status=404, status_text="Not Found", body={"error": "x"})
        response = await ctx.get("/missing")
        assert response.status == 404

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, ctx, transport: MockTransport) -> None:
        def fail(request: PreparedRequest) -> ApiResponse:
            raise TransportError("connection refused", method=request.method, url=request.url)

        transport.handler = fail
        with pytest.raises(TransportError):
            await ctx.get("/users")

    @pytest.mark.asyncio
    async def test_per_request_timeout(self, ctx, transport: MockTransport) -> None:
        await ctx.get("/slow", {"timeout": 2})
        assert transport.requests[0].timeout == 2


class TestHeadersAndAuth:
    @pytest.mark.asyncio
    async def test_default_header_applies_to_later_requests(self, ctx, transport: MockTransport) -> None:
        ctx.set_header("X-Tenant", "acme")
        await ctx.get("/a")
        await ctx.get("/b", {"headers": {"X-Trace": "t"}})
        assert transport.requests[0].headers == {"X-Tenant": "acme"}
        assert transport.requests[1].headers == {"X-Tenant": "acme", "X-Trace": "t"}

    @pytest.mark.asyncio
    async def test_per_call_auth_overrides_once(self, ctx, transport: MockTransport) -> None:
        ctx.set_auth("bearer", token="A")
        await ctx.get("/one")
        await ctx.get("/two", {"auth": {"type": "bearer", "token": "B"}})
        await ctx.get("/three")

        tokens = [r.headers["Authorization"] for r in transport.requests]
        assert tokens == ["Bearer A", "Bearer B", "Bearer A"]

    @pytest.mark.asyncio
    async def test_request_options_object(self, ctx, transport: MockTransport) -> None:
        await ctx.get("/one", RequestOptions(params={"page": 2}, auth=BearerAuth("C")))
        request = transport.requests[0]
        assert request.params == {"page": 2}
        assert request.headers["Authorization"] == "Bearer C"

    @pytest.mark.asyncio
    async def test_api_key_in_query(self, ctx, transport: MockTransport) -> None:
        ctx.set_auth("apiKey", {"key": "api_key", "value": "s3cret", "in": "query"})
        await ctx.get("/search", {"params": {"q": "nuts"}})
        request = transport.requests[0]
        assert request.params == {"q": "nuts", "api_key": "s3cret"}
        assert "Authorization" not in request.headers

    def test_set_auth_validates_credentials(self, ctx) -> None:
        with pytest.raises(ValueError):
            ctx.set_auth("basic", username="only")


class TestCookies:
    @pytest.mark.asyncio
    async def test_cookies_pass_through_to_transport(self, ctx, transport: MockTransport) -> None:
        await ctx.set_cookie({"name": "sid", "value": "1"}, "/")
        assert transport.cookies == [({"name": "sid", "value": "1"}, "https://app.example/")]
        assert await ctx.get_cookies("/") == [{"name": "sid", "value": "1"}]


class TestExtractionAndAssertions:
    @pytest.mark.asyncio
    async def test_extract_then_store(self, ctx, transport: MockTransport) -> None:
        transport.handler = lambda request: ApiResponse(status=201, body={"id": "ord-1"})
        response = await ctx.post("/orders", {"sku": "A"})
        ctx.set_variable("orderId", ctx.extract_from_body(response, "$.id"))
        assert ctx.get_variable("orderId") == "ord-1"

    def test_extract_miss(self, ctx) -> None:
        with pytest.raises(ExtractionError):
            ctx.extract_from_body(ApiResponse(status=200, body={}), "$.id")

    def test_assert_status_200_vs_404(self, ctx) -> None:
        ctx.assert_status(ApiResponse(status=200), 200)
        with pytest.raises(AssertionFailure) as exc_info:
            ctx.assert_status(ApiResponse(status=404), 200)
        assert (exc_info.value.expected, exc_info.value.actual) == (200, 404)

    def test_bound_assertions(self, ctx) -> None:
        response = ApiResponse(
            status=200,
            headers={"content-type": "application/json"},
            body={"name": "bob"},
            response_time=10,
        )
        ctx.assert_header(response, "Content-Type", "application/json")
        ctx.assert_body_contains(response, "bob")
        ctx.assert_response_time(response, 10)
        ctx.assert_body_equals(response, "$.name", "bob")
        ctx.assert_body_matches(response, "$.name", "^b")
