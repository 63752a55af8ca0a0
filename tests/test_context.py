"""Tests for context construction and capability isolation."""

from __future__ import annotations

import pytest

from walnut.context import ApiContext, SharedContext, WebContext, capabilities_of
from walnut.context.factory import ContextFactory, RunEnvironment
from walnut.core.metadata import Platform, PluginMetadata
from walnut.core.variables import ABSENT, VariableStore
from walnut.errors import ContextBuildError, PlaceholderResolutionError, UnsupportedCapabilityError

PLATFORMS = [Platform.WEB, Platform.API, Platform.SHARED]


def foreign_capabilities() -> list[tuple[Platform, str]]:
    pairs = []
    for platform in PLATFORMS:
        own = capabilities_of(platform)
        for other in PLATFORMS:
            if other is platform:
                continue
            pairs.extend((platform, name) for name in sorted(capabilities_of(other) - own))
    return pairs


class TestCapabilities:
    def test_web_and_api_declare_their_members(self) -> None:
        assert {"click", "navigate", "wait_for_visible", "verify_text_visible"} <= capabilities_of("web")
        assert {"request", "get", "set_auth", "assert_status", "extract_from_body"} <= capabilities_of("api")
        assert capabilities_of("shared") == frozenset()

    def test_variants_do_not_overlap(self) -> None:
        assert not capabilities_of("web") & capabilities_of("api")

    def test_common_members_are_not_capabilities(self) -> None:
        for name in ("params", "log", "warn", "set_variable", "get_variable", "replace_placeholders", "platform"):
            assert name not in capabilities_of("web")

    @pytest.mark.parametrize("platform, capability", foreign_capabilities())
    def test_foreign_capability_raises(self, build_context, platform: Platform, capability: str) -> None:
        ctx = build_context(platform.value)
        with pytest.raises(UnsupportedCapabilityError) as exc_info:
            getattr(ctx, capability)
        assert exc_info.value.capability == capability
        assert exc_info.value.platform == platform.value

    def test_click_on_api_context(self, build_context) -> None:
        ctx = build_context("api")
        with pytest.raises(UnsupportedCapabilityError) as exc_info:
            ctx.click("#submit")
        assert exc_info.value.available_on == ["web"]

    def test_unknown_attribute_is_attribute_error(self, build_context) -> None:
        ctx = build_context("shared")
        with pytest.raises(AttributeError):
            ctx.does_not_exist
        assert not hasattr(ctx, "does_not_exist")


class TestContextFactory:
    def test_builds_variant_from_metadata(self, build_context) -> None:
        assert isinstance(build_context("web"), WebContext)
        assert isinstance(build_context("api"), ApiContext)
        assert isinstance(build_context("shared"), SharedContext)

    def test_web_without_page(self, factory: ContextFactory, store: VariableStore) -> None:
        metadata = PluginMetadata(name="w", action_type="custom_w", context="web")
        with pytest.raises(ContextBuildError) as exc_info:
            factory.build(metadata, RunEnvironment(test_base_url="https://app.example"), store)
        assert exc_info.value.action_type == "custom_w"

    def test_api_without_transport(self, factory: ContextFactory, store: VariableStore) -> None:
        metadata = PluginMetadata(name="a", action_type="custom_a", context="api")
        with pytest.raises(ContextBuildError):
            factory.build(metadata, RunEnvironment(), store)

    def test_shared_needs_nothing(self, factory: ContextFactory, store: VariableStore) -> None:
        metadata = PluginMetadata(name="s", action_type="custom_s")
        assert isinstance(factory.build(metadata, RunEnvironment(), store), SharedContext)

    def test_web_timeouts_from_config(self, build_context) -> None:
        ctx = build_context("web")
        assert ctx.wait_timeout_ms == 500
        assert ctx.verify_timeout_ms == 100


class TestCommonMembers:
    def test_params_are_read_only(self, build_context) -> None:
        ctx = build_context("shared", params={"username": "bob"})
        assert ctx.params["username"] == "bob"
        with pytest.raises(TypeError):
            ctx.params["username"] = "alice"

    def test_test_base_url_is_read_only(self, build_context) -> None:
        ctx = build_context("shared")
        assert ctx.test_base_url == "https://app.example"
        with pytest.raises(AttributeError):
            ctx.test_base_url = "https://other.example"

    def test_variables_round_trip_through_store(self, build_context, store: VariableStore) -> None:
        ctx = build_context("shared")
        assert ctx.get_variable("token") is ABSENT
        ctx.set_variable("token", "t-1")
        assert store.get("token") == "t-1"
        assert ctx.variable_context["token"] == "t-1"
        ctx.variable_context["other"] = 2
        assert ctx.get_variable("other") == 2

    def test_replace_placeholders(self, build_context, store: VariableStore) -> None:
        store.set("orderId", 9)
        ctx = build_context("shared", params={"sku": "A-1"}, args=("first",))
        assert ctx.replace_placeholders("{{sku}}/{{orderId}}/${0}") == "A-1/9/first"
        with pytest.raises(PlaceholderResolutionError):
            ctx.replace_placeholders("{{missing}}")

    def test_log_and_warn_are_captured(self, build_context) -> None:
        sink: list = []
        ctx = build_context("shared", log_sink=sink)
        ctx.log("starting")
        ctx.warn("careful")
        assert [(e.level, e.message) for e in sink] == [("debug", "starting"), ("warning", "careful")]
        assert [e.message for e in ctx.logs] == ["starting", "careful"]

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("/login", "https://app.example/login"),
            ("login", "https://app.example/login"),
            ("https://other.example/x", "https://other.example/x"),
        ],
    )
    def test_resolve_url(self, build_context, url: str, expected: str) -> None:
        assert build_context("shared").resolve_url(url) == expected
