"""Pytest fixtures for walnut tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from walnut.config import WalnutConfig
from walnut.context.factory import ContextFactory, RunEnvironment
from walnut.core.metadata import PluginMetadata
from walnut.core.registry import MethodRegistry
from walnut.core.variables import VariableStore
from walnut.http.models import ApiResponse, PreparedRequest


class MockLocator:
    def __init__(self, page: MockPage, selector: str) -> None:
        self.page = page
        self.selector = selector

    async def count(self) -> int:
        return self.page.attached.get(self.selector, 0)

    async def blur(self) -> None:
        self.page.record("blur", self.selector)


class MockKeyboard:
    def __init__(self, page: MockPage) -> None:
        self.page = page

    async def press(self, key: str) -> None:
        self.page.record("press", key)


class MockMouse:
    def __init__(self, page: MockPage) -> None:
        self.page = page

    async def click(self, x: float, y: float) -> None:
        self.page.record("mouse.click", x, y)

    async def move(self, x: float, y: float) -> None:
        self.page.record("mouse.move", x, y)

    async def down(self) -> None:
        self.page.record("mouse.down")

    async def up(self) -> None:
        self.page.record("mouse.up")


class MockBrowserContext:
    def __init__(self) -> None:
        self.pages: list[MockPage] = []


class MockPage:
    """Stand-in for a Playwright page.

    ``visible`` holds selectors (and ``text=...`` selectors) that report as
    visible. ``reactions`` maps ``(action, selector)`` to a callback run after
    that action, to simulate the page reacting to input.
    """

    def __init__(self, url: str = "about:blank", browser_context: MockBrowserContext | None = None) -> None:
        self.url = url
        self.calls: list[tuple[Any, ...]] = []
        self.visible: set[str] = set()
        self.values: dict[str, str] = {}
        self.attached: dict[str, int] = {}
        self.texts: dict[str, str] = {}
        self.attributes: dict[tuple[str, str], str] = {}
        self.reactions: dict[tuple[str, str], Callable[[MockPage], None]] = {}
        self.dialog_handlers: dict[str, Callable[..., Any]] = {}
        self.title_text = ""
        self.keyboard = MockKeyboard(self)
        self.mouse = MockMouse(self)
        self.context = browser_context or MockBrowserContext()
        self.context.pages.append(self)

    def record(self, action: str, *args: Any) -> None:
        self.calls.append((action, *args))
        if args and isinstance(args[0], str):
            reaction = self.reactions.get((action, args[0]))
            if reaction is not None:
                reaction(self)

    def actions(self) -> list[str]:
        return [call[0] for call in self.calls]

    def locator(self, selector: str) -> MockLocator:
        return MockLocator(self, selector)

    async def goto(self, url: str) -> None:
        self.url = url
        self.record("goto", url)

    async def go_back(self) -> None:
        self.record("go_back")

    async def go_forward(self) -> None:
        self.record("go_forward")

    async def reload(self) -> None:
        self.record("reload")

    async def close(self) -> None:
        self.record("close")

    async def click(self, selector: str) -> None:
        self.record("click", selector)

    async def dblclick(self, selector: str) -> None:
        self.record("dblclick", selector)

    async def type(self, selector: str, text: str) -> None:
        self.values[selector] = self.values.get(selector, "") + text
        self.record("type", selector, text)

    async def fill(self, selector: str, text: str) -> None:
        self.values[selector] = text
        self.record("fill", selector, text)

    async def select_option(self, selector: str, value: Any) -> None:
        self.record("select_option", selector, value)

    async def hover(self, selector: str) -> None:
        self.record("hover", selector)

    async def focus(self, selector: str) -> None:
        self.record("focus", selector)

    async def tap(self, selector: str) -> None:
        self.record("tap", selector)

    async def check(self, selector: str) -> None:
        self.record("check", selector)

    async def uncheck(self, selector: str) -> None:
        self.record("uncheck", selector)

    async def drag_and_drop(self, source: str, target: str) -> None:
        self.record("drag_and_drop", source, target)

    async def set_input_files(self, selector: str, files: Any) -> None:
        self.record("set_input_files", selector, files)

    async def is_visible(self, selector: str) -> bool:
        return selector in self.visible

    async def is_enabled(self, selector: str) -> bool:
        return True

    async def is_checked(self, selector: str) -> bool:
        return False

    async def input_value(self, selector: str) -> str:
        return self.values.get(selector, "")

    async def inner_text(self, selector: str) -> str:
        return self.texts.get(selector, "")

    async def get_attribute(self, selector: str, name: str) -> str | None:
        return self.attributes.get((selector, name))

    async def title(self) -> str:
        return self.title_text

    async def set_viewport_size(self, size: dict[str, int]) -> None:
        self.record("set_viewport_size", size)

    async def bring_to_front(self) -> None:
        self.record("bring_to_front")

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.record("evaluate", script, arg)
        return arg

    async def screenshot(self, path: str | None = None, full_page: bool = False) -> bytes:
        self.record("screenshot", path, full_page)
        return b"\x89PNG"

    def once(self, event: str, handler: Callable[..., Any]) -> None:
        self.dialog_handlers[event] = handler


class MockTransport:
    """Records prepared requests and answers them from ``handler``."""

    def __init__(
        self,
        handler: Callable[[PreparedRequest], ApiResponse] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.handler = handler
        self.delay = delay
        self.requests: list[PreparedRequest] = []
        self.cookies: list[tuple[dict[str, Any], str | None]] = []
        self.closed = False

    async def send(self, request: PreparedRequest) -> ApiResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.handler is not None:
            return self.handler(request)
        return ApiResponse(status=200, status_text="OK", body={})

    async def get_cookies(self, url: str) -> list[dict[str, Any]]:
        return [cookie for cookie, _ in self.cookies]

    async def set_cookie(self, cookie: dict[str, Any], url: str | None = None) -> None:
        self.cookies.append((cookie, url))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> WalnutConfig:
    """Config with short waits so failing polls end quickly."""
    return WalnutConfig(
        base_url="https://app.example",
        wait_timeout_ms=500,
        verify_timeout_ms=100,
        poll_interval_ms=10,
    )


@pytest.fixture
def store() -> VariableStore:
    return VariableStore()


@pytest.fixture
def page() -> MockPage:
    return MockPage()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def environment(page: MockPage, transport: MockTransport) -> RunEnvironment:
    return RunEnvironment(test_base_url="https://app.example", page=page, transport=transport)


@pytest.fixture
def factory(config: WalnutConfig) -> ContextFactory:
    return ContextFactory(config)


@pytest.fixture
def registry() -> MethodRegistry:
    return MethodRegistry()


@pytest.fixture
def build_context(factory: ContextFactory, environment: RunEnvironment, store: VariableStore):
    """Build a context for a platform without going through the invoker."""

    def build(platform: str, **kwargs: Any):
        metadata = PluginMetadata(name=f"{platform} test", action_type=f"{platform}_test", context=platform)
        return factory.build(metadata, environment, store, **kwargs)

    return build
