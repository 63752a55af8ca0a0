"""Browser context for ``web`` methods.

Wraps a Playwright-compatible async page. Element interactions, navigation
and queries delegate to the page; every wait and verification is a
cooperative poll, so each one honors its own timeout and can be cancelled.
Timeouts for web capabilities are in milliseconds.
"""

from __future__ import annotations

import asyncio
import functools
import re
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Literal

from walnut.context.base import ExecutionContext
from walnut.core.metadata import Platform
from walnut.core.polling import poll_until
from walnut.errors import AssertionFailure, TimeoutError

if TYPE_CHECKING:
    from playwright.async_api import Page

_PAGE_TIMEOUT = re.compile(r"Timeout (\d+(?:\.\d+)?)ms exceeded")


def url_matches(url: str, pattern: str | re.Pattern[str]) -> bool:
    """Regex patterns are searched, strings match as substrings."""
    if isinstance(pattern, re.Pattern):
        return pattern.search(url) is not None
    return pattern in url


def is_page_timeout(error: BaseException) -> bool:
    """True for the timeout error a Playwright page raises."""
    cls = type(error)
    return cls.__name__ == "TimeoutError" and cls.__module__.startswith("playwright")


def page_call(method: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
    """Report a page timeout raised inside ``method`` as :class:`TimeoutError`."""

    @functools.wraps(method)
    async def wrapper(self: WebContext, *args: Any, **kwargs: Any) -> Any:
        try:
            return await method(self, *args, **kwargs)
        except Exception as e:
            if not is_page_timeout(e):
                raise
            operation = " ".join([method.__name__, *(repr(arg) for arg in args[:1])])
            match = _PAGE_TIMEOUT.search(str(e))
            timeout_ms = float(match.group(1)) if match else self.wait_timeout_ms
            raise TimeoutError(operation, timeout_ms) from e

    return wrapper


class WebContext(ExecutionContext):
    """Context for methods declared with ``context: web``."""

    platform = Platform.WEB

    def __init__(
        self,
        *,
        page: Page,
        wait_timeout_ms: float = 30_000,
        verify_timeout_ms: float = 5_000,
        poll_interval_ms: float = 100,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._page = page
        self.wait_timeout_ms = wait_timeout_ms
        self.verify_timeout_ms = verify_timeout_ms
        self.poll_interval_ms = poll_interval_ms

    @property
    def page(self) -> Page:
        """The raw page handle for operations not covered here."""
        return self._page

    # Element interactions

    @page_call
    async def click(self, selector: str) -> None:
        await self._page.click(selector)

    @page_call
    async def type(self, selector: str, text: str) -> None:
        await self._page.type(selector, str(text))

    @page_call
    async def fill(self, selector: str, text: str) -> None:
        await self._page.fill(selector, str(text))

    @page_call
    async def select_option(self, selector: str, value: str | list[str]) -> None:
        await self._page.select_option(selector, value)

    @page_call
    async def hover(self, selector: str) -> None:
        await self._page.hover(selector)

    @page_call
    async def dblclick(self, selector: str) -> None:
        await self._page.dblclick(selector)

    @page_call
    async def focus(self, selector: str) -> None:
        await self._page.focus(selector)

    @page_call
    async def blur(self, selector: str) -> None:
        await self._page.locator(selector).blur()

    @page_call
    async def press_key(self, key: str) -> None:
        await self._page.keyboard.press(key)

    @page_call
    async def drag(self, source_selector: str, target_selector: str) -> None:
        await self._page.drag_and_drop(source_selector, target_selector)

    @page_call
    async def file_upload(self, selector: str, file_path: str | list[str]) -> None:
        await self._page.set_input_files(selector, file_path)

    @page_call
    async def tap(self, selector: str) -> None:
        await self._page.tap(selector)

    @page_call
    async def check(self, selector: str) -> None:
        await self._page.check(selector)

    @page_call
    async def uncheck(self, selector: str) -> None:
        await self._page.uncheck(selector)

    @page_call
    async def clear(self, selector: str) -> None:
        await self._page.fill(selector, "")

    # Navigation

    @page_call
    async def navigate(self, url: str) -> None:
        """Go to ``url``; relative URLs are joined onto ``test_base_url``."""
        await self._page.goto(self.resolve_url(url))

    @page_call
    async def navigate_back(self) -> None:
        await self._page.go_back()

    @page_call
    async def reload(self) -> None:
        await self._page.reload()

    @page_call
    async def go_forward(self) -> None:
        await self._page.go_forward()

    @page_call
    async def close(self) -> None:
        await self._page.close()

    # Verification

    async def verify_element_visible(self, selector: str) -> None:
        await self._verify(
            lambda: self._page.is_visible(selector),
            kind="element_visible",
            target=selector,
            expected="visible",
            actual="hidden",
        )

    async def verify_element_hidden(self, selector: str) -> None:
        async def hidden() -> bool:
            return not await self._page.is_visible(selector)

        await self._verify(hidden, kind="element_hidden", target=selector, expected="hidden", actual="visible")

    async def verify_text_visible(self, text: str) -> None:
        await self._verify(
            lambda: self._page.is_visible(f"text={text}"),
            kind="text_visible",
            target=text,
            expected="visible",
            actual="not visible",
        )

    async def verify_value(self, selector: str, expected_value: str) -> None:
        async def has_value() -> bool:
            return await self._page.input_value(selector) == expected_value

        try:
            await poll_until(has_value, self.verify_timeout_ms, self.poll_interval_ms, f"value of {selector}")
        except TimeoutError as e:
            actual = await self._page.input_value(selector)
            raise AssertionFailure("value", target=selector, expected=expected_value, actual=actual) from e

    async def verify_url_contains(self, substring: str) -> None:
        await self._verify_url(substring, kind="url_contains")

    async def verify_navigation(self, url_pattern: str | re.Pattern[str]) -> None:
        await self._verify_url(url_pattern, kind="navigation")

    # Waits

    async def wait_for_visible(self, selector: str, timeout: float | None = None) -> None:
        await self._wait(lambda: self._page.is_visible(selector), timeout, f"{selector} to be visible")

    async def wait_for_hidden(self, selector: str, timeout: float | None = None) -> None:
        async def hidden() -> bool:
            return not await self._page.is_visible(selector)

        await self._wait(hidden, timeout, f"{selector} to be hidden")

    async def wait(self, ms: float) -> None:
        await asyncio.sleep(ms / 1000)

    async def wait_for_navigation(
        self,
        url: str | re.Pattern[str] | None = None,
        timeout: float | None = None,
    ) -> None:
        """Wait until the URL changes, or until it matches ``url`` when given."""
        start_url = self._page.url

        async def navigated() -> bool:
            current = self._page.url
            if url is not None:
                return url_matches(current, url)
            return current != start_url

        await self._wait(navigated, timeout, "navigation")

    async def wait_for_url(self, url_pattern: str | re.Pattern[str], timeout: float | None = None) -> None:
        async def matches() -> bool:
            return url_matches(self._page.url, url_pattern)

        await self._wait(matches, timeout, f"url {url_pattern}")

    async def wait_for_attached(self, selector: str, timeout: float | None = None) -> None:
        async def attached() -> bool:
            return await self._page.locator(selector).count() > 0

        await self._wait(attached, timeout, f"{selector} to be attached")

    async def wait_for_detached(self, selector: str, timeout: float | None = None) -> None:
        async def detached() -> bool:
            return await self._page.locator(selector).count() == 0

        await self._wait(detached, timeout, f"{selector} to be detached")

    # Queries

    @page_call
    async def get_text(self, selector: str) -> str:
        return await self._page.inner_text(selector)

    @page_call
    async def get_attribute(self, selector: str, attribute: str) -> str | None:
        return await self._page.get_attribute(selector, attribute)

    @page_call
    async def get_input_value(self, selector: str) -> str:
        return await self._page.input_value(selector)

    async def get_url(self) -> str:
        return self._page.url

    @page_call
    async def get_title(self) -> str:
        return await self._page.title()

    @page_call
    async def count(self, selector: str) -> int:
        return await self._page.locator(selector).count()

    @page_call
    async def is_visible(self, selector: str) -> bool:
        return await self._page.is_visible(selector)

    @page_call
    async def is_enabled(self, selector: str) -> bool:
        return await self._page.is_enabled(selector)

    @page_call
    async def is_checked(self, selector: str) -> bool:
        return await self._page.is_checked(selector)

    # Mouse

    @page_call
    async def mouse_click(self, x: float, y: float) -> None:
        await self._page.mouse.click(x, y)

    @page_call
    async def mouse_move(self, x: float, y: float) -> None:
        await self._page.mouse.move(x, y)

    @page_call
    async def mouse_drag(self, from_x: float, from_y: float, to_x: float, to_y: float) -> None:
        mouse = self._page.mouse
        await mouse.move(from_x, from_y)
        await mouse.down()
        await mouse.move(to_x, to_y)
        await mouse.up()

    # Layout and tabs

    @page_call
    async def set_viewport_size(self, width: int, height: int) -> None:
        await self._page.set_viewport_size({"width": width, "height": height})

    @page_call
    async def switch_to_tab(self, index: int) -> None:
        pages = self._page.context.pages
        if not 0 <= index < len(pages):
            raise IndexError(f"Tab index {index} out of range ({len(pages)} open)")
        self._page = pages[index]
        await self._page.bring_to_front()

    async def get_tab_count(self) -> int:
        return len(self._page.context.pages)

    # Advanced

    @page_call
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if arg is None:
            return await self._page.evaluate(script)
        return await self._page.evaluate(script, arg)

    @page_call
    async def screenshot(self, path: str | None = None, full_page: bool = False) -> bytes:
        return await self._page.screenshot(path=path, full_page=full_page)

    @page_call
    async def scroll(self, x: float = 0, y: float = 0, behavior: Literal["auto", "smooth"] = "auto") -> None:
        await self._page.evaluate(
            "([x, y, behavior]) => window.scrollBy({left: x, top: y, behavior})",
            [x, y, behavior],
        )

    async def handle_dialog(self, action: Literal["accept", "dismiss"], prompt_text: str | None = None) -> None:
        """Answer the next dialog the page opens."""
        if action not in ("accept", "dismiss"):
            raise ValueError(f"Dialog action must be 'accept' or 'dismiss', got {action!r}")

        async def respond(dialog: Any) -> None:
            if action == "accept":
                if prompt_text is None:
                    await dialog.accept()
                else:
                    await dialog.accept(prompt_text)
            else:
                await dialog.dismiss()

        self._page.once("dialog", respond)

    # Helpers

    async def _wait(self, condition: Any, timeout: float | None, description: str) -> None:
        await poll_until(
            condition,
            timeout_ms=self.wait_timeout_ms if timeout is None else timeout,
            interval_ms=self.poll_interval_ms,
            description=description,
        )

    async def _verify(self, condition: Any, *, kind: str, target: str, expected: str, actual: str) -> None:
        try:
            await poll_until(condition, self.verify_timeout_ms, self.poll_interval_ms, f"{kind} {target}")
        except TimeoutError as e:
            raise AssertionFailure(kind, target=target, expected=expected, actual=actual) from e

    async def _verify_url(self, pattern: str | re.Pattern[str], kind: str) -> None:
        async def matches() -> bool:
            return url_matches(self._page.url, pattern)

        expected = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
        try:
            await poll_until(matches, self.verify_timeout_ms, self.poll_interval_ms, f"url {expected}")
        except TimeoutError as e:
            raise AssertionFailure(kind, target="url", expected=expected, actual=self._page.url) from e
