"""Fake Playwright objects for browser and scrape source tests."""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import pytest

from warranty_checker.sources.browser import BrowserSession


class FakeElement:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.clicks = 0
        self.filled: Optional[str] = None

    async def click(self) -> None:
        self.clicks += 1

    async def fill(self, value: str) -> None:
        self.filled = value

    async def text_content(self) -> str:
        return self.text


class FakePage:
    """Page whose elements are keyed by exact selector string.

    ``fail_on`` maps a method name ("goto", "wait_for_selector",
    "expect_navigation") to the exception it should raise.
    """

    def __init__(self, elements: Optional[dict[str, FakeElement]] = None) -> None:
        self.elements = elements or {}
        self.fail_on: dict[str, Exception] = {}
        self.calls: list[tuple] = []
        self.closed = False

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail_on:
            raise self.fail_on[name]

    async def goto(self, url: str, **kwargs) -> None:
        self.calls.append(("goto", url, kwargs))
        self._maybe_fail("goto")

    async def wait_for_selector(self, selector: str, **kwargs) -> None:
        self.calls.append(("wait_for_selector", selector, kwargs))
        self._maybe_fail("wait_for_selector")

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        return self.elements.get(selector)

    @asynccontextmanager
    async def expect_navigation(self, **kwargs):
        self.calls.append(("expect_navigation", kwargs))
        yield
        self._maybe_fail("expect_navigation")

    async def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append(("wait_for_timeout", timeout))

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self) -> None:
        self.pages: list[FakePage] = []
        self.page_factory = FakePage
        self.connected = True
        self.closed = False
        self.new_page_kwargs: list[dict] = []

    def is_connected(self) -> bool:
        return self.connected

    async def new_page(self, **kwargs) -> FakePage:
        self.new_page_kwargs.append(kwargs)
        page = self.page_factory()
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True
        self.connected = False


class FakeLauncher:
    """Launcher that records every launch and hands out FakeBrowsers."""

    def __init__(self) -> None:
        self.browsers: list[FakeBrowser] = []
        self.page_factory = FakePage
        self.delay = 0.0

    async def __call__(self, settings):
        if self.delay:
            await asyncio.sleep(self.delay)
        browser = FakeBrowser()
        browser.page_factory = self.page_factory
        self.browsers.append(browser)
        return None, browser

    @property
    def launches(self) -> int:
        return len(self.browsers)


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def browser_session(settings, launcher) -> BrowserSession:
    return BrowserSession(settings, launcher=launcher)


def _build_results_page(**texts: str) -> FakePage:
    """Build a page with the lookup form and the given result fields."""
    elements = {
        "#serialNumber": FakeElement(),
        'button[type="submit"]': FakeElement(),
    }
    selectors = {
        "product_name": ".product-name",
        "product_type": ".product-type",
        "start": ".warranty-start",
        "end": ".warranty-end",
        "warranty_type": ".warranty-type",
        "status": ".warranty-status",
        "error": ".error-message",
    }
    for key, text in texts.items():
        elements[selectors[key]] = FakeElement(text)
    return FakePage(elements)


@pytest.fixture
def results_page():
    """Factory for pages carrying the lookup form and result fields."""
    return _build_results_page


@pytest.fixture
def page_with():
    """Factory for pages carrying exactly the given selector -> text elements."""

    def factory(texts: dict[str, str]) -> FakePage:
        return FakePage({selector: FakeElement(text) for selector, text in texts.items()})

    return factory
