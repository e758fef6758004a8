"""Shared headless browser session for the scrape source.

A single Chromium instance is launched lazily on first use and shared by
every scrape; each lookup gets its own page through ``BrowserSession.page()``.
The browser is only torn down by an explicit ``close()``.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

from warranty_checker.config import WarrantySettings

logger = logging.getLogger(__name__)

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
    "--no-zygote",
    "--disable-extensions",
]

Launcher = Callable[[WarrantySettings], Awaitable[tuple[Optional[Playwright], Browser]]]


def launch_kwargs(settings: WarrantySettings) -> dict[str, Any]:
    """Return kwargs passed to chromium.launch."""
    return {"headless": settings.headless, "args": list(CHROMIUM_ARGS)}


async def launch_chromium(
    settings: WarrantySettings,
) -> tuple[Optional[Playwright], Browser]:
    """Start the Playwright driver and launch Chromium.

    Returns:
        The (playwright, browser) pair; both must be closed by the caller.
    """
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(**launch_kwargs(settings))
    except Exception:
        await playwright.stop()
        raise
    return playwright, browser


class BrowserSession:
    """Lazily created browser shared by concurrent scrapes.

    Initialization is idempotent and guarded by a lock, so concurrent first
    callers launch exactly one browser. A browser that has disconnected is
    closed before a replacement is launched.

    Attributes:
        settings: Engine settings (headless flag, user agent).
    """

    def __init__(
        self,
        settings: Optional[WarrantySettings] = None,
        launcher: Optional[Launcher] = None,
    ) -> None:
        """Initialize the session without launching anything.

        Args:
            settings: Engine settings.
            launcher: Coroutine function returning (playwright, browser).
                Defaults to ``launch_chromium``.
        """
        self.settings = settings or WarrantySettings()
        self._launcher = launcher or launch_chromium
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_started(self) -> bool:
        return self._browser is not None

    async def start(self) -> Browser:
        """Return the shared browser, launching it on first use."""
        browser = self._browser
        if browser is not None and browser.is_connected():
            return browser

        async with self._lock:
            if self._browser is not None and not self._browser.is_connected():
                logger.warning("Browser disconnected; closing before relaunch")
                await self._close_unlocked()
            if self._browser is None:
                logger.debug("Launching Chromium (headless=%s)", self.settings.headless)
                self._playwright, self._browser = await self._launcher(self.settings)
            return self._browser

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Open a fresh page on the shared browser.

        The page is closed when the block exits, whether or not it raised.

        Yields:
            A new Playwright Page.
        """
        browser = await self.start()
        page = await browser.new_page(
            user_agent=self.settings.user_agent,
            viewport={"width": 1366, "height": 768},
        )
        try:
            yield page
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.debug("Error closing page: %s", e)

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver."""
        async with self._lock:
            await self._close_unlocked()

    async def _close_unlocked(self) -> None:
        browser, playwright = self._browser, self._playwright
        self._browser = None
        self._playwright = None
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.debug("Error closing browser: %s", e)
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.debug("Error stopping Playwright: %s", e)
