"""Scrape source driving the vendor's warranty lookup page.

This is the terminal fallback: ``scrape()`` always returns a record. Timeouts,
missing form elements and browser errors become ``Error`` records whose
message names the failing step.
"""

import logging
from datetime import date
from typing import Optional

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from warranty_checker.config import WarrantySettings
from warranty_checker.exceptions import ResolutionError
from warranty_checker.models import WarrantyRecord
from warranty_checker.normalizer import build_record, extract_date_token
from warranty_checker.sources.base import BaseSource
from warranty_checker.sources.browser import BrowserSession

logger = logging.getLogger(__name__)

# Selector fallbacks, tried in order. The vendor page changes without notice.
SERIAL_INPUT_SELECTORS = (
    "#serialNumber",
    'input[name="serialNumber"]',
    '[data-testid="serial-input"]',
)
SUBMIT_SELECTORS = (
    'button[type="submit"]',
    ".submit-btn",
    '[data-testid="submit-button"]',
    'input[type="submit"]',
)
FIELD_SELECTORS = {
    "product_name": (".product-name", ".model-name", '[data-testid="product-name"]'),
    "product_type": (".product-type", ".category", '[data-testid="product-type"]'),
    "warranty_start_date": (".warranty-start", ".start-date", '[data-testid="warranty-start"]'),
    "warranty_end_date": (".warranty-end", ".end-date", '[data-testid="warranty-end"]'),
    "warranty_type": (".warranty-type", ".coverage-type", '[data-testid="warranty-type"]'),
    "vendor_status": (".warranty-status", ".status", '[data-testid="warranty-status"]'),
    "error_message": (".error-message", ".alert-danger", '[data-testid="error"]'),
}
DATE_FIELDS = ("warranty_start_date", "warranty_end_date")


async def first_element(page: Page, selectors: tuple[str, ...]) -> Optional[ElementHandle]:
    """Return the first element matching any of ``selectors``."""
    for selector in selectors:
        element = await page.query_selector(selector)
        if element is not None:
            return element
    return None


async def first_text(page: Page, selectors: tuple[str, ...]) -> str:
    """Return the stripped text of the first matching element, or ""."""
    for selector in selectors:
        element = await page.query_selector(selector)
        if element is None:
            continue
        text = (await element.text_content() or "").strip()
        if text:
            return text
    return ""


class ScrapeSource(BaseSource):
    """Source that looks up warranties by automating the vendor web page.

    Every call opens its own page on the shared BrowserSession and closes it
    before returning. The session itself is owned by this source and is
    closed through ``close()``.

    Attributes:
        settings: Engine settings (lookup URL, timeouts).
        session: Shared browser session.
    """

    def __init__(
        self,
        settings: Optional[WarrantySettings] = None,
        session: Optional[BrowserSession] = None,
    ) -> None:
        self.settings = settings or WarrantySettings()
        self.session = session or BrowserSession(self.settings)

    @property
    def name(self) -> str:
        return "Scrape"

    async def close(self) -> None:
        await self.session.close()

    async def scrape(self, serial: str, today: Optional[date] = None) -> WarrantyRecord:
        """Look up one serial number on the vendor page.

        Args:
            serial: Normalized serial number.
            today: Reference date for status classification.

        Returns:
            The classified record; status Error if any step failed.
        """
        step = "opening page"
        try:
            async with self.session.page() as page:
                step = "loading lookup page"
                await page.goto(
                    self.settings.lookup_url,
                    wait_until="networkidle",
                    timeout=self.settings.navigation_timeout_ms,
                )

                step = "waiting for serial number input"
                await page.wait_for_selector(
                    ", ".join(SERIAL_INPUT_SELECTORS),
                    timeout=self.settings.element_timeout_ms,
                )
                field = await first_element(page, SERIAL_INPUT_SELECTORS)
                if field is None:
                    raise ResolutionError("Serial number input field not found")
                await field.click()
                await field.fill(serial)

                submit = await first_element(page, SUBMIT_SELECTORS)
                if submit is None:
                    raise ResolutionError("Submit button not found")

                step = "waiting for results page"
                async with page.expect_navigation(
                    wait_until="networkidle",
                    timeout=self.settings.navigation_timeout_ms,
                ):
                    await submit.click()
                await page.wait_for_timeout(self.settings.settle_delay_ms)

                step = "extracting warranty fields"
                fields = await self._extract_fields(page)
        except PlaywrightTimeoutError as e:
            message = f"Timed out {step}: {_first_line(e)}"
            logger.warning("Scrape failed for %s: %s", serial, message)
            return WarrantyRecord.failed(serial, message)
        except (ResolutionError, PlaywrightError) as e:
            message = _first_line(e)
            logger.warning("Scrape failed for %s while %s: %s", serial, step, message)
            return WarrantyRecord.failed(serial, message)

        vendor_status = fields.pop("vendor_status")
        if vendor_status:
            logger.debug("Vendor reported status %r for %s", vendor_status, serial)

        return build_record(
            serial,
            today=today,
            expiring_within_days=self.settings.expiring_soon_days,
            **fields,
        )

    async def _extract_fields(self, page: Page) -> dict[str, Optional[str]]:
        """Read every known field from the results page.

        Missing elements yield None rather than failing the lookup. Date
        fields keep only the first date-shaped token.
        """
        fields: dict[str, Optional[str]] = {}
        for field_name, selectors in FIELD_SELECTORS.items():
            text = await first_text(page, selectors)
            if field_name in DATE_FIELDS:
                fields[field_name] = extract_date_token(text)
            else:
                fields[field_name] = text or None
        return fields


def _first_line(exc: Exception) -> str:
    # Playwright messages append a multi-line call log.
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__
