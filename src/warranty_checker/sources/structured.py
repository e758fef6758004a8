"""Structured warranty source backed by the vendor's JSON endpoint.

The endpoint is best-effort: the vendor publishes no stable API, so every
failure mode (network error, timeout, non-200 status, unexpected payload)
yields ``Unavailable`` and the engine falls back to scraping.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Optional

import aiohttp

from warranty_checker.config import WarrantySettings
from warranty_checker.models import WarrantyRecord, WarrantyStatus
from warranty_checker.normalizer import build_record, parse_date
from warranty_checker.sources.base import Found, LookupOutcome, Unavailable
from warranty_checker.sources.http import HttpSource

logger = logging.getLogger(__name__)


class StructuredSource(HttpSource):
    """Source that queries the vendor's structured warranty endpoint.

    Sends ``POST {"serialNumber": ...}`` and expects a payload shaped like
    ``{"status": "success", "data": {"product": ..., "warranty": {...}}}``.

    This source manages an aiohttp session for connection reuse across
    lookups. Use as an async context manager or call close() when done.
    """

    def __init__(self, settings: Optional[WarrantySettings] = None) -> None:
        """Initialize the structured source.

        Args:
            settings: Engine settings (endpoint URL, timeout, user agent).
        """
        self.settings = settings or WarrantySettings()
        super().__init__(timeout_seconds=self.settings.api_timeout_seconds)

    @property
    def name(self) -> str:
        return "API"

    async def lookup(
        self, serial: str, today: Optional[date] = None
    ) -> LookupOutcome:
        """Query the structured endpoint for one serial number.

        Args:
            serial: Normalized serial number.
            today: Reference date for status classification.

        Returns:
            Found(record) for a well-formed success payload, otherwise
            Unavailable with the reason.
        """
        url = self.settings.api_url
        headers = {
            "User-Agent": self.settings.api_user_agent,
            "Content-Type": "application/json",
        }
        logger.debug("Querying structured endpoint %s for %s", url, serial)

        try:
            session = await self._get_session()
            async with session.post(
                url, json={"serialNumber": serial}, headers=headers
            ) as response:
                if response.status != 200:
                    return self._unavailable(
                        serial, f"endpoint returned status {response.status}"
                    )
                try:
                    payload = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError) as e:
                    return self._unavailable(serial, f"invalid JSON: {e}")
        except asyncio.TimeoutError:
            return self._unavailable(serial, "request timed out")
        except aiohttp.ClientError as e:
            return self._unavailable(serial, f"network error: {e}")

        return self._parse_payload(serial, payload, today)

    def _parse_payload(
        self, serial: str, payload: Any, today: Optional[date]
    ) -> LookupOutcome:
        """Convert a response payload into a lookup outcome."""
        if not isinstance(payload, dict):
            return self._unavailable(serial, "payload is not an object")

        if payload.get("status") != "success":
            reason = payload.get("error") or f"status {payload.get('status')!r}"
            return self._unavailable(serial, str(reason))

        data = payload.get("data")
        if not isinstance(data, dict):
            return self._unavailable(serial, "payload has no data object")

        warranty = data.get("warranty")
        if not warranty:
            # A successful answer without warranty data means the vendor has no record.
            return Found(
                WarrantyRecord(
                    serial_number=serial,
                    warranty_status=WarrantyStatus.NOT_FOUND,
                    product_name=_as_text(data.get("product")),
                )
            )
        if not isinstance(warranty, dict):
            return self._unavailable(serial, "warranty is not an object")

        end_text = _as_text(warranty.get("endDate"))
        if parse_date(end_text) is None:
            return self._unavailable(serial, f"unparseable endDate {end_text!r}")

        record = build_record(
            serial,
            product_name=_as_text(data.get("product")),
            warranty_start_date=_as_text(warranty.get("startDate")),
            warranty_end_date=end_text,
            warranty_type=_as_text(warranty.get("type")),
            today=today,
            expiring_within_days=self.settings.expiring_soon_days,
        )
        logger.debug("Structured endpoint resolved %s as %s", serial, record.warranty_status)
        return Found(record)

    def _unavailable(self, serial: str, reason: str) -> Unavailable:
        logger.debug("Structured endpoint unavailable for %s: %s", serial, reason)
        return Unavailable(reason)


def _as_text(value: Any) -> Optional[str]:
    # Nested objects and booleans are not text fields.
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None
