"""Warranty resolution engine orchestrating cache, sources and batching.

This module implements the lookup strategy for one serial number (cache,
then the structured endpoint, then scraping) and the paced batch operations
built on top of it.
"""

import logging
import time
import uuid
from collections.abc import Callable, Sequence
from datetime import date
from typing import Optional

from warranty_checker.cache import WarrantyCache
from warranty_checker.config import WarrantySettings
from warranty_checker.exceptions import BatchSizeError, InvalidSerialError
from warranty_checker.models import BatchReport, WarrantyRecord, normalize_serial
from warranty_checker.scheduler import BatchScheduler, FixedDelayPacing
from warranty_checker.sources.base import Found
from warranty_checker.sources.scrape import ScrapeSource
from warranty_checker.sources.structured import StructuredSource

logger = logging.getLogger(__name__)


class WarrantyEngine:
    """Resolves warranty records for serial numbers.

    Resolution strategy for a single serial:
    1. Cache: return a live cached record unchanged
    2. Structured endpoint: use its record if it answers
    3. Scrape: drive the vendor lookup page as the terminal fallback

    Any failure is contained to the serial it affects and returned as an
    ``Error`` record. Error records are not cached.

    Attributes:
        settings: Engine settings.
        cache: TTL cache of resolved records.
        structured: Structured endpoint source.
        scraper: Web scraping source (owns the shared browser).
        scheduler: Chunked batch scheduler.
    """

    def __init__(
        self,
        settings: Optional[WarrantySettings] = None,
        cache: Optional[WarrantyCache] = None,
        structured: Optional[StructuredSource] = None,
        scraper: Optional[ScrapeSource] = None,
        scheduler: Optional[BatchScheduler] = None,
    ) -> None:
        """Initialize the engine with optional custom collaborators.

        Args:
            settings: Optional settings. Defaults to ``WarrantySettings()``.
            cache: Optional cache. If not provided, creates one with the
                configured TTL.
            structured: Optional structured source.
            scraper: Optional scrape source.
            scheduler: Optional batch scheduler. If not provided, creates one
                with the configured chunk size and fixed-delay pacing.
        """
        self.settings = settings or WarrantySettings()
        self.cache = cache or WarrantyCache(ttl_seconds=self.settings.cache_ttl_seconds)
        self.structured = structured or StructuredSource(self.settings)
        self.scraper = scraper or ScrapeSource(self.settings)
        self.scheduler = scheduler or BatchScheduler(
            chunk_size=self.settings.chunk_size,
            pacing=FixedDelayPacing(self.settings.chunk_delay_seconds),
        )

    async def resolve_one(
        self, serial: str, today: Optional[date] = None
    ) -> WarrantyRecord:
        """Resolve the warranty record for one serial number.

        Never raises: invalid input and source failures are returned as
        ``Error`` records.

        Args:
            serial: Serial number (normalized to uppercase here).
            today: Reference date for status classification.

        Returns:
            The resolved WarrantyRecord.
        """
        try:
            serial = normalize_serial(serial)
        except InvalidSerialError as e:
            logger.warning("Rejecting serial %r: %s", serial, e)
            return WarrantyRecord.failed(str(serial).strip().upper(), str(e))

        cached = self.cache.get(serial)
        if cached is not None:
            logger.debug("Cache hit for %s", serial)
            return cached

        try:
            outcome = await self.structured.lookup(serial, today=today)
            if isinstance(outcome, Found):
                record = outcome.record
            else:
                logger.debug("Falling back to scraping for %s", serial)
                record = await self.scraper.scrape(serial, today=today)
        except Exception as e:
            logger.error("Error checking warranty for %s: %s", serial, e)
            return WarrantyRecord.failed(serial, str(e) or type(e).__name__)

        if not record.is_error:
            self.cache.set(serial, record)
        return record

    async def resolve_batch(
        self,
        serials: Sequence[str],
        on_chunk: Optional[Callable[[int, int], None]] = None,
        today: Optional[date] = None,
    ) -> list[WarrantyRecord]:
        """Resolve a batch of serial numbers in paced chunks.

        Args:
            serials: Ordered serial numbers, at most ``max_batch_size``.
            on_chunk: Optional progress callback (completed, total chunks).
            today: Reference date for status classification.

        Returns:
            One record per input serial, in input order.

        Raises:
            BatchSizeError: If the batch exceeds ``max_batch_size``.
        """
        if len(serials) > self.settings.max_batch_size:
            raise BatchSizeError(len(serials), self.settings.max_batch_size)

        logger.info("Starting warranty check for %d serial numbers", len(serials))

        async def _resolve(serial: str) -> WarrantyRecord:
            return await self.resolve_one(serial, today=today)

        results = await self.scheduler.run(list(serials), _resolve, on_chunk=on_chunk)

        errors = sum(1 for record in results if record.is_error)
        logger.info(
            "Warranty check complete: %d/%d without errors",
            len(results) - errors,
            len(results),
        )
        return results

    async def check_batch(
        self,
        serials: Sequence[str],
        batch_id: Optional[str] = None,
        on_chunk: Optional[Callable[[int, int], None]] = None,
    ) -> BatchReport:
        """Resolve a batch and summarize it.

        Args:
            serials: Ordered serial numbers.
            batch_id: Optional identifier; a UUID4 is generated if omitted.
            on_chunk: Optional progress callback.

        Returns:
            BatchReport with results, error count, status counts and timing.
        """
        started = time.perf_counter()
        results = await self.resolve_batch(serials, on_chunk=on_chunk)
        return BatchReport.from_results(
            results,
            batch_id=batch_id or str(uuid.uuid4()),
            processing_time=time.perf_counter() - started,
        )

    async def cleanup(self) -> None:
        """Close the browser and HTTP sessions and clear the cache.

        Should be called on shutdown. Sources re-initialize lazily if the
        engine is used again.
        """
        try:
            await self.scraper.close()
        finally:
            try:
                await self.structured.close()
            finally:
                self.cache.clear()

    async def close(self) -> None:
        await self.cleanup()

    async def __aenter__(self) -> "WarrantyEngine":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.cleanup()
