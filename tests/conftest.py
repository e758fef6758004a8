"""Pytest configuration and fixtures."""

from datetime import UTC, date, datetime, timedelta

import pytest

from warranty_checker.config import WarrantySettings
from warranty_checker.models import WarrantyRecord, WarrantyStatus

TODAY = date(2026, 1, 15)


class FakeClock:
    """Virtual clock whose ``sleep`` advances time instead of blocking."""

    def __init__(self, start: datetime = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)):
        self.current = start
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return self.current.timestamp()

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)


@pytest.fixture
def today() -> date:
    """Fixed reference date for status classification."""
    return TODAY


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> WarrantySettings:
    """Settings pointing at test URLs with zero pacing delays."""
    return WarrantySettings(
        api_url="https://api.example.test/warranty/check",
        lookup_url="https://support.example.test/warrantylookup",
        chunk_delay_seconds=0,
        settle_delay_ms=0,
    )


@pytest.fixture
def active_record() -> WarrantyRecord:
    return WarrantyRecord(
        serial_number="PF2ABCDE",
        warranty_status=WarrantyStatus.ACTIVE,
        product_name="ThinkPad T14 Gen 3",
        product_type="Laptop",
        warranty_start_date="2024-03-01",
        warranty_end_date="2027-03-01",
        days_remaining=410,
        warranty_type="Onsite",
    )
