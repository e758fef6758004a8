"""Unit tests for the in-memory TTL cache."""

import asyncio
import threading

import pytest

from warranty_checker.cache import WarrantyCache
from warranty_checker.models import WarrantyRecord, WarrantyStatus


@pytest.fixture
def cache(clock):
    """Create a WarrantyCache driven by the fake clock."""
    return WarrantyCache(ttl_seconds=3600, clock=clock.now)


class TestCacheBasicOperations:
    """Test basic cache storage and retrieval."""

    def test_set_and_get_cache_entry(self, cache, active_record):
        cache.set("PF2ABCDE", active_record)

        assert cache.get("PF2ABCDE") is active_record

    def test_get_nonexistent_entry(self, cache):
        assert cache.get("MISSING1") is None

    def test_update_existing_entry(self, cache, active_record):
        cache.set("PF2ABCDE", active_record)
        replacement = WarrantyRecord(
            serial_number="PF2ABCDE", warranty_status=WarrantyStatus.EXPIRED
        )
        cache.set("PF2ABCDE", replacement)

        assert cache.get("PF2ABCDE") is replacement

    def test_len_counts_entries(self, cache, active_record):
        cache.set("PF2ABCDE", active_record)
        cache.set("PF2ABCDF", active_record)

        assert len(cache) == 2


class TestCacheTTL:
    """Test cache TTL expiration."""

    def test_entry_valid_before_expiry(self, cache, clock, active_record):
        cache.set("PF2ABCDE", active_record)
        clock.advance(3599)

        assert cache.get("PF2ABCDE") is active_record

    def test_entry_absent_at_expiry(self, cache, clock, active_record):
        cache.set("PF2ABCDE", active_record)
        clock.advance(3600)

        assert cache.get("PF2ABCDE") is None

    def test_expired_entry_is_evicted_on_read(self, cache, clock, active_record):
        cache.set("PF2ABCDE", active_record)
        clock.advance(7200)
        cache.get("PF2ABCDE")

        assert len(cache) == 0

    def test_per_entry_ttl_override(self, cache, clock, active_record):
        cache.set("PF2ABCDE", active_record, ttl_seconds=10)
        clock.advance(11)

        assert cache.get("PF2ABCDE") is None

    def test_info_reports_live_entries(self, cache, clock, active_record):
        cache.set("PF2ABCDE", active_record, ttl_seconds=10)
        cache.set("PF2ABCDF", active_record)
        clock.advance(60)

        assert cache.info() == {"count": 2, "live": 1, "ttl_seconds": 3600}


class TestCacheClear:
    """Test cache clearing."""

    def test_clear_all(self, cache, active_record):
        cache.set("PF2ABCDE", active_record)
        cache.set("PF2ABCDF", active_record)
        cache.clear()

        assert len(cache) == 0

    def test_clear_single_serial(self, cache, active_record):
        cache.set("PF2ABCDE", active_record)
        cache.set("PF2ABCDF", active_record)
        cache.clear("PF2ABCDE")

        assert cache.get("PF2ABCDE") is None
        assert cache.get("PF2ABCDF") is active_record

    def test_clear_missing_serial_is_noop(self, cache):
        cache.clear("MISSING1")
        assert len(cache) == 0


def test_concurrent_threads_do_not_corrupt(active_record):
    cache = WarrantyCache()
    serials = [f"SERIAL{i:04d}" for i in range(200)]

    def writer(chunk):
        for serial in chunk:
            cache.set(serial, active_record)
            assert cache.get(serial) is active_record

    threads = [threading.Thread(target=writer, args=(serials[i::4],)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 200


@pytest.mark.asyncio
async def test_concurrent_tasks_last_write_wins(active_record):
    cache = WarrantyCache()
    expired = WarrantyRecord(serial_number="PF2ABCDE", warranty_status=WarrantyStatus.EXPIRED)

    async def put(record):
        await asyncio.sleep(0)
        cache.set("PF2ABCDE", record)

    await asyncio.gather(put(active_record), put(expired))

    assert cache.get("PF2ABCDE") is expired
