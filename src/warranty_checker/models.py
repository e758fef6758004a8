"""Core data models for warranty_checker.

This module defines the fundamental data structures used throughout the
warranty resolution engine: warranty statuses, per-serial records, cache
entries and batch reports, plus serial number normalization.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from warranty_checker.exceptions import InvalidSerialError

SERIAL_PATTERN = re.compile(r"^[A-Z0-9]{6,15}$")


def normalize_serial(raw: str) -> str:
    """Normalize a serial number to its canonical uppercase form.

    Args:
        raw: Serial number as supplied by the caller.

    Returns:
        The stripped, uppercased serial number.

    Raises:
        InvalidSerialError: If the value is not 6-15 alphanumeric characters.
    """
    if not isinstance(raw, str):
        raise InvalidSerialError(str(raw))
    serial = raw.strip().upper()
    if not SERIAL_PATTERN.match(serial):
        raise InvalidSerialError(raw)
    return serial


class WarrantyStatus(str, Enum):
    """Classification of a warranty lookup outcome."""

    ACTIVE = "Active"
    EXPIRED = "Expired"
    EXPIRING_SOON = "Expiring Soon"
    ERROR = "Error"
    NOT_FOUND = "Not Found"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class WarrantyRecord:
    """Immutable warranty lookup result for one serial number.

    Produced exactly once per lookup. The engine only retains it through
    the cache entry.

    Attributes:
        serial_number: Normalized serial number the record describes.
        warranty_status: Derived status classification.
        product_name: Product/model name reported by the vendor.
        product_type: Product category reported by the vendor.
        warranty_start_date: Start date as reported (MM/DD/YYYY or ISO).
        warranty_end_date: End date as reported (MM/DD/YYYY or ISO).
        days_remaining: Days until the end date (negative once expired).
        warranty_type: Coverage type (e.g. "Depot", "Onsite").
        error_message: Human-readable failure or vendor error text.
    """

    serial_number: str
    warranty_status: WarrantyStatus
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    warranty_start_date: Optional[str] = None
    warranty_end_date: Optional[str] = None
    days_remaining: Optional[int] = None
    warranty_type: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def failed(cls, serial_number: str, message: str) -> "WarrantyRecord":
        """Build an ``Error`` record carrying ``message``."""
        return cls(
            serial_number=serial_number,
            warranty_status=WarrantyStatus.ERROR,
            error_message=message,
        )

    @property
    def is_error(self) -> bool:
        return self.warranty_status is WarrantyStatus.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape, omitting absent fields."""
        data = {
            "serialNumber": self.serial_number,
            "productName": self.product_name,
            "productType": self.product_type,
            "warrantyStartDate": self.warranty_start_date,
            "warrantyEndDate": self.warranty_end_date,
            "daysRemaining": self.days_remaining,
            "warrantyStatus": self.warranty_status.value,
            "warrantyType": self.warranty_type,
            "errorMessage": self.error_message,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class CacheEntry:
    """Cached warranty record with its expiry timestamp.

    Attributes:
        key: Normalized serial number.
        value: The cached record.
        expires_at: Aware timestamp after which the entry is treated as absent.
    """

    key: str
    value: WarrantyRecord
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass
class BatchReport:
    """Summary of a batch warranty check.

    Attributes:
        results: One record per input serial, in input order.
        batch_id: Caller-supplied or generated batch identifier.
        processing_time: Wall-clock duration of the batch in seconds.
        status_counts: Number of records per status value.
    """

    results: list[WarrantyRecord]
    batch_id: str
    processing_time: float
    status_counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_results(
        cls,
        results: list[WarrantyRecord],
        batch_id: str,
        processing_time: float,
    ) -> "BatchReport":
        counts = Counter(record.warranty_status.value for record in results)
        return cls(
            results=results,
            batch_id=batch_id,
            processing_time=processing_time,
            status_counts={status.value: counts.get(status.value, 0) for status in WarrantyStatus},
        )

    @property
    def total_processed(self) -> int:
        return len(self.results)

    @property
    def errors(self) -> int:
        return sum(1 for record in self.results if record.is_error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "results": [record.to_dict() for record in self.results],
            "totalProcessed": self.total_processed,
            "errors": self.errors,
            "batchId": self.batch_id,
            "processingTime": round(self.processing_time, 3),
            "statusCounts": dict(self.status_counts),
        }
