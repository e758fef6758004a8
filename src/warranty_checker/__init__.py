"""Warranty Checker - warranty status resolution for device serial numbers.

This package resolves warranty status from a vendor that offers no stable
public API: a structured endpoint is tried first, and the vendor's lookup
page is scraped with a headless browser when it is unavailable.
"""

__version__ = "0.1.0"

from warranty_checker.engine import WarrantyEngine
from warranty_checker.models import (
    BatchReport,
    CacheEntry,
    WarrantyRecord,
    WarrantyStatus,
)

__all__ = [
    "__version__",
    "BatchReport",
    "CacheEntry",
    "WarrantyEngine",
    "WarrantyRecord",
    "WarrantyStatus",
]
