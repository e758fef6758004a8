"""Warranty sources for fetching data from the vendor.

This module provides the structured (JSON endpoint) source, the scrape
source that drives the vendor lookup page, and the shared browser session.
"""

from warranty_checker.sources.base import (
    BaseSource,
    Found,
    LookupOutcome,
    Unavailable,
)
from warranty_checker.sources.browser import BrowserSession
from warranty_checker.sources.scrape import ScrapeSource
from warranty_checker.sources.structured import StructuredSource

__all__ = [
    "BaseSource",
    "BrowserSession",
    "Found",
    "LookupOutcome",
    "ScrapeSource",
    "StructuredSource",
    "Unavailable",
]
