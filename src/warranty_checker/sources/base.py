"""Base interfaces for warranty sources.

Sources fetch warranty data for one serial number from the vendor, either
through a structured endpoint or by scraping the lookup page.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from warranty_checker.models import WarrantyRecord


@dataclass(frozen=True)
class Found:
    """A source produced a record."""

    record: WarrantyRecord


@dataclass(frozen=True)
class Unavailable:
    """A best-effort source could not answer; the caller should fall back.

    Attributes:
        reason: Short description for logging (status code, error text).
    """

    reason: str = ""


LookupOutcome = Union[Found, Unavailable]


class BaseSource(ABC):
    """Abstract base class for warranty sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the source name for logging/debugging.

        Returns:
            Name like "API" or "Scrape".
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the source."""

    async def __aenter__(self) -> "BaseSource":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
