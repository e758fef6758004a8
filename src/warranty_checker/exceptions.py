"""Exception hierarchy for warranty_checker.

Per-serial failures never escape the engine as exceptions: they are
converted into ``Error`` records. The exceptions here are raised internally
by the sources and for caller errors (malformed serials, oversized batches).
"""


class WarrantyCheckerError(Exception):
    """Base class for all warranty_checker errors."""


class InvalidSerialError(WarrantyCheckerError, ValueError):
    """A serial number does not match the accepted format."""

    def __init__(self, serial: str) -> None:
        self.serial = serial
        super().__init__(
            f"Invalid serial number format: {serial!r} "
            "(expected 6-15 alphanumeric characters)"
        )


class ResolutionError(WarrantyCheckerError):
    """Failure while resolving warranty data for a single serial."""


class BatchSizeError(WarrantyCheckerError, ValueError):
    """A batch exceeds the maximum number of serials per request."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"Maximum {limit} serial numbers allowed per request, got {size}"
        )
