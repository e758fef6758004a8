"""Chunked batch scheduling with pacing between chunks.

Items inside a chunk run concurrently; chunks run one after another with a
pacing policy awaited before every chunk but the first. The pacing is a
throttle against the vendor's abuse detection.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into order-preserving chunks of at most ``size``."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class PacingPolicy(ABC):
    """Decides how long to wait before the next chunk is issued."""

    @abstractmethod
    async def wait(self) -> None:
        ...


class FixedDelayPacing(PacingPolicy):
    """Sleep a fixed number of seconds between chunks.

    Attributes:
        delay_seconds: Pause before each chunk after the first.
    """

    def __init__(
        self,
        delay_seconds: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    async def wait(self) -> None:
        if self.delay_seconds > 0:
            await self._sleep(self.delay_seconds)


class NoPacing(PacingPolicy):
    """Issue chunks back to back."""

    async def wait(self) -> None:
        return None


class BatchScheduler:
    """Run a worker over a batch in paced, concurrent chunks.

    Attributes:
        chunk_size: Maximum number of concurrent workers per chunk.
        pacing: Policy awaited between consecutive chunks.
    """

    def __init__(
        self,
        chunk_size: int = 10,
        pacing: Optional[PacingPolicy] = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.pacing = pacing or FixedDelayPacing()

    async def run(
        self,
        items: Sequence[T],
        worker: Callable[[T], Awaitable[R]],
        on_chunk: Optional[Callable[[int, int], None]] = None,
    ) -> list[R]:
        """Apply ``worker`` to every item, chunk by chunk.

        Args:
            items: Ordered input items.
            worker: Coroutine function applied to each item. Exceptions it
                raises propagate and abort the batch.
            on_chunk: Optional callback invoked with (completed_chunks,
                total_chunks) after each chunk finishes.

        Returns:
            Worker results in input order.
        """
        chunks = chunked(items, self.chunk_size)
        results: list[R] = []

        for index, chunk in enumerate(chunks):
            if index > 0:
                await self.pacing.wait()
            logger.debug(
                "Processing chunk %d/%d (%d items)", index + 1, len(chunks), len(chunk)
            )
            results.extend(await asyncio.gather(*(worker(item) for item in chunk)))
            if on_chunk is not None:
                on_chunk(index + 1, len(chunks))

        return results
