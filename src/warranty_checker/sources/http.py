from typing import Optional

import aiohttp

from warranty_checker.sources.base import BaseSource


class HttpSource(BaseSource):
    """Base class for sources that make HTTP requests.

    Manages a shared aiohttp.ClientSession for connection pooling and reuse.
    """

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        """Initialize the HttpSource.

        Args:
            timeout_seconds: Total timeout applied to every request.
        """
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            The shared aiohttp ClientSession.
        """
        if self._session is None or self._session.closed:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> aiohttp.ClientSession:
        """Create a new aiohttp.ClientSession.

        Subclasses can override this to provide custom session configuration.

        Returns:
            A new aiohttp.ClientSession instance.
        """
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
        )

    async def close(self) -> None:
        """Close the aiohttp session.

        Should be called when done using the source to release resources.
        """
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
