"""Base fetcher class."""

from abc import ABC, abstractmethod
from typing import Any


class BaseFetcher(ABC):
    """
    Abstract base class for all fetchers.

    Provides lifecycle management and async context manager support.
    Subclasses should implement fetch() and optionally override close().
    """

    @abstractmethod
    async def fetch(self, source: str) -> Any:
        """
        Fetch and decode a resource.

        Args:
            source: Source URL or local path

        Returns:
            The decoded document

        Raises:
            DataFetchFailure: if the resource cannot be fetched or decoded
        """
        pass

    async def close(self) -> None:
        """
        Close any open resources (sessions, connections, etc.).

        Subclasses should override this to clean up their resources.
        """
        pass

    async def __aenter__(self) -> "BaseFetcher":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - ensure resources are closed."""
        await self.close()
