"""JSON source fetcher - manifest and mapping documents over HTTP or from disk."""

import asyncio
import json
import logging
from typing import Any, Optional

import aiofiles
import aiohttp

from ..config import Config
from ..exceptions import DataFetchFailure
from .base import BaseFetcher

logger = logging.getLogger(__name__)


def is_remote(source: str) -> bool:
    """True for http(s) URLs, False for local paths."""
    return source.startswith(("http://", "https://"))


class JsonSourceFetcher(BaseFetcher):
    """
    Fetch JSON documents with a single attempt per source.

    Remote sources share one aiohttp session (connection pooling); local
    sources are read with aiofiles so the event loop is never blocked.
    """

    def __init__(self, timeout: Optional[int] = None):
        """
        Initialize JSON fetcher.

        Args:
            timeout: Total request timeout in seconds (defaults to Config.TIMEOUT)
        """
        self.timeout = timeout or Config.TIMEOUT
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create a shared aiohttp session (connection pooling)."""
        async with self._session_lock:
            if self._session is None or self._session.closed:
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def close(self) -> None:
        """Close the aiohttp session. Call this when done with the fetcher."""
        async with self._session_lock:
            if self._session and not self._session.closed:
                await self._session.close()
                self._session = None

    async def _read_remote(self, url: str) -> str:
        session = await self._get_session()
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise DataFetchFailure(
                        f"Fetch error! status: {response.status} - Could not fetch {url}"
                    )
                return await response.text()
        except UnicodeDecodeError as e:
            raise DataFetchFailure(f"Invalid encoding in {url}: {e}") from e
        except asyncio.TimeoutError as e:
            raise DataFetchFailure(f"Timed out fetching {url}") from e
        except aiohttp.ClientError as e:
            raise DataFetchFailure(f"Could not fetch {url}: {e}") from e

    async def _read_local(self, path: str) -> str:
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                return await f.read()
        except UnicodeDecodeError as e:
            raise DataFetchFailure(f"Invalid encoding in {path}: {e}") from e
        except FileNotFoundError as e:
            raise DataFetchFailure(f"Fetch error! status: 404 - Could not fetch {path}") from e
        except OSError as e:
            raise DataFetchFailure(f"Could not read {path}: {e}") from e

    async def fetch(self, source: str) -> Any:
        """
        Fetch a JSON document from a URL or a local path.

        Args:
            source: http(s) URL or filesystem path

        Returns:
            The decoded JSON value

        Raises:
            DataFetchFailure: on HTTP errors, missing files or invalid JSON
        """
        logger.debug("Fetching %s", source)
        if is_remote(source):
            text = await self._read_remote(source)
        else:
            text = await self._read_local(source)

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DataFetchFailure(f"Invalid JSON in {source}: {e}") from e
