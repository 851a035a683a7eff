"""HTTP capability used to fetch Node distributions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, Optional

import httpx

CHUNK_SIZE = 64 * 1024


class HttpClient(ABC):
    """Streams the body of a GET request."""

    @abstractmethod
    def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        follow_redirects: bool = True,
    ) -> AsyncIterator[bytes]:
        """Yield the response body in chunks.

        Implementations raise on transport errors and non-success statuses.
        """


class HttpxClient(HttpClient):
    """HttpClient backed by httpx.AsyncClient."""

    def __init__(self, timeout: float = 300.0):
        self.timeout = timeout

    async def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        follow_redirects: bool = True,
    ) -> AsyncIterator[bytes]:
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=follow_redirects
        ) as client:
            async with client.stream("GET", url, headers=headers) as response:
                response.raise_for_status()
                async for chunk in response.aiter_bytes(CHUNK_SIZE):
                    yield chunk
