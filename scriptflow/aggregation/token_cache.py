"""Access token cache with single-flight refresh."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

# (access_token, expires_in_seconds)
TokenFetcher = Callable[[], Awaitable[tuple[str, float]]]


class AccessTokenCache:
    """
    Caches one OAuth access token for the owning client.

    Concurrent callers that find the token missing or expired share a single
    in-flight refresh instead of each requesting a new token.
    """

    def __init__(
        self,
        fetcher: TokenFetcher,
        expiry_margin_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetcher = fetcher
        self._margin = expiry_margin_seconds
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0
        self._refresh_task: Optional[asyncio.Task] = None
        self.refresh_count = 0

    @property
    def is_valid(self) -> bool:
        return self._token is not None and self._clock() < self._expires_at

    async def get_token(self) -> str:
        if self.is_valid:
            return self._token
        return await self.refresh()

    async def refresh(self) -> str:
        """Refresh the token, joining a refresh already in flight."""
        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._do_refresh())
        task = self._refresh_task
        try:
            return await asyncio.shield(task)
        finally:
            if task.done() and self._refresh_task is task:
                self._refresh_task = None

    async def _do_refresh(self) -> str:
        token, expires_in = await self._fetcher()
        self.refresh_count += 1
        self._token = token
        self._expires_at = self._clock() + expires_in - self._margin
        logger.debug(f"Access token refreshed, valid for {expires_in - self._margin:.0f}s")
        return token

    def clear(self):
        self._token = None
        self._expires_at = 0.0
