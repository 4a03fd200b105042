"""
Unit tests for the access token cache.
"""

import asyncio
import pytest

from scriptflow.aggregation.token_cache import AccessTokenCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class CountingFetcher:
    """Token endpoint stand-in; each call issues a new token."""

    def __init__(self, expires_in=3600, delay=0):
        self.calls = 0
        self.expires_in = expires_in
        self.delay = delay

    async def __call__(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return f"token-{self.calls}", self.expires_in


class TestAccessTokenCache:
    """Tests for AccessTokenCache."""

    @pytest.mark.asyncio
    async def test_fetches_when_empty(self):
        fetcher = CountingFetcher()
        cache = AccessTokenCache(fetcher, clock=FakeClock())

        assert not cache.is_valid
        assert await cache.get_token() == "token-1"
        assert cache.is_valid

    @pytest.mark.asyncio
    async def test_reuses_valid_token(self):
        fetcher = CountingFetcher()
        cache = AccessTokenCache(fetcher, clock=FakeClock())

        await cache.get_token()
        await cache.get_token()

        assert fetcher.calls == 1

    @pytest.mark.asyncio
    async def test_refreshes_inside_expiry_margin(self):
        clock = FakeClock()
        fetcher = CountingFetcher(expires_in=3600)
        cache = AccessTokenCache(fetcher, expiry_margin_seconds=60, clock=clock)

        await cache.get_token()
        clock.now += 3600 - 61
        assert await cache.get_token() == "token-1"

        clock.now += 2
        assert await cache.get_token() == "token-2"
        assert fetcher.calls == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self):
        fetcher = CountingFetcher(delay=0.01)
        cache = AccessTokenCache(fetcher, clock=FakeClock())

        tokens = await asyncio.gather(*(cache.get_token() for _ in range(10)))

        assert tokens == ["token-1"] * 10
        assert fetcher.calls == 1
        assert cache.refresh_count == 1

    @pytest.mark.asyncio
    async def test_failed_refresh_can_be_retried(self):
        attempts = []

        async def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("auth down")
            return "fresh", 3600

        cache = AccessTokenCache(flaky, clock=FakeClock())

        with pytest.raises(RuntimeError):
            await cache.get_token()
        assert await cache.get_token() == "fresh"

    @pytest.mark.asyncio
    async def test_clear_forces_refresh(self):
        fetcher = CountingFetcher()
        cache = AccessTokenCache(fetcher, clock=FakeClock())

        await cache.get_token()
        cache.clear()

        assert await cache.get_token() == "token-2"
