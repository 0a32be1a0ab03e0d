"""Tests for the bearer token cache."""

import asyncio

import pytest

from open_toolchain_sdk.auth.token_manager import EXPIRY_MARGIN, IAMToken, TokenManager


class TestIAMToken:
    @pytest.mark.unit
    def test_refreshes_at_eighty_percent_of_lifetime(self):
        token = IAMToken.from_response({"access_token": "t", "expires_in": 3600}, now=1000.0)

        assert token.expires_at == 4600.0
        assert token.refresh_at == 1000.0 + 3600 * 0.8
        assert not token.needs_refresh(now=3000.0)
        assert token.needs_refresh(now=3880.0)

    @pytest.mark.unit
    def test_expiration_wins_over_expires_in(self):
        token = IAMToken.from_response({"access_token": "t", "expires_in": 10, "expiration": 2000}, now=1000.0)

        assert token.expires_at == 2000.0
        assert token.refresh_at == 1800.0

    @pytest.mark.unit
    def test_short_lifetime_uses_expiry_margin(self):
        token = IAMToken.from_response({"access_token": "t", "expires_in": 200}, now=1000.0)
        assert token.refresh_at == 1200.0 - EXPIRY_MARGIN

    @pytest.mark.unit
    def test_lifetime_under_margin_is_cached_for_half_of_it(self):
        token = IAMToken.from_response({"access_token": "t", "expires_in": 30}, now=1000.0)

        assert token.refresh_at == 1015.0
        assert not token.needs_refresh(now=1000.0)
        assert not token.needs_refresh(now=1014.0)
        assert token.needs_refresh(now=1015.0)

    @pytest.mark.unit
    def test_expired_on_arrival_is_stale(self):
        token = IAMToken.from_response({"access_token": "t", "expiration": 990}, now=1000.0)
        assert token.needs_refresh(now=1000.0)

    @pytest.mark.unit
    @pytest.mark.parametrize("data", [{}, {"access_token": ""}, {"access_token": 5}])
    def test_invalid(self, data):
        with pytest.raises((KeyError, ValueError)):
            IAMToken.from_response(data)


class TestTokenManager:
    @pytest.mark.unit
    async def test_fetches_once_and_caches(self):
        calls = []

        async def fetch():
            calls.append(1)
            return IAMToken.from_response({"access_token": f"token-{len(calls)}", "expires_in": 3600})

        manager = TokenManager(fetch)

        assert await manager.get_token() == "token-1"
        assert await manager.get_token() == "token-1"
        assert len(calls) == 1

    @pytest.mark.unit
    async def test_invalidate_forces_refresh(self):
        calls = []

        async def fetch():
            calls.append(1)
            return IAMToken.from_response({"access_token": f"token-{len(calls)}", "expires_in": 3600})

        manager = TokenManager(fetch)
        await manager.get_token()
        manager.invalidate()

        assert await manager.get_token() == "token-2"

    @pytest.mark.unit
    async def test_cancelled_caller_does_not_cancel_refresh(self):
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            return IAMToken.from_response({"access_token": "shared", "expires_in": 3600})

        manager = TokenManager(fetch)
        first = asyncio.ensure_future(manager.get_token())
        second = asyncio.ensure_future(manager.get_token())
        await asyncio.sleep(0)

        first.cancel()
        release.set()

        assert await second == "shared"
        assert first.cancelled()
        assert manager.token.access_token == "shared"
