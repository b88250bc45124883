"""
Tests for the session refresh policy.
"""

import pytest

from oauth import (
    REFRESH_SKEW_MS,
    AuthRefreshError,
    NotAuthenticatedError,
    SessionRecord,
    TokenPair,
    ensure_valid_access_token,
    needs_refresh,
)

from conftest import FakeSessionStore, FakeSpotifyProvider

NOW = 1_700_000_000_000


def session_expiring_at(expires_at_ms, refresh_token="R1"):
    return FakeSessionStore(SessionRecord("u1", "A1", refresh_token, expires_at_ms))


class TestNeedsRefresh:
    """Test the refresh window boundary"""

    def test_exactly_at_threshold_is_not_due(self):
        assert needs_refresh(NOW + REFRESH_SKEW_MS, NOW) is False

    def test_one_ms_past_threshold_is_due(self):
        assert needs_refresh(NOW + REFRESH_SKEW_MS - 1, NOW) is True

    def test_unknown_expiry_is_never_due(self):
        assert needs_refresh(None, NOW) is False


class TestEnsureValidAccessToken:
    """Test token hand-out with refresh"""

    @pytest.mark.asyncio
    async def test_fresh_token_is_returned_unchanged(self):
        sessions = session_expiring_at(NOW + 3_600_000)
        provider = FakeSpotifyProvider()

        token = await ensure_valid_access_token(sessions, provider, now=NOW)

        assert token == "A1"
        assert provider.refresh_calls == []
        assert sessions.saves == 0

    @pytest.mark.asyncio
    async def test_boundary_does_not_refresh(self):
        sessions = session_expiring_at(NOW + REFRESH_SKEW_MS)
        provider = FakeSpotifyProvider()

        assert await ensure_valid_access_token(sessions, provider, now=NOW) == "A1"
        assert provider.refresh_calls == []

    @pytest.mark.asyncio
    async def test_token_inside_window_is_refreshed(self):
        sessions = session_expiring_at(NOW + 30_000)
        provider = FakeSpotifyProvider()

        token = await ensure_valid_access_token(sessions, provider, now=NOW)

        assert token == "A2"
        assert provider.refresh_calls == ["R1"]
        assert sessions.record.access_token == "A2"
        assert sessions.record.token_expires_at_ms == NOW + 3_600_000

    @pytest.mark.asyncio
    async def test_refresh_keeps_old_refresh_token_when_omitted(self):
        sessions = session_expiring_at(NOW - 1)
        provider = FakeSpotifyProvider()

        await ensure_valid_access_token(sessions, provider, now=NOW)

        assert sessions.record.refresh_token == "R1"

    @pytest.mark.asyncio
    async def test_refresh_rotates_refresh_token_when_returned(self):
        sessions = session_expiring_at(NOW - 1)
        provider = FakeSpotifyProvider()
        provider.refreshed = TokenPair("A2", "R2", 3600)

        await ensure_valid_access_token(sessions, provider, now=NOW)

        assert sessions.record.refresh_token == "R2"
        assert sessions.record.user_id == "u1"

    @pytest.mark.asyncio
    async def test_failed_refresh_leaves_session_unchanged(self):
        original = SessionRecord("u1", "A1", "R1", NOW + 30_000)
        sessions = FakeSessionStore(original)
        provider = FakeSpotifyProvider()
        provider.refresh_error = AuthRefreshError(400, '{"error":"invalid_grant"}')

        with pytest.raises(AuthRefreshError):
            await ensure_valid_access_token(sessions, provider, now=NOW)

        assert sessions.record == original
        assert sessions.saves == 0

    @pytest.mark.asyncio
    async def test_no_session(self):
        with pytest.raises(NotAuthenticatedError):
            await ensure_valid_access_token(FakeSessionStore(), FakeSpotifyProvider(), now=NOW)

    @pytest.mark.asyncio
    async def test_due_without_refresh_token(self):
        sessions = session_expiring_at(NOW, refresh_token=None)
        provider = FakeSpotifyProvider()

        with pytest.raises(AuthRefreshError):
            await ensure_valid_access_token(sessions, provider, now=NOW)

        assert provider.refresh_calls == []
