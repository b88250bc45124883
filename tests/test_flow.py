"""
Tests for login start and the OAuth callback state machine.
"""

import asyncio

import pytest

from oauth import (
    AuthExchangeError,
    CallbackState,
    InvalidOrExpiredStateError,
    MissingAuthorizationCodeError,
    OAuthCallbackFlow,
    ProfileFetchError,
    SessionPersistError,
    begin_login,
    pkce_key,
)

from conftest import FakeSessionStore, FakeSpotifyProvider
from utils.storage import MemoryStore

NOW_TOLERANCE_MS = 5_000


class SlowExchangeProvider(FakeSpotifyProvider):
    """Yields to the event loop during the exchange so callbacks interleave"""

    async def exchange_code(self, code: str, code_verifier: str):
        await asyncio.sleep(0.01)
        return await super().exchange_code(code, code_verifier)


class BrokenStore(MemoryStore):
    async def take(self, key: str):
        raise ConnectionError("store connection reset")


class TestBeginLogin:
    """Test login start"""

    @pytest.mark.asyncio
    async def test_stores_verifier_under_state(self, provider, store):
        login = await begin_login(provider, store)

        assert await store.get(pkce_key(login.state)) == "verifier-1"
        assert f"state={login.state}" in login.authorize_url
        assert "code_challenge=challenge-1" in login.authorize_url

    @pytest.mark.asyncio
    async def test_states_are_unique(self, provider, store):
        first = await begin_login(provider, store)
        second = await begin_login(provider, store)

        assert first.state != second.state


class TestOAuthCallbackFlow:
    """Test callback processing"""

    @pytest.mark.asyncio
    async def test_success_establishes_session(self, provider, store, sessions):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)
        flow = OAuthCallbackFlow(provider, store, sessions)

        outcome = await flow.run("abc", "xyz")

        assert outcome.succeeded
        assert flow.state is CallbackState.SESSION_ESTABLISHED
        assert provider.exchange_calls == [("abc", "verifier-1")]
        assert provider.profile_calls == ["A1"]
        record = sessions.load()
        assert record.user_id == "u1"
        assert record.access_token == "A1"
        assert record.refresh_token == "R1"
        assert outcome.session == record
        assert outcome.user["id"] == "u1"

    @pytest.mark.asyncio
    async def test_expiry_is_now_plus_lifetime(self, provider, store, sessions):
        from oauth.token_manager import now_ms

        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)
        before = now_ms()

        await OAuthCallbackFlow(provider, store, sessions).run("abc", "xyz")

        expires = sessions.load().token_expires_at_ms
        assert before + 3_600_000 <= expires <= before + 3_600_000 + NOW_TOLERANCE_MS

    @pytest.mark.asyncio
    async def test_verifier_is_consumed(self, provider, store, sessions):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)

        await OAuthCallbackFlow(provider, store, sessions).run("abc", "xyz")

        assert await store.get(pkce_key("xyz")) is None

    @pytest.mark.asyncio
    async def test_replayed_state_is_rejected(self, provider, store, sessions):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)
        await OAuthCallbackFlow(provider, store, sessions).run("abc", "xyz")

        replay_sessions = FakeSessionStore()
        outcome = await OAuthCallbackFlow(provider, store, replay_sessions).run("abc", "xyz")

        assert outcome.state is CallbackState.ERROR_TERMINAL
        assert isinstance(outcome.error, InvalidOrExpiredStateError)
        assert outcome.failed_step is CallbackState.AWAITING_CODE
        assert replay_sessions.load() is None
        assert len(provider.exchange_calls) == 1

    @pytest.mark.asyncio
    async def test_unknown_state(self, provider, store, sessions):
        outcome = await OAuthCallbackFlow(provider, store, sessions).run("abc", "nope")

        assert isinstance(outcome.error, InvalidOrExpiredStateError)
        assert provider.exchange_calls == []

    @pytest.mark.asyncio
    async def test_provider_error_short_circuits(self, provider, store, sessions):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)

        outcome = await OAuthCallbackFlow(provider, store, sessions).run(None, "xyz", error="access_denied")

        assert outcome.state is CallbackState.ERROR_TERMINAL
        assert outcome.provider_error == "access_denied"
        assert sessions.load() is None
        assert provider.exchange_calls == []

    @pytest.mark.asyncio
    async def test_missing_code(self, provider, store, sessions):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)

        outcome = await OAuthCallbackFlow(provider, store, sessions).run(None, "xyz")

        assert isinstance(outcome.error, MissingAuthorizationCodeError)
        assert sessions.load() is None

    @pytest.mark.asyncio
    async def test_exchange_failure_reports_step(self, provider, store, sessions):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)
        provider.exchange_error = AuthExchangeError(400, "invalid_grant")

        outcome = await OAuthCallbackFlow(provider, store, sessions).run("abc", "xyz")

        assert outcome.failed_step is CallbackState.EXCHANGING_TOKEN
        assert outcome.error.status_code == 400
        assert sessions.load() is None

    @pytest.mark.asyncio
    async def test_profile_failure_reports_step(self, provider, store, sessions):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)
        provider.profile_error = ProfileFetchError(401, "bad token")

        outcome = await OAuthCallbackFlow(provider, store, sessions).run("abc", "xyz")

        assert outcome.failed_step is CallbackState.FETCHING_PROFILE
        assert sessions.load() is None

    @pytest.mark.asyncio
    async def test_session_write_failure(self, provider, store):
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)
        sessions = FakeSessionStore(fail_writes=True)

        outcome = await OAuthCallbackFlow(provider, store, sessions).run("abc", "xyz")

        assert isinstance(outcome.error, SessionPersistError)
        assert outcome.failed_step is CallbackState.FETCHING_PROFILE
        assert outcome.state is CallbackState.ERROR_TERMINAL

    @pytest.mark.asyncio
    async def test_mock_code_without_verifier(self, provider, store, sessions):
        flow = OAuthCallbackFlow(provider, store, sessions, use_mock=True)

        outcome = await flow.run("mock-authorization-code-abc123", "unknown")

        assert outcome.succeeded
        assert provider.exchange_calls == [("mock-authorization-code-abc123", "mock-code-verifier")]

    @pytest.mark.asyncio
    async def test_mock_code_rejected_outside_mock_mode(self, provider, store, sessions):
        outcome = await OAuthCallbackFlow(provider, store, sessions).run("mock-authorization-code-abc123", "unknown")

        assert isinstance(outcome.error, InvalidOrExpiredStateError)

    @pytest.mark.asyncio
    async def test_store_failure_ends_in_error_terminal(self, provider, sessions):
        flow = OAuthCallbackFlow(provider, BrokenStore(), sessions)

        outcome = await flow.run("abc", "xyz")

        assert flow.state is CallbackState.ERROR_TERMINAL
        assert not outcome.succeeded
        assert isinstance(outcome.error, ConnectionError)
        assert outcome.failed_step is CallbackState.AWAITING_CODE
        assert provider.exchange_calls == []
        assert sessions.load() is None

    @pytest.mark.asyncio
    async def test_concurrent_callbacks_with_one_state(self, store):
        provider = SlowExchangeProvider()
        await store.set_with_ttl(pkce_key("xyz"), "verifier-1", 300)
        first_sessions = FakeSessionStore()
        second_sessions = FakeSessionStore()

        outcomes = await asyncio.gather(
            OAuthCallbackFlow(provider, store, first_sessions).run("abc", "xyz"),
            OAuthCallbackFlow(provider, store, second_sessions).run("abc", "xyz"),
        )

        succeeded = [outcome for outcome in outcomes if outcome.succeeded]
        failed = [outcome for outcome in outcomes if not outcome.succeeded]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert isinstance(failed[0].error, InvalidOrExpiredStateError)
        assert provider.exchange_calls == [("abc", "verifier-1")]
        assert [first_sessions.saves, second_sessions.saves].count(1) == 1
