"""
Shared fixtures: a scriptable Spotify provider, an in-memory token store and
a FastAPI test client wired to both.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.context import AppContext
from oauth.models import PkceChallenge, SessionRecord, TokenPair
from spotify.base_client import AuthProviderClient
from utils.session import SessionStore
from utils.storage import MemoryStore

FRONTEND_URL = "http://frontend.test"
CALLBACK_URL = "http://testserver/api/auth/spotify/callback"
TEST_SESSION_SECRET = "test-session-secret-that-is-long-enough"


class FakeSpotifyProvider(AuthProviderClient):
    """Provider double that records calls and can be told to fail"""

    def __init__(self):
        self.tokens = TokenPair(access_token="A1", refresh_token="R1", expires_in=3600)
        self.refreshed = TokenPair(access_token="A2", refresh_token=None, expires_in=3600)
        self.user: Dict[str, Any] = {"id": "u1", "display_name": "User One", "product": "premium"}

        self.exchange_calls: List[tuple] = []
        self.refresh_calls: List[str] = []
        self.profile_calls: List[str] = []
        self.search_calls: List[tuple] = []
        self.album_calls: List[str] = []
        self.playback_calls: List[tuple] = []

        self.exchange_error: Optional[Exception] = None
        self.refresh_error: Optional[Exception] = None
        self.profile_error: Optional[Exception] = None
        self.api_error: Optional[Exception] = None

    def _maybe_fail(self) -> None:
        if self.api_error is not None:
            raise self.api_error

    def generate_pkce(self) -> PkceChallenge:
        return PkceChallenge(verifier="verifier-1", challenge="challenge-1")

    def build_auth_url(self, code_challenge: str, state: str) -> str:
        return f"https://accounts.test/authorize?state={state}&code_challenge={code_challenge}"

    async def exchange_code(self, code: str, code_verifier: str) -> TokenPair:
        self.exchange_calls.append((code, code_verifier))
        if self.exchange_error is not None:
            raise self.exchange_error
        return self.tokens

    async def refresh(self, refresh_token: str) -> TokenPair:
        self.refresh_calls.append(refresh_token)
        if self.refresh_error is not None:
            raise self.refresh_error
        return self.refreshed

    async def get_current_user(self, access_token: str) -> Dict[str, Any]:
        self.profile_calls.append(access_token)
        if self.profile_error is not None:
            raise self.profile_error
        return dict(self.user)

    async def search(self, access_token: str, query: str, search_type: str = "track", limit: int = 20) -> Dict[str, Any]:
        self.search_calls.append((access_token, query, search_type, limit))
        self._maybe_fail()
        return {"tracks": {"items": [{"id": "t1", "name": query}], "total": 1}}

    async def get_devices(self, access_token: str) -> Dict[str, Any]:
        self._maybe_fail()
        return {"devices": [{"id": "d1", "name": "Desk", "is_active": True}]}

    async def transfer_playback(self, access_token: str, device_id: str, play: bool = True) -> None:
        self.playback_calls.append(("transfer", device_id, play))
        self._maybe_fail()

    async def get_album(self, access_token: str, album_id: str) -> Dict[str, Any]:
        self.album_calls.append(album_id)
        self._maybe_fail()
        return {"id": album_id, "name": "Album", "tracks": {"items": []}}

    async def start_playback(self, access_token, device_id=None, uris=None, offset=None, position_ms=None) -> None:
        self.playback_calls.append(("play", device_id, uris, offset, position_ms))
        self._maybe_fail()

    async def pause_playback(self, access_token: str, device_id: Optional[str] = None) -> None:
        self.playback_calls.append(("pause", device_id))
        self._maybe_fail()

    async def get_playback_state(self, access_token: str) -> Optional[Dict[str, Any]]:
        self._maybe_fail()
        return None

    async def next_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        self.playback_calls.append(("next",))
        self._maybe_fail()

    async def previous_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        self.playback_calls.append(("previous",))
        self._maybe_fail()

    async def set_volume(self, access_token: str, volume_percent: int, device_id: Optional[str] = None) -> None:
        self.playback_calls.append(("volume", volume_percent, device_id))
        self._maybe_fail()


class FakeSessionStore(SessionStore):
    """Session store holding one record in memory"""

    def __init__(self, record: Optional[SessionRecord] = None, fail_writes: bool = False):
        self.record = record
        self.saves = 0
        self.fail_writes = fail_writes

    def load(self) -> Optional[SessionRecord]:
        return self.record

    def save(self, record: SessionRecord) -> None:
        self.saves += 1
        if not self.fail_writes:
            self.record = record

    def clear(self) -> None:
        self.record = None


@pytest.fixture
def provider():
    return FakeSpotifyProvider()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def sessions():
    return FakeSessionStore()


@pytest.fixture
def context(provider, store):
    return AppContext(
        provider=provider,
        store=store,
        frontend_url=FRONTEND_URL,
        redirect_uri=CALLBACK_URL,
        is_production=False,
    )


@pytest.fixture
def client(context):
    app = create_app(context, session_secret=TEST_SESSION_SECRET)
    return TestClient(app, follow_redirects=False)


def state_from_location(location: str) -> str:
    return parse_qs(urlparse(location).query)["state"][0]


def login(client: TestClient, code: str = "abc"):
    """Run start and callback; returns the callback response"""
    start = client.get("/api/auth/spotify/start")
    assert start.status_code == 302
    state = state_from_location(start.headers["location"])
    return client.get("/api/auth/spotify/callback", params={"code": code, "state": state})


@pytest.fixture
def logged_in_client(client):
    response = login(client)
    assert response.status_code == 302
    return client
