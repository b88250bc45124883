"""Mock Spotify client

Serves a canned catalogue for development and tests without credentials
or network access. Selected with USE_MOCK_SPOTIFY=true.
"""

import asyncio
import copy
import logging
import secrets
from typing import Any, Dict, List, Optional

from oauth.errors import AuthExchangeError, AuthRefreshError, ProfileFetchError
from oauth.flow import MOCK_CODE_PREFIX
from oauth.models import PkceChallenge, TokenPair
from .base_client import AuthProviderClient
from .errors import SpotifyApiError
from .mock_data import (
    MOCK_USER,
    PLACEHOLDER_IMAGE_640,
    build_mock_albums,
    build_mock_devices,
    build_mock_tracks,
)

logger = logging.getLogger(__name__)

MOCK_TOKEN_LIFETIME_SECONDS = 3600

# Queries shorter than this return the whole catalogue
MIN_QUERY_LENGTH = 2


def _suffix() -> str:
    return secrets.token_hex(5)[:9]


def new_mock_code() -> str:
    """Synthetic authorization code accepted by the callback in mock mode"""
    return MOCK_CODE_PREFIX + _suffix()


class MockSpotifyClient(AuthProviderClient):
    """Deterministic stand-in for SpotifyClient

    Args:
        simulate_errors: Make every call fail
        delay: Seconds to sleep before each call, to mimic latency
    """

    is_mock = True

    def __init__(self, simulate_errors: bool = False, delay: float = 0.0):
        self.simulate_errors = simulate_errors
        self.delay = delay
        self._init_mock_data()

    def _init_mock_data(self) -> None:
        self.mock_devices = build_mock_devices()
        self.mock_tracks = build_mock_tracks()
        self.mock_albums = build_mock_albums(self.mock_tracks)

    async def _simulate(self, operation: str) -> None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.simulate_errors:
            raise SpotifyApiError(operation, 500, f"Mock {operation.lower()} failed")

    # Authentication

    def generate_pkce(self) -> PkceChallenge:
        return PkceChallenge(
            verifier=f"mock-code-verifier-{_suffix()}",
            challenge=f"mock-code-challenge-{_suffix()}",
        )

    def build_auth_url(self, code_challenge: str, state: str) -> str:
        return f"https://accounts.spotify.com/authorize?mock=true&state={state}&code_challenge={code_challenge}"

    async def exchange_code(self, code: str, code_verifier: str) -> TokenPair:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.simulate_errors:
            raise AuthExchangeError(500, "Mock token exchange failed")

        return TokenPair(
            access_token=f"mock-access-token-{_suffix()}",
            refresh_token=f"mock-refresh-token-{_suffix()}",
            expires_in=MOCK_TOKEN_LIFETIME_SECONDS,
            token_type="Bearer",
        )

    async def refresh(self, refresh_token: str) -> TokenPair:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.simulate_errors:
            raise AuthRefreshError(500, "Mock token refresh failed")

        return TokenPair(
            access_token=f"mock-access-token-refreshed-{_suffix()}",
            refresh_token=refresh_token,
            expires_in=MOCK_TOKEN_LIFETIME_SECONDS,
            token_type="Bearer",
        )

    async def get_current_user(self, access_token: str) -> Dict[str, Any]:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.simulate_errors:
            raise ProfileFetchError(500, "Failed to get user profile")

        return copy.deepcopy(MOCK_USER)

    # Catalogue and playback

    async def search(self, access_token: str, query: str, search_type: str = "track", limit: int = 20) -> Dict[str, Any]:
        await self._simulate("Search")

        query_lower = (query or "").lower()
        long_enough = bool(query) and len(query.strip()) >= MIN_QUERY_LENGTH

        if search_type == "album":
            albums = self.mock_albums
            if long_enough:
                albums = [
                    album for album in self.mock_albums
                    if query_lower in album["name"].lower()
                    or any(query_lower in artist["name"].lower() for artist in album["artists"])
                ]
            # Fall back to everything so the UI always has something to show
            if not albums:
                albums = self.mock_albums
            return {"albums": {"items": albums[:limit], "total": len(albums)}}

        if not long_enough:
            return {"tracks": {"items": self.mock_tracks[:limit], "total": len(self.mock_tracks)}}

        tracks = [
            track for track in self.mock_tracks
            if query_lower in track["name"].lower()
            or any(query_lower in artist["name"].lower() for artist in track["artists"])
            or query_lower in track["album"]["name"].lower()
        ]
        if not tracks:
            tracks = self.mock_tracks
        return {"tracks": {"items": tracks[:limit], "total": len(tracks)}}

    async def get_devices(self, access_token: str) -> Dict[str, Any]:
        await self._simulate("Get devices")
        return {"devices": [dict(device) for device in self.mock_devices]}

    async def transfer_playback(self, access_token: str, device_id: str, play: bool = True) -> None:
        await self._simulate("Transfer playback")
        for device in self.mock_devices:
            device["is_active"] = device["id"] == device_id

    async def get_album(self, access_token: str, album_id: str) -> Dict[str, Any]:
        await self._simulate("Get album")

        album_tracks = [track for track in self.mock_tracks if track["album"]["id"] == album_id]
        first = album_tracks[0]["album"] if album_tracks else None
        return {
            "id": album_id,
            "name": first["name"] if first else "Mock Album",
            "artists": [{"name": "Mock Artist"}],
            "images": first["images"] if first else [
                {"url": PLACEHOLDER_IMAGE_640, "width": 640, "height": 640}
            ],
            "tracks": {"items": album_tracks, "total": len(album_tracks)},
        }

    async def start_playback(
        self,
        access_token: str,
        device_id: Optional[str] = None,
        uris: Optional[List[str]] = None,
        offset: Optional[Dict[str, int]] = None,
        position_ms: Optional[int] = None,
    ) -> None:
        await self._simulate("Start playback")

    async def pause_playback(self, access_token: str, device_id: Optional[str] = None) -> None:
        await self._simulate("Pause playback")

    async def get_playback_state(self, access_token: str) -> Optional[Dict[str, Any]]:
        await self._simulate("Get playback state")
        active = next((d for d in self.mock_devices if d["is_active"]), None)
        return {
            "device": active,
            "is_playing": False,
            "item": self.mock_tracks[0] if self.mock_tracks else None,
            "progress_ms": 0,
        }

    async def next_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        await self._simulate("Skip to next")

    async def previous_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        await self._simulate("Skip to previous")

    async def set_volume(self, access_token: str, volume_percent: int, device_id: Optional[str] = None) -> None:
        await self._simulate("Set volume")

        if device_id:
            device = next((d for d in self.mock_devices if d["id"] == device_id), None)
        else:
            device = next((d for d in self.mock_devices if d["is_active"]), None)

        if device:
            device["volume_percent"] = max(0, min(100, round(volume_percent)))

    # Helpers for tests

    def add_mock_track(self, track: Dict[str, Any]) -> None:
        self.mock_tracks.append(track)

    def add_mock_device(self, device: Dict[str, Any]) -> None:
        self.mock_devices.append(device)

    def reset_mock_data(self) -> None:
        self._init_mock_data()

    def set_simulate_errors(self, simulate: bool) -> None:
        self.simulate_errors = simulate
