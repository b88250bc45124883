"""Spotify HTTP client for authentication and Web API calls"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from oauth.authorization import build_auth_url
from oauth.errors import ProfileFetchError
from oauth.models import ClientCredentials, PkceChallenge, TokenPair
from oauth.pkce import generate_pkce
from oauth.token_exchange import exchange_code
from oauth.token_refresh import refresh_access_token
from settings import (
    CONNECT_TIMEOUT,
    REQUEST_TIMEOUT,
    SPOTIFY_ACCOUNTS_URL,
    SPOTIFY_API_URL,
    SPOTIFY_SCOPES,
)
from .base_client import AuthProviderClient
from .errors import SpotifyApiError

logger = logging.getLogger(__name__)


class SpotifyClient(AuthProviderClient):
    """Live client for the Spotify accounts service and Web API

    Args:
        credentials: Application credentials
        accounts_url: Accounts service base URL
        api_url: Web API base URL
        scopes: Permission scopes requested at login
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        accounts_url: str = SPOTIFY_ACCOUNTS_URL,
        api_url: str = SPOTIFY_API_URL,
        scopes: str = SPOTIFY_SCOPES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.accounts_url = accounts_url
        self.api_url = api_url
        self.scopes = scopes
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
            transport=self._transport,
        )

    # Authentication

    def generate_pkce(self) -> PkceChallenge:
        return generate_pkce()

    def build_auth_url(self, code_challenge: str, state: str) -> str:
        return build_auth_url(self.credentials, code_challenge, state, self.scopes, self.accounts_url)

    async def exchange_code(self, code: str, code_verifier: str) -> TokenPair:
        return await exchange_code(self.credentials, code, code_verifier, self.accounts_url, self._transport)

    async def refresh(self, refresh_token: str) -> TokenPair:
        return await refresh_access_token(self.credentials, refresh_token, self.accounts_url, self._transport)

    async def get_current_user(self, access_token: str) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.api_url}/me",
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.RequestError as e:
            logger.error(f"Profile fetch request failed: {e}")
            raise ProfileFetchError(None, str(e)) from e

        if not response.is_success:
            logger.error(f"Profile fetch failed with status {response.status_code}: {response.text}")
            raise ProfileFetchError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Profile response is not valid JSON: {response.text}")
            raise ProfileFetchError(response.status_code, response.text) from e

    # Web API

    async def _api_request(
        self,
        operation: str,
        method: str,
        path: str,
        access_token: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send an authenticated Web API request

        Raises:
            SpotifyApiError: On non-2xx status or transport failure
        """
        headers = {"Authorization": f"Bearer {access_token}"}
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    f"{self.api_url}{path}",
                    params=params or None,
                    json=json,
                    headers=headers,
                )
        except httpx.RequestError as e:
            logger.error(f"{operation} request failed: {e}")
            raise SpotifyApiError(operation, None, str(e)) from e

        if not response.is_success:
            logger.error(f"{operation} failed with status {response.status_code}: {response.text}")
            raise SpotifyApiError(operation, response.status_code, _error_detail(response))

        return response

    async def search(self, access_token: str, query: str, search_type: str = "track", limit: int = 20) -> Dict[str, Any]:
        params = {"q": query, "type": search_type, "limit": str(limit)}
        response = await self._api_request("Search", "GET", "/search", access_token, params=params)
        return _json_body("Search", response)

    async def get_devices(self, access_token: str) -> Dict[str, Any]:
        response = await self._api_request("Get devices", "GET", "/me/player/devices", access_token)
        return _json_body("Get devices", response)

    async def transfer_playback(self, access_token: str, device_id: str, play: bool = True) -> None:
        body = {"device_ids": [device_id], "play": play}
        await self._api_request("Transfer playback", "PUT", "/me/player", access_token, json=body)

    async def get_album(self, access_token: str, album_id: str) -> Dict[str, Any]:
        response = await self._api_request("Get album", "GET", f"/albums/{album_id}", access_token)
        return _json_body("Get album", response)

    async def start_playback(
        self,
        access_token: str,
        device_id: Optional[str] = None,
        uris: Optional[List[str]] = None,
        offset: Optional[Dict[str, int]] = None,
        position_ms: Optional[int] = None,
    ) -> None:
        body: Dict[str, Any] = {}
        if uris:
            body["uris"] = uris
        if offset is not None:
            body["offset"] = offset
        if position_ms is not None:
            body["position_ms"] = position_ms

        await self._api_request(
            "Start playback", "PUT", "/me/player/play", access_token,
            params={"device_id": device_id}, json=body,
        )

    async def pause_playback(self, access_token: str, device_id: Optional[str] = None) -> None:
        await self._api_request(
            "Pause playback", "PUT", "/me/player/pause", access_token,
            params={"device_id": device_id},
        )

    async def get_playback_state(self, access_token: str) -> Optional[Dict[str, Any]]:
        response = await self._api_request("Get playback state", "GET", "/me/player", access_token)
        # 204 means nothing is playing
        if response.status_code == 204 or not response.content:
            return None
        return _json_body("Get playback state", response)

    async def next_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        await self._api_request(
            "Skip to next", "POST", "/me/player/next", access_token,
            params={"device_id": device_id},
        )

    async def previous_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        await self._api_request(
            "Skip to previous", "POST", "/me/player/previous", access_token,
            params={"device_id": device_id},
        )

    async def set_volume(self, access_token: str, volume_percent: int, device_id: Optional[str] = None) -> None:
        await self._api_request(
            "Set volume", "PUT", "/me/player/volume", access_token,
            params={"volume_percent": str(int(round(volume_percent))), "device_id": device_id},
        )


def _json_body(operation: str, response: httpx.Response) -> Any:
    """Decoded success body; a malformed body counts as a failed call"""
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"{operation} returned a body that is not valid JSON: {response.text}")
        raise SpotifyApiError(operation, response.status_code, response.text) from e


def _error_detail(response: httpx.Response) -> str:
    """Prefer Spotify's error.message over the raw body"""
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        message = payload["error"].get("message")
        if message:
            return message
    return response.text
