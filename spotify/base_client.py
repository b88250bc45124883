"""
Provider client interface.
Defines the contract that the live Spotify client and its test double follow.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from oauth.models import PkceChallenge, TokenPair


class AuthProviderClient(ABC):
    """Abstract base class for Spotify clients"""

    is_mock: bool = False

    # Authentication

    @abstractmethod
    def generate_pkce(self) -> PkceChallenge:
        """Generate a verifier/challenge pair for one login attempt"""
        pass

    @abstractmethod
    def build_auth_url(self, code_challenge: str, state: str) -> str:
        """Authorization URL the browser is redirected to"""
        pass

    @abstractmethod
    async def exchange_code(self, code: str, code_verifier: str) -> TokenPair:
        """Exchange an authorization code for tokens

        Raises:
            AuthExchangeError: On provider rejection
        """
        pass

    @abstractmethod
    async def refresh(self, refresh_token: str) -> TokenPair:
        """Mint a new access token

        Raises:
            AuthRefreshError: On provider rejection
        """
        pass

    @abstractmethod
    async def get_current_user(self, access_token: str) -> Dict[str, Any]:
        """Fetch the profile of the token's owner

        Raises:
            ProfileFetchError: On provider rejection
        """
        pass

    # Catalogue and playback

    @abstractmethod
    async def search(self, access_token: str, query: str, search_type: str = "track", limit: int = 20) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_devices(self, access_token: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def transfer_playback(self, access_token: str, device_id: str, play: bool = True) -> None:
        pass

    @abstractmethod
    async def get_album(self, access_token: str, album_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def start_playback(
        self,
        access_token: str,
        device_id: Optional[str] = None,
        uris: Optional[List[str]] = None,
        offset: Optional[Dict[str, int]] = None,
        position_ms: Optional[int] = None,
    ) -> None:
        pass

    @abstractmethod
    async def pause_playback(self, access_token: str, device_id: Optional[str] = None) -> None:
        pass

    @abstractmethod
    async def get_playback_state(self, access_token: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def next_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        pass

    @abstractmethod
    async def previous_track(self, access_token: str, device_id: Optional[str] = None) -> None:
        pass

    @abstractmethod
    async def set_volume(self, access_token: str, volume_percent: int, device_id: Optional[str] = None) -> None:
        pass
