"""
Application context: the collaborators route handlers depend on.
"""
from dataclasses import dataclass

from settings import FRONTEND_URL, IS_PRODUCTION, SPOTIFY_REDIRECT_URI
from spotify.base_client import AuthProviderClient
from utils.storage import KeyValueStore


@dataclass
class AppContext:
    """Explicitly constructed dependencies shared by all requests

    Attributes:
        provider: Spotify client (live or mock)
        store: Key-value store for PKCE verifiers, caches and favorites
        frontend_url: Where the browser lands after login
        redirect_uri: OAuth callback URL registered with Spotify
        is_production: Hide error details and harden cookies
    """
    provider: AuthProviderClient
    store: KeyValueStore
    frontend_url: str = FRONTEND_URL
    redirect_uri: str = SPOTIFY_REDIRECT_URI
    is_production: bool = IS_PRODUCTION

    @property
    def use_mock(self) -> bool:
        return self.provider.is_mock

    @property
    def callback_url(self) -> str:
        """Callback URL used for the mock login short-circuit"""
        return self.redirect_uri or f"{self.frontend_url.rstrip('/')}/api/auth/spotify/callback"
