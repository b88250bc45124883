"""Spotify client package

Public API:
- AuthProviderClient: the capability interface route handlers depend on
- SpotifyClient / MockSpotifyClient: live and canned implementations
- create_spotify_client: picks one at composition time
"""
import logging
from typing import Optional

from oauth.models import ClientCredentials
from .base_client import AuthProviderClient
from .client import SpotifyClient
from .errors import SpotifyApiError
from .mock_client import MockSpotifyClient

logger = logging.getLogger(__name__)


def create_spotify_client(use_mock: bool, credentials: Optional[ClientCredentials] = None) -> AuthProviderClient:
    """Build the provider client for this deployment

    Args:
        use_mock: Serve the canned catalogue instead of calling Spotify
        credentials: Application credentials, required for the live client

    Raises:
        ValueError: If the live client is requested without credentials
    """
    if use_mock:
        logger.info("Using Mock Spotify API")
        return MockSpotifyClient()
    if credentials is None:
        raise ValueError("Spotify credentials are required unless mock mode is enabled")
    return SpotifyClient(credentials)


__all__ = [
    'AuthProviderClient',
    'SpotifyClient',
    'MockSpotifyClient',
    'SpotifyApiError',
    'create_spotify_client',
]
