"""OAuth authorization URL construction"""

from urllib.parse import urlencode

from settings import SPOTIFY_ACCOUNTS_URL, SPOTIFY_SCOPES
from .models import ClientCredentials


def build_auth_url(
    credentials: ClientCredentials,
    code_challenge: str,
    state: str,
    scopes: str = SPOTIFY_SCOPES,
    accounts_url: str = SPOTIFY_ACCOUNTS_URL,
) -> str:
    """Construct the Spotify authorize URL with PKCE

    Args:
        credentials: Application credentials (client id and redirect URI)
        code_challenge: S256 challenge of the stored verifier
        state: Opaque value the provider echoes back on the callback
        scopes: Space separated permission scopes
        accounts_url: Base URL of the accounts service

    Returns:
        Full authorization URL
    """
    params = {
        "response_type": "code",
        "client_id": credentials.client_id,
        "scope": scopes,
        "redirect_uri": credentials.redirect_uri,
        "state": state,
        "code_challenge_method": "S256",
        "code_challenge": code_challenge,
    }

    return f"{accounts_url}/authorize?{urlencode(params)}"
