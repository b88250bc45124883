"""OAuth token refresh functionality"""

import logging
from typing import Optional

import httpx

from settings import SPOTIFY_ACCOUNTS_URL
from .errors import AuthRefreshError
from .models import ClientCredentials, TokenPair
from .token_exchange import post_token_request

logger = logging.getLogger(__name__)


async def refresh_access_token(
    credentials: ClientCredentials,
    refresh_token: str,
    accounts_url: str = SPOTIFY_ACCOUNTS_URL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TokenPair:
    """Mint a new access token from a refresh token

    The provider may omit refresh_token from its response; the returned
    TokenPair then carries None and callers keep their previous one.

    Args:
        credentials: Application credentials
        refresh_token: Refresh token from the session
        accounts_url: Base URL of the accounts service
        transport: Optional httpx transport (tests)

    Returns:
        TokenPair from the provider

    Raises:
        AuthRefreshError: If no refresh token is given or the provider rejects it
    """
    if not refresh_token:
        logger.warning("No refresh token available for refresh")
        raise AuthRefreshError(None, "No refresh token available")

    form = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
    }

    logger.info("Attempting to refresh OAuth tokens...")
    tokens = await post_token_request(credentials, form, AuthRefreshError, accounts_url, transport)
    logger.info("Successfully refreshed OAuth tokens")
    return tokens
