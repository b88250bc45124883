"""OAuth token exchange functionality"""

import base64
import logging
from typing import Dict, Optional, Type

import httpx

from settings import CONNECT_TIMEOUT, REQUEST_TIMEOUT, SPOTIFY_ACCOUNTS_URL
from .errors import AuthExchangeError, ProviderResponseError
from .models import ClientCredentials, TokenPair

logger = logging.getLogger(__name__)


def basic_auth_header(credentials: ClientCredentials) -> str:
    """Authorization header value for client-authenticated token calls"""
    raw = f"{credentials.client_id}:{credentials.client_secret}".encode('utf-8')
    return f"Basic {base64.b64encode(raw).decode('ascii')}"


async def post_token_request(
    credentials: ClientCredentials,
    form: Dict[str, str],
    error_cls: Type[ProviderResponseError],
    accounts_url: str = SPOTIFY_ACCOUNTS_URL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TokenPair:
    """POST a form to the accounts token endpoint and parse the token pair

    Args:
        credentials: Application credentials used for Basic auth
        form: Url-encoded body fields
        error_cls: ProviderResponseError subclass raised on failure
        accounts_url: Base URL of the accounts service
        transport: Optional httpx transport (tests)

    Returns:
        Parsed TokenPair

    Raises:
        error_cls: On non-2xx status, transport failure or malformed body
    """
    headers = {
        "Content-Type": "application/x-www-form-urlencoded",
        "Authorization": basic_auth_header(credentials),
    }
    timeout = httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT)

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(f"{accounts_url}/api/token", data=form, headers=headers)
    except httpx.RequestError as e:
        logger.error(f"{error_cls.action} request failed: {e}")
        raise error_cls(None, str(e)) from e

    if not response.is_success:
        logger.error(f"{error_cls.action} failed with status {response.status_code}: {response.text}")
        raise error_cls(response.status_code, response.text)

    try:
        return TokenPair.from_response(response.json())
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Malformed {error_cls.action.lower()} response: {response.text}")
        raise error_cls(response.status_code, response.text) from e


async def exchange_code(
    credentials: ClientCredentials,
    code: str,
    code_verifier: str,
    accounts_url: str = SPOTIFY_ACCOUNTS_URL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TokenPair:
    """Exchange authorization code for tokens

    Args:
        credentials: Application credentials
        code: Authorization code from the callback
        code_verifier: PKCE verifier stored at login start
        accounts_url: Base URL of the accounts service
        transport: Optional httpx transport (tests)

    Returns:
        TokenPair from the provider

    Raises:
        AuthExchangeError: If the provider rejects the exchange
    """
    form = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": credentials.redirect_uri,
        "code_verifier": code_verifier,
    }

    logger.info("Exchanging authorization code for tokens")
    tokens = await post_token_request(credentials, form, AuthExchangeError, accounts_url, transport)
    logger.info("OAuth tokens obtained")
    return tokens

