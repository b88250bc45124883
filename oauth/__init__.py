"""Spotify OAuth (authorization code + PKCE) and session refresh

Provides:
- PKCE generation and authorization URL construction
- Token exchange and refresh against the accounts service
- The session refresh policy used by every authenticated route
- Callback orchestration that turns a provider redirect into a session
"""

from .errors import (
    FlipSideAuthError,
    NotAuthenticatedError,
    InvalidOrExpiredStateError,
    MissingAuthorizationCodeError,
    ProviderResponseError,
    AuthExchangeError,
    AuthRefreshError,
    ProfileFetchError,
    SessionPersistError,
)
from .models import ClientCredentials, PkceChallenge, TokenPair, SessionRecord
from .pkce import generate_pkce, generate_state, pkce_key
from .authorization import build_auth_url
from .token_exchange import exchange_code
from .token_refresh import refresh_access_token
from .token_manager import REFRESH_SKEW_MS, ensure_valid_access_token, needs_refresh
from .flow import (
    CallbackOutcome,
    CallbackState,
    LoginStart,
    OAuthCallbackFlow,
    begin_login,
    persist_session,
)

__all__ = [
    "FlipSideAuthError",
    "NotAuthenticatedError",
    "InvalidOrExpiredStateError",
    "MissingAuthorizationCodeError",
    "ProviderResponseError",
    "AuthExchangeError",
    "AuthRefreshError",
    "ProfileFetchError",
    "SessionPersistError",
    "ClientCredentials",
    "PkceChallenge",
    "TokenPair",
    "SessionRecord",
    "generate_pkce",
    "generate_state",
    "pkce_key",
    "build_auth_url",
    "exchange_code",
    "refresh_access_token",
    "REFRESH_SKEW_MS",
    "ensure_valid_access_token",
    "needs_refresh",
    "CallbackOutcome",
    "CallbackState",
    "LoginStart",
    "OAuthCallbackFlow",
    "begin_login",
    "persist_session",
]
