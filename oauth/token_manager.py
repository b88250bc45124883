"""Session refresh policy: hand out an access token that will not expire mid-request"""

import dataclasses
import logging
import time
from typing import Optional, TYPE_CHECKING

from .errors import AuthRefreshError, NotAuthenticatedError

if TYPE_CHECKING:
    from spotify.base_client import AuthProviderClient
    from utils.session import SessionStore

logger = logging.getLogger(__name__)

# Refresh this long before the recorded expiry so a token checked here is
# still valid when the provider receives it
REFRESH_SKEW_MS = 60_000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)


def needs_refresh(token_expires_at_ms: Optional[int], now: int) -> bool:
    """True when the token is inside the refresh skew window (or past expiry)"""
    if token_expires_at_ms is None:
        return False
    return now > token_expires_at_ms - REFRESH_SKEW_MS


async def ensure_valid_access_token(
    sessions: "SessionStore",
    provider: "AuthProviderClient",
    now: Optional[int] = None,
) -> str:
    """Return the session's access token, refreshing it first when due

    The stored session is replaced only after a successful refresh.

    Args:
        sessions: Session store for the current request
        provider: Client used for the refresh call
        now: Epoch milliseconds, defaults to the current time

    Returns:
        An access token valid for at least REFRESH_SKEW_MS

    Raises:
        NotAuthenticatedError: If there is no session or no access token
        AuthRefreshError: If a due refresh fails
    """
    record = sessions.load()
    if record is None or not record.access_token:
        raise NotAuthenticatedError()

    if now is None:
        now = now_ms()

    if not needs_refresh(record.token_expires_at_ms, now):
        return record.access_token

    if not record.refresh_token:
        logger.warning(f"Token for user {record.user_id} is due for refresh but no refresh token is stored")
        raise AuthRefreshError(None, "No refresh token available")

    logger.info(f"Access token for user {record.user_id} expires soon, refreshing")
    tokens = await provider.refresh(record.refresh_token)

    refreshed = dataclasses.replace(
        record,
        access_token=tokens.access_token,
        token_expires_at_ms=now + tokens.expires_in * 1000,
        refresh_token=tokens.refresh_token or record.refresh_token,
    )
    sessions.save(refreshed)

    return refreshed.access_token
