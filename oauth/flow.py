"""OAuth login orchestration: start (PKCE + state) and callback handling

Callback state machine:

    AWAITING_CODE -> EXCHANGING_TOKEN -> FETCHING_PROFILE -> SESSION_ESTABLISHED

with ERROR_TERMINAL reachable from every state. A `state` value maps to at
most one stored verifier, and the verifier is consumed before the exchange
starts, so a state can be redeemed once.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

from settings import PKCE_TTL_SECONDS
from .errors import (
    FlipSideAuthError,
    InvalidOrExpiredStateError,
    MissingAuthorizationCodeError,
    SessionPersistError,
)
from .models import SessionRecord, TokenPair
from .pkce import generate_state, pkce_key
from .token_manager import now_ms

if TYPE_CHECKING:
    from spotify.base_client import AuthProviderClient
    from utils.session import SessionStore
    from utils.storage import KeyValueStore

logger = logging.getLogger(__name__)

MOCK_CODE_PREFIX = "mock-authorization-code-"
MOCK_CODE_VERIFIER = "mock-code-verifier"


class CallbackState(str, Enum):
    AWAITING_CODE = "awaiting_code"
    EXCHANGING_TOKEN = "exchanging_token"
    FETCHING_PROFILE = "fetching_profile"
    SESSION_ESTABLISHED = "session_established"
    ERROR_TERMINAL = "error_terminal"


@dataclass(frozen=True)
class LoginStart:
    """Result of starting a login

    Attributes:
        state: Opaque value keying the stored verifier
        authorize_url: Provider URL to redirect the browser to
    """
    state: str
    authorize_url: str


@dataclass(frozen=True)
class CallbackOutcome:
    """Terminal result of one callback

    Attributes:
        state: SESSION_ESTABLISHED or ERROR_TERMINAL
        session: The persisted record on success
        user: Profile fetched during the flow, on success
        provider_error: Error the provider redirected back with
        error: Failure raised inside the flow
        failed_step: State the flow was in when it failed
    """
    state: CallbackState
    session: Optional[SessionRecord] = None
    user: Optional[Dict[str, Any]] = None
    provider_error: Optional[str] = None
    error: Optional[Exception] = None
    failed_step: Optional[CallbackState] = None

    @property
    def succeeded(self) -> bool:
        return self.state is CallbackState.SESSION_ESTABLISHED


async def begin_login(
    provider: "AuthProviderClient",
    store: "KeyValueStore",
    ttl_seconds: int = PKCE_TTL_SECONDS,
) -> LoginStart:
    """Generate PKCE and state, store the verifier, and build the authorize URL

    Args:
        provider: Client that generates PKCE and builds the URL
        store: Token store for the verifier
        ttl_seconds: Verifier lifetime

    Returns:
        LoginStart with the state and authorize URL
    """
    state = generate_state()
    pkce = provider.generate_pkce()
    await store.set_with_ttl(pkce_key(state), pkce.verifier, ttl_seconds)
    logger.debug(f"Stored PKCE verifier for state {state[:8]}... (ttl {ttl_seconds}s)")
    return LoginStart(state=state, authorize_url=provider.build_auth_url(pkce.challenge, state))


def persist_session(sessions: "SessionStore", user: Dict[str, Any], tokens: TokenPair, now: Optional[int] = None) -> SessionRecord:
    """Write a new session for user and verify it reads back

    Raises:
        SessionPersistError: If the stored record is missing or belongs to someone else
    """
    if now is None:
        now = now_ms()

    record = SessionRecord(
        user_id=user["id"],
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_expires_at_ms=now + tokens.expires_in * 1000,
    )
    sessions.save(record)

    stored = sessions.load()
    if stored is None or stored.user_id != record.user_id:
        logger.error("Session data not stored correctly")
        raise SessionPersistError()

    return stored


class OAuthCallbackFlow:
    """Runs one provider callback to a terminal state

    Args:
        provider: Client for the exchange and profile calls
        store: Token store holding PKCE verifiers
        sessions: Session store for the current request
        use_mock: Accept synthetic mock codes without a stored verifier
    """

    def __init__(
        self,
        provider: "AuthProviderClient",
        store: "KeyValueStore",
        sessions: "SessionStore",
        use_mock: bool = False,
    ):
        self.provider = provider
        self.store = store
        self.sessions = sessions
        self.use_mock = use_mock
        self.state = CallbackState.AWAITING_CODE

    async def run(
        self,
        code: Optional[str],
        state: Optional[str],
        error: Optional[str] = None,
    ) -> CallbackOutcome:
        """Process the callback query

        Every failure ends in ERROR_TERMINAL and is returned in the
        outcome together with the step that was running.
        """
        self.state = CallbackState.AWAITING_CODE

        if error:
            logger.info(f"Spotify auth error: {error}")
            self.state = CallbackState.ERROR_TERMINAL
            return CallbackOutcome(
                state=self.state,
                provider_error=error,
                failed_step=CallbackState.AWAITING_CODE,
            )

        try:
            session, user = await self._establish(code, state)
        except FlipSideAuthError as exc:
            failed_step = self.state
            self.state = CallbackState.ERROR_TERMINAL
            logger.error(f"OAuth callback failed during {failed_step.value}: {exc}")
            return CallbackOutcome(state=self.state, error=exc, failed_step=failed_step)
        except Exception as exc:
            failed_step = self.state
            self.state = CallbackState.ERROR_TERMINAL
            logger.exception(f"Unexpected error in OAuth callback during {failed_step.value}: {exc}")
            return CallbackOutcome(state=self.state, error=exc, failed_step=failed_step)

        self.state = CallbackState.SESSION_ESTABLISHED
        logger.info(f"Authentication successful for user: {session.user_id}")
        return CallbackOutcome(state=self.state, session=session, user=user)

    async def _establish(self, code: Optional[str], state: Optional[str]):
        if not code:
            raise MissingAuthorizationCodeError()

        # take() consumes the entry, so a replayed or racing state finds nothing
        code_verifier = await self.store.take(pkce_key(state)) if state else None

        if not code_verifier and self.use_mock and code.startswith(MOCK_CODE_PREFIX):
            logger.info("Mock OAuth: using mock code verifier")
            code_verifier = MOCK_CODE_VERIFIER

        if not code_verifier:
            raise InvalidOrExpiredStateError()

        self.state = CallbackState.EXCHANGING_TOKEN
        tokens = await self.provider.exchange_code(code, code_verifier)

        self.state = CallbackState.FETCHING_PROFILE
        user = await self.provider.get_current_user(tokens.access_token)

        session = persist_session(self.sessions, user, tokens)
        self.state = CallbackState.SESSION_ESTABLISHED
        return session, user
