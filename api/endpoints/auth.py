"""
Login, logout and session endpoints.
"""
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse, RedirectResponse

from oauth import FlipSideAuthError, OAuthCallbackFlow, begin_login, persist_session
from spotify.mock_client import new_mock_code
from utils.session import SessionStore
from ..context import AppContext
from ..dependencies import get_context, get_sessions, require_access_token
from ..errors import error_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/auth/spotify/start")
async def spotify_start(context: AppContext = Depends(get_context)):
    """Start the OAuth flow by redirecting the browser to Spotify"""
    login = await begin_login(context.provider, context.store)

    if context.use_mock:
        logger.info("Mock OAuth: redirecting directly to callback")
        return RedirectResponse(f"{context.callback_url}?code={new_mock_code()}&state={login.state}", status_code=302)

    return RedirectResponse(login.authorize_url, status_code=302)


@router.get("/auth/spotify/callback")
async def spotify_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    context: AppContext = Depends(get_context),
    sessions: SessionStore = Depends(get_sessions),
):
    """Complete the OAuth flow and establish the session"""
    logger.info("OAuth callback received")
    flow = OAuthCallbackFlow(context.provider, context.store, sessions, use_mock=context.use_mock)
    outcome = await flow.run(code, state, error)

    if outcome.provider_error:
        return RedirectResponse(f"{context.frontend_url}?error={quote(outcome.provider_error, safe='')}", status_code=302)

    if not outcome.succeeded:
        if context.is_production:
            return error_response(400, "Authentication failed")
        return error_response(
            400,
            "Authentication failed",
            details=str(outcome.error),
            step=outcome.failed_step.value if outcome.failed_step else None,
        )

    logger.info(f"Redirecting to frontend: {context.frontend_url}")
    return RedirectResponse(context.frontend_url, status_code=302)


@router.post("/auth/mock-login")
async def mock_login(
    context: AppContext = Depends(get_context),
    sessions: SessionStore = Depends(get_sessions),
):
    """Establish a session without a browser round trip (mock mode only)"""
    if not context.use_mock:
        raise HTTPException(status_code=404, detail="Not Found")

    logger.info("Mock auto-login requested")
    try:
        tokens = await context.provider.exchange_code("mock-code", "mock-verifier")
        user = await context.provider.get_current_user(tokens.access_token)
        record = persist_session(sessions, user, tokens)
    except FlipSideAuthError as e:
        logger.error(f"Mock login failed: {e}")
        return error_response(500, "Mock login failed", details=str(e))

    logger.info(f"Mock login successful for user: {record.user_id}")
    return {"success": True, "user": user}


@router.post("/auth/logout")
async def logout(sessions: SessionStore = Depends(get_sessions)):
    sessions.clear()
    return {"success": True}


@router.get("/me")
async def current_user(
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    """Profile of the signed-in user"""
    return await context.provider.get_current_user(access_token)


@router.get("/spotify/token", response_class=PlainTextResponse)
async def spotify_token(access_token: str = Depends(require_access_token)):
    """Raw access token for the Web Playback SDK"""
    return PlainTextResponse(access_token)
