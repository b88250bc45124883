"""
FastAPI dependencies resolving the application context and session.
"""
from fastapi import Depends, Request

from oauth import NotAuthenticatedError, ensure_valid_access_token
from utils.session import CookieSessionStore, SessionStore
from .context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_sessions(request: Request) -> SessionStore:
    return CookieSessionStore(request)


async def require_access_token(
    context: AppContext = Depends(get_context),
    sessions: SessionStore = Depends(get_sessions),
) -> str:
    """Access token for the current session, refreshed when close to expiry"""
    return await ensure_valid_access_token(sessions, context.provider)


def require_user_id(sessions: SessionStore = Depends(get_sessions)) -> str:
    """User id of the current session

    Raises:
        NotAuthenticatedError: Without a session
    """
    record = sessions.load()
    if record is None:
        raise NotAuthenticatedError()
    return record.user_id
