"""
FastAPI application factory and configuration.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from oauth import ClientCredentials
from settings import (
    FRONTEND_URL,
    IS_PRODUCTION,
    REDIS_URL,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_SECONDS,
    SESSION_SECRET,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    STORE_BACKEND,
    USE_MOCK_SPOTIFY,
)
from spotify import create_spotify_client
from utils.storage import create_store
from .context import AppContext
from .endpoints import auth_router, favorites_router, health_router, spotify_router
from .errors import register_error_handlers
from .middleware import build_request_middleware

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def build_context(use_mock: bool = USE_MOCK_SPOTIFY) -> AppContext:
    """Compose the default context from settings"""
    credentials = None
    if not use_mock:
        credentials = ClientCredentials(
            client_id=SPOTIFY_CLIENT_ID,
            client_secret=SPOTIFY_CLIENT_SECRET,
            redirect_uri=SPOTIFY_REDIRECT_URI,
        )

    return AppContext(
        provider=create_spotify_client(use_mock, credentials),
        store=create_store(STORE_BACKEND, REDIS_URL),
        frontend_url=FRONTEND_URL,
        redirect_uri=SPOTIFY_REDIRECT_URI,
        is_production=IS_PRODUCTION,
    )


def create_app(context: Optional[AppContext] = None, session_secret: str = SESSION_SECRET) -> FastAPI:
    """Create the FastAPI application

    Args:
        context: Collaborators for the route handlers, built from settings when omitted
        session_secret: Key used to sign the session cookie

    Returns:
        Configured FastAPI app
    """
    if context is None:
        context = build_context()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not await context.store.ping():
            logger.error("Token store is not reachable, refusing to start")
            raise RuntimeError("Token store is not reachable")
        logger.info("Token store connected")
        yield
        await context.store.close()

    app = FastAPI(title="FlipSide Player API", version="1.0.0", lifespan=lifespan)
    app.state.context = context

    app.middleware("http")(build_request_middleware(context.is_production))
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        session_cookie=SESSION_COOKIE_NAME,
        max_age=SESSION_MAX_AGE_SECONDS,
        path="/",
        # Cross-site cookies need SameSite=None, which browsers only accept over HTTPS
        same_site="none" if context.is_production else "lax",
        https_only=context.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[context.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=600,
    )

    register_error_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(spotify_router, prefix=API_PREFIX)
    app.include_router(favorites_router, prefix=API_PREFIX)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
