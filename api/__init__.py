"""
FlipSide Player API - FastAPI application package.

Routes for Spotify login (Authorization Code + PKCE), session-backed token
refresh, Web API passthrough and per-user favorites.
"""
from .server import ApiServer
from .app import create_app, build_context
from .context import AppContext

__version__ = "1.0.0"

__all__ = [
    'ApiServer',
    'AppContext',
    'build_context',
    'create_app',
]
