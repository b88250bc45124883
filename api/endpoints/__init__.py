"""
Route handlers for the FlipSide API.
"""
from .auth import router as auth_router
from .spotify import router as spotify_router
from .favorites import router as favorites_router
from .health import router as health_router

__all__ = [
    'auth_router',
    'spotify_router',
    'favorites_router',
    'health_router',
]
