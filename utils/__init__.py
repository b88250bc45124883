"""Shared utilities package for FlipSide Player"""

from .storage import KeyValueStore, RedisStore, MemoryStore, create_store
from .session import SessionStore, CookieSessionStore

__all__ = [
    "KeyValueStore",
    "RedisStore",
    "MemoryStore",
    "create_store",
    "SessionStore",
    "CookieSessionStore",
]
