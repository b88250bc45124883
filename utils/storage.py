"""Key-value storage for PKCE verifiers, response caches and favorites

Two backends share one async interface: Redis for deployments and an
in-process store for mock mode and tests.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 60


class KeyValueStore(ABC):
    """Async key-value store with per-key TTL and hash fields"""

    @abstractmethod
    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key, unreadable after ttl_seconds"""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the live value for key, or None"""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present"""

    @abstractmethod
    async def take(self, key: str) -> Optional[str]:
        """Atomically read and remove key

        Two concurrent callers never both receive the value.
        """

    @abstractmethod
    async def hash_set(self, key: str, field: str, value: str) -> None:
        pass

    @abstractmethod
    async def hash_get(self, key: str, field: str) -> Optional[str]:
        pass

    @abstractmethod
    async def hash_get_all(self, key: str) -> Dict[str, str]:
        pass

    @abstractmethod
    async def hash_delete(self, key: str, field: str) -> None:
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check connectivity"""

    async def close(self) -> None:
        """Release connections"""


class RedisStore(KeyValueStore):
    """KeyValueStore backed by redis.asyncio"""

    def __init__(self, url: str = "redis://localhost:6379", client: Optional[redis.Redis] = None):
        self.url = url
        self._redis = client or redis.from_url(url, encoding="utf-8", decode_responses=True)

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._redis.setex(key, ttl_seconds, value)

    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    async def take(self, key: str) -> Optional[str]:
        # GETDEL is atomic on the server (Redis >= 6.2)
        return await self._redis.getdel(key)

    async def hash_set(self, key: str, field: str, value: str) -> None:
        await self._redis.hset(key, field, value)

    async def hash_get(self, key: str, field: str) -> Optional[str]:
        return await self._redis.hget(key, field)

    async def hash_get_all(self, key: str) -> Dict[str, str]:
        return await self._redis.hgetall(key)

    async def hash_delete(self, key: str, field: str) -> None:
        await self._redis.hdel(key, field)

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except redis.RedisError as e:
            logger.error(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self._redis.aclose()


class MemoryStore(KeyValueStore):
    """Single-process KeyValueStore

    Expired values are dropped when read and by a periodic sweep on write,
    so abandoned logins do not accumulate.

    Args:
        clock: Monotonic time source in seconds, injectable for tests
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._values: Dict[str, Tuple[str, float]] = {}
        self._hashes: Dict[str, Dict[str, str]] = {}
        self._next_sweep = clock() + SWEEP_INTERVAL_SECONDS

    def _sweep(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._values.items() if now >= expires_at]
        for key in expired:
            del self._values[key]
        self._next_sweep = now + SWEEP_INTERVAL_SECONDS

    def _purge(self, key: str) -> None:
        entry = self._values.get(key)
        if entry is not None and self._clock() >= entry[1]:
            del self._values[key]

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep()
        self._values[key] = (value, now + ttl_seconds)

    async def get(self, key: str) -> Optional[str]:
        self._purge(key)
        entry = self._values.get(key)
        return entry[0] if entry else None

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)
        self._hashes.pop(key, None)

    async def take(self, key: str) -> Optional[str]:
        # No await between read and removal, so this is atomic on the event loop
        self._purge(key)
        entry = self._values.pop(key, None)
        return entry[0] if entry else None

    async def hash_set(self, key: str, field: str, value: str) -> None:
        self._hashes.setdefault(key, {})[field] = value

    async def hash_get(self, key: str, field: str) -> Optional[str]:
        return self._hashes.get(key, {}).get(field)

    async def hash_get_all(self, key: str) -> Dict[str, str]:
        return dict(self._hashes.get(key, {}))

    async def hash_delete(self, key: str, field: str) -> None:
        fields = self._hashes.get(key)
        if fields is not None:
            fields.pop(field, None)
            if not fields:
                del self._hashes[key]

    async def ping(self) -> bool:
        return True


def create_store(backend: str, redis_url: str) -> KeyValueStore:
    """Build the configured store backend

    Args:
        backend: "redis" or "memory"
        redis_url: Connection URL for the redis backend

    Raises:
        ValueError: For an unknown backend name
    """
    if backend == "redis":
        logger.info(f"Using Redis store at {redis_url}")
        return RedisStore(redis_url)
    if backend == "memory":
        logger.info("Using in-memory store (single process only)")
        return MemoryStore()
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r} (expected 'redis' or 'memory')")
