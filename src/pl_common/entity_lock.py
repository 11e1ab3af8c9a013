"""Per-entity transition lock backed by Redis.

At most one accept/start/complete/cancel runs per challenge, and at most
one join/complete per pot game, across every API process. The row-level
version check in the repositories is the final guard; this lock keeps
two callers from both computing a transition from the same snapshot.

Key layout: lock:{entity}:{entity_id}
Acquire:    SET key token NX PX ttl   (retry every RETRY_INTERVAL_MS)
Release:    Lua GET + DEL, only if the token still matches
"""

import asyncio
import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

from config.settings import settings
from src.pl_common.errors import EntityBusyError
from src.pl_common.redis_client import get_redis

logger = logging.getLogger(__name__)

RETRY_INTERVAL_MS = 25

_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


def lock_key(entity: str, entity_id: str) -> str:
    return f"lock:{entity}:{entity_id}"


class EntityLock:
    def __init__(self, redis: aioredis.Redis, ttl_ms: int, wait_ms: int) -> None:
        self._redis = redis
        self._ttl_ms = ttl_ms
        self._wait_ms = wait_ms

    async def acquire(self, key: str) -> str:
        """Return the owner token once the lock is held; EntityBusyError after wait_ms."""
        token = uuid.uuid4().hex
        deadline = time.monotonic() + self._wait_ms / 1000
        while True:
            if await self._redis.set(key, token, nx=True, px=self._ttl_ms):
                return token
            if time.monotonic() >= deadline:
                logger.warning("Entity lock busy: key=%s", key)
                raise EntityBusyError(key)
            await asyncio.sleep(RETRY_INTERVAL_MS / 1000)

    async def release(self, key: str, token: str) -> bool:
        released = await self._redis.eval(_RELEASE_SCRIPT, 1, key, token)
        if not released:
            # TTL expired mid-transition; the version check still guards the write
            logger.warning("Entity lock expired before release: key=%s", key)
        return bool(released)

    @asynccontextmanager
    async def hold(self, entity: str, entity_id: str) -> AsyncIterator[None]:
        key = lock_key(entity, entity_id)
        token = await self.acquire(key)
        try:
            yield
        finally:
            await self.release(key, token)


async def default_entity_lock() -> EntityLock:
    """EntityLock over the shared Redis pool, with TTL and wait budget from settings."""
    return EntityLock(
        await get_redis(), settings.ENTITY_LOCK_TTL_MS, settings.ENTITY_LOCK_WAIT_MS
    )
