"""Read-through cache for display data, backed by Redis when reachable."""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Any

import redis
from loguru import logger

from studyquest.config import settings


def _json_default(value: Any) -> Any:
    """Serialize UUIDs, datetimes and enums for cache payloads."""

    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return str(value)


@dataclass
class _CacheEntry:
    expires_at: float | None
    payload: str


class CacheBackend:
    """Namespaced JSON cache.

    Writes go to Redis when configured and to an in-process dict always; a
    Redis failure drops the client and the process keeps serving from memory.
    """

    def __init__(self, redis_url: str | None = None) -> None:
        self._lock = threading.Lock()
        self._local: dict[str, _CacheEntry] = {}
        self._redis: redis.Redis | None = None
        if redis_url:
            self._redis = redis.Redis.from_url(redis_url, decode_responses=True)

    @staticmethod
    def _compose(namespace: str, key: str) -> str:
        return f"{namespace}:{key}"

    def _drop_redis(self, exc: Exception) -> None:
        logger.warning(f"Redis cache unavailable, using in-process cache: {exc}")
        self._redis = None

    def get(self, namespace: str, key: str) -> Any | None:
        namespaced = self._compose(namespace, key)
        if self._redis is not None:
            try:
                value = self._redis.get(namespaced)
            except redis.RedisError as exc:
                self._drop_redis(exc)
            else:
                if value is not None:
                    return json.loads(value)
        with self._lock:
            entry = self._local.get(namespaced)
            if not entry:
                return None
            if entry.expires_at is not None and entry.expires_at < time.time():
                self._local.pop(namespaced, None)
                return None
            return json.loads(entry.payload)

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        namespaced = self._compose(namespace, key)
        payload = json.dumps(value, default=_json_default)
        if self._redis is not None:
            try:
                self._redis.set(namespaced, payload, ex=ttl_seconds)
            except redis.RedisError as exc:
                self._drop_redis(exc)
        with self._lock:
            self._local[namespaced] = _CacheEntry(expires_at=time.time() + ttl_seconds, payload=payload)

    def invalidate(self, namespace: str, key: str) -> None:
        namespaced = self._compose(namespace, key)
        if self._redis is not None:
            try:
                self._redis.delete(namespaced)
            except redis.RedisError as exc:
                self._drop_redis(exc)
        with self._lock:
            self._local.pop(namespaced, None)

    def clear(self) -> None:
        """Reset the in-process cache (used between tests)."""

        with self._lock:
            self._local.clear()


cache_backend = CacheBackend(settings.REDIS_URL or None)


__all__ = ["cache_backend", "CacheBackend"]
