"""Key-value store boundary for quota counters, block flags and log lists."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

import redis

from config.settings import Settings


logger = logging.getLogger(__name__)

SECURITY_LOG_KEY = "security-logs"
USAGE_LOG_KEY = "greeting-logs"


def rate_limit_key(client_id: str) -> str:
    return f"rate-limit:{client_id}"


def blocked_key(client_id: str) -> str:
    return f"blocked:{client_id}"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: Union[str, int], ex: Optional[int] = None) -> None: ...

    def incr(self, key: str) -> int: ...

    def lpush(self, key: str, value: str) -> int: ...


class RedisKeyValueStore:
    """KeyValueStore over a redis-py client created with ``decode_responses=True``."""

    def __init__(self, client: redis.Redis):
        self._redis = client

    def get(self, key: str) -> Optional[str]:
        return self._redis.get(key)

    def set(self, key: str, value: Union[str, int], ex: Optional[int] = None) -> None:
        self._redis.set(key, value, ex=ex)

    def incr(self, key: str) -> int:
        return int(self._redis.incr(key))

    def lpush(self, key: str, value: str) -> int:
        return int(self._redis.lpush(key, value))


def build_store(settings: Settings) -> RedisKeyValueStore:
    if not settings.redis_url:
        raise RuntimeError("REDIS_URL not set. Please configure it in environment or .env")

    logger.info("Connecting key-value store: token_set=%s", bool(settings.redis_token))
    client = redis.from_url(
        settings.redis_url,
        password=settings.redis_token or None,
        decode_responses=True,
    )
    return RedisKeyValueStore(client)
