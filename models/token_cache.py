"""
Redis-backed token store.

- refresh_token:<user_id> -> the user's current refresh token
- blacklist:<access_token> -> "1" until the access token would have expired

Every key carries a TTL; nothing is evicted except by expiry or an explicit delete.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

import redis

logger = logging.getLogger(__name__)

REFRESH_PREFIX = "refresh_token"
BLACKLIST_PREFIX = "blacklist"


def _ttl_seconds(ttl: timedelta | int) -> int:
    seconds = int(ttl.total_seconds()) if isinstance(ttl, timedelta) else int(ttl)
    # SETEX rejects non-positive expiries
    return max(seconds, 1)


class TokenCache:
    """Thin wrapper over a redis client"""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "TokenCache":
        # redis-py connects lazily, so building the client never blocks start-up
        return cls(redis.from_url(url, decode_responses=True))

    @staticmethod
    def _refresh_key(user_id: str) -> str:
        return f"{REFRESH_PREFIX}:{user_id}"

    @staticmethod
    def _blacklist_key(token: str) -> str:
        return f"{BLACKLIST_PREFIX}:{token}"

    def set_refresh_token(self, user_id: str, token: str, ttl: timedelta | int) -> None:
        self.client.setex(self._refresh_key(user_id), _ttl_seconds(ttl), token)

    def get_refresh_token(self, user_id: str) -> Optional[str]:
        """Return the cached refresh token or None when missing/expired"""
        value = self.client.get(self._refresh_key(user_id))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def delete_refresh_token(self, user_id: str) -> None:
        self.client.delete(self._refresh_key(user_id))

    def blacklist_access_token(self, token: str, ttl: timedelta | int) -> None:
        self.client.setex(self._blacklist_key(token), _ttl_seconds(ttl), "1")

    def is_blacklisted(self, token: str) -> bool:
        return self.client.exists(self._blacklist_key(token)) > 0

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            logger.warning("redis ping failed", exc_info=True)
            return False
