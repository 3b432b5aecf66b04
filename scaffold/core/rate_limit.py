"""限流：基于 Redis + Lua 的固定窗口计数器，Redis 不可用时回退到内存实现。"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

import redis

from scaffold.core.config import Settings
from scaffold.core.logger import logger

# INCR 与首次 EXPIRE 在同一脚本内执行，保证窗口计数的原子性
FIXED_WINDOW_SCRIPT = """
local current = redis.call('INCR', KEYS[1])
if current == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return current
"""


class RateLimitBackend:
    """计数后端基类：对指定 key 自增并返回窗口内的累计次数。"""

    def hit(self, key: str, window_seconds: int) -> int:  # pragma: no cover - interface definition
        raise NotImplementedError


class RedisRateLimitBackend(RateLimitBackend):
    def __init__(self, url: str) -> None:
        self._client = redis.Redis.from_url(url, decode_responses=True)
        self._client.ping()
        self._script = self._client.register_script(FIXED_WINDOW_SCRIPT)

    def hit(self, key: str, window_seconds: int) -> int:
        return int(self._script(keys=[key], args=[window_seconds]))


class InMemoryRateLimitBackend(RateLimitBackend):
    """内存后端用于测试或缺少 Redis 时的回退实现，仅在单进程内生效。"""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def hit(self, key: str, window_seconds: int) -> int:
        now = self._clock()
        with self._lock:
            count, expires_at = self._store.get(key, (0, 0.0))
            if expires_at <= now:
                count, expires_at = 0, now + window_seconds
                self._purge(now)
            count += 1
            self._store[key] = (count, expires_at)
            return count

    def _purge(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._store.items() if expires_at <= now]
        for key in expired:
            self._store.pop(key, None)


class RateLimiter:
    """固定窗口限流器：同一标识在一个窗口内最多放行 ``limit`` 次。"""

    def __init__(
        self,
        backend: RateLimitBackend,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.backend = backend
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock

    def build_key(self, identity: str) -> str:
        window_index = int(self._clock()) // self.window_seconds
        return f"rate_limit:{identity}:{window_index}"

    def allow(self, identity: str) -> bool:
        try:
            count = self.backend.hit(self.build_key(identity), self.window_seconds)
        except Exception as exc:
            logger.warning("Rate limit backend failed (%s), request allowed", exc)
            return True
        return count <= self.limit


def build_rate_limiter(settings: Settings) -> Optional[RateLimiter]:
    """根据配置构造限流器；未启用时返回 ``None``。"""
    if not settings.rate_limit_enabled:
        return None

    backend: RateLimitBackend
    if settings.rate_limit_backend.lower() == "memory":
        backend = InMemoryRateLimitBackend()
    else:
        try:
            backend = RedisRateLimitBackend(settings.redis_url)
            logger.info("Rate limiter initialized with Redis at %s", settings.redis_url)
        except Exception as exc:  # pragma: no cover - fallback path
            logger.warning("Redis unavailable (%s), falling back to in-memory rate limiter", exc)
            backend = InMemoryRateLimitBackend()

    return RateLimiter(
        backend,
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
