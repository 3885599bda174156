from __future__ import annotations

# 可选 Redis 状态存储：保存/恢复窗口快照，进程重启后可继续展示
# 依赖 redis-py（pip install redis）

import logging
from typing import Any, Optional

try:
    import redis
except Exception:  # pragma: no cover
    redis = None  # type: ignore

from ..codec import decode_window, encode_window
from ..window import RollingWindow


logger = logging.getLogger(__name__)


class RedisWindowStore:
    def __init__(self, url: str = "redis://localhost:6379/0", prefix: str = "rolling", client: Optional[Any] = None) -> None:
        if client is None:
            if redis is None:
                raise ImportError("redis not installed. pip install redis")
            client = redis.Redis.from_url(url)
        self._r = client
        self._prefix = prefix

    def _k(self, *parts: str) -> str:
        return ":".join((self._prefix,) + parts)

    def save(self, name: str, window: RollingWindow, ttl_s: Optional[int] = None) -> None:
        payload = encode_window(window)
        self._r.set(self._k("window", name), payload, ex=ttl_s)
        logger.debug("saved window %s (%d bytes)", name, len(payload))

    def load(self, name: str, window: RollingWindow) -> bool:
        """读取快照并还原到 window；键不存在或内容损坏时返回 False。"""
        payload = self._r.get(self._k("window", name))
        if payload is None:
            logger.debug("no stored window for %s", name)
            return False
        applied = decode_window(window, payload)
        logger.debug("loaded window %s applied=%s", name, applied)
        return applied

    def delete(self, name: str) -> None:
        self._r.delete(self._k("window", name))
