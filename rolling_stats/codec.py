"""窗口状态的序列化/反序列化。

记录格式（JSON）::

    {"buckets": [...], "size": 60, "duration": 1000000000,
     "last_time": 1700000000000000000, "cursor": 3, "last_update": 0}

duration / last_time / last_update 为纳秒整数；解码时时间戳也接受 ISO-8601 字符串。
解码是尽力而为的：格式错误只记录告警，内存中的窗口保持不变。
"""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from .models import WindowSnapshot
from .window import RollingWindow


logger = logging.getLogger(__name__)

DEFAULT_DURATION_NS = 5 * 60 * 1_000_000_000

Payload = Union[bytes, bytearray, str, Dict[str, Any]]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# 秒的小数部分，按纳秒单独解析（最多 9 位）
_FRACTION = re.compile(r"(?<=\d:\d\d)\.(\d+)")


class MalformedRecord(ValueError):
    """记录内容无法还原为窗口状态（仅在模块内部使用）。"""


def encode_window(window: Optional[RollingWindow]) -> Optional[bytes]:
    if window is None:
        return None
    return json.dumps(window.snapshot().to_dict(), separators=(",", ":")).encode("utf-8")


def decode_window(window: RollingWindow, payload: Optional[Payload]) -> bool:
    """将记录还原到 ``window``，返回是否成功应用。

    - payload 为 None：不做任何事
    - payload 类型不支持：抛出 TypeError
    - 内容格式错误：记录告警并返回 False，窗口状态不变
    """
    if payload is None:
        return False
    if isinstance(payload, (bytes, bytearray, str)):
        try:
            data = json.loads(payload)
        except (ValueError, UnicodeDecodeError, RecursionError) as e:
            logger.warning("malformed window record, keeping current state: %s", e)
            return False
    elif isinstance(payload, dict):
        data = payload
    else:
        raise TypeError(f"expected bytes, str or dict, got {type(payload).__name__}")

    try:
        snapshot = snapshot_from_dict(data)
    except MalformedRecord as e:
        logger.warning("malformed window record, keeping current state: %s", e)
        return False
    return window.restore(snapshot)


def snapshot_from_dict(data: Any) -> WindowSnapshot:
    if not isinstance(data, dict):
        raise MalformedRecord(f"record must be an object, got {type(data).__name__}")

    raw_buckets = data.get("buckets")
    if not isinstance(raw_buckets, list):
        raise MalformedRecord("buckets must be a list")
    try:
        buckets = [_to_float(v) for v in raw_buckets]
        size = _to_int(data.get("size", len(buckets)))
        cursor = _to_int(data.get("cursor", 0))
        last_time = parse_timestamp_ns(data.get("last_time"))
        last_update = parse_timestamp_ns(data.get("last_update"))
    except (TypeError, ValueError, OverflowError) as e:
        raise MalformedRecord(str(e)) from e

    duration = data.get("duration")
    if isinstance(duration, int) and not isinstance(duration, bool) and duration > 0:
        duration_ns = duration
    else:
        logger.warning("window record has no usable duration (%r), using default %d ns",
                       duration, DEFAULT_DURATION_NS)
        duration_ns = DEFAULT_DURATION_NS

    return WindowSnapshot(
        buckets=buckets,
        size=size,
        duration=duration_ns,
        last_time=last_time,
        cursor=cursor,
        last_update=last_update,
    )


def parse_timestamp_ns(value: Any) -> int:
    """纳秒整数或 ISO-8601 字符串 -> 纳秒整数；None 和零值时间返回 0。"""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TypeError("timestamp must not be a bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        fraction_ns = 0
        m = _FRACTION.search(value)
        if m:
            fraction_ns = int(m.group(1)[:9].ljust(9, "0"))
            value = value[:m.start()] + value[m.end():]
        dt = datetime.fromisoformat(value)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        if dt.year <= 1:
            return 0
        return (dt - _EPOCH) // timedelta(seconds=1) * 1_000_000_000 + fraction_ns
    raise TypeError(f"unsupported timestamp type {type(value).__name__}")


def _to_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"bucket value must be a number, got {value!r}")
    return float(value)


def _to_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {value!r}")
    return value
