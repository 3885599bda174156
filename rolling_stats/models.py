from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List


@dataclass(slots=True)
class WindowData:
    """时间窗口中的一个数据点（纳秒级时间戳）。

    values 始终只包含一个值，保留列表形式以兼容后续扩展。
    """

    timestamp_ns: int  # 该桶对应的时间点
    values: List[float] = field(default_factory=list)


@dataclass(slots=True)
class WindowSnapshot:
    """窗口完整状态，用于持久化。

    字段名与外部存储中的记录保持一致：
    - duration / last_time / last_update 均为纳秒
    - last_update 为 0 表示从未 inc/dec
    """

    buckets: List[float]
    size: int
    duration: int
    last_time: int
    cursor: int
    last_update: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def is_coherent(self) -> bool:
        """快照自身是否满足窗口不变量。"""
        return (
            self.size >= 1
            and self.duration >= 1
            and len(self.buckets) == self.size
            and 0 <= self.cursor < self.size
        )
