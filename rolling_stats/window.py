from __future__ import annotations

import logging
import time
from typing import Callable, List, Tuple

from .histogram import HistogramOption, render_histogram
from .models import WindowData, WindowSnapshot
from .rwlock import RWLock


logger = logging.getLogger(__name__)

Clock = Callable[[], int]

NS_PER_SECOND = 1_000_000_000


class RollingWindow:
    """Fixed-size ring of time buckets for a single metric.

    Each bucket covers ``bucket_ns`` nanoseconds; ``cursor`` points at the bucket
    for "now". There is no background timer: every operation that must reflect
    the current time rotates the ring lazily on the calling thread.

    Locking:
    - exclusive: append / inc / dec / reset / get_data / render_histogram / restore
    - shared: sum / count / avg / get_latest_value / last_update_time / snapshot

    Shared reads do not rotate, so they may see the window as of the last
    rotating call.
    """

    __slots__ = (
        "_size",
        "_bucket_ns",
        "_clock",
        "_buckets",
        "_cursor",
        "_last_rotate_ns",
        "_last_update_ns",
        "_lock",
    )

    def __init__(self, size: int, bucket_ns: int, clock: Clock | None = None) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f"size must be a positive integer, got {size!r}")
        if isinstance(bucket_ns, bool) or not isinstance(bucket_ns, int) or bucket_ns < 1:
            raise ValueError(f"bucket_ns must be a positive integer, got {bucket_ns!r}")
        self._size = size
        self._bucket_ns = bucket_ns
        self._clock: Clock = clock or time.time_ns
        self._buckets: List[float] = [0.0] * size
        self._cursor = 0
        self._last_rotate_ns = self._clock()
        self._last_update_ns = 0
        self._lock = RWLock()

    @classmethod
    def from_seconds(cls, size: int, bucket_seconds: float, clock: Clock | None = None) -> "RollingWindow":
        return cls(size, int(bucket_seconds * NS_PER_SECOND), clock=clock)

    @property
    def size(self) -> int:
        return self._size

    @property
    def bucket_ns(self) -> int:
        return self._bucket_ns

    @property
    def span_ns(self) -> int:
        return self._size * self._bucket_ns

    def __repr__(self) -> str:
        return f"RollingWindow(size={self._size}, bucket_ns={self._bucket_ns}, cursor={self._cursor})"

    # ---------------------------- 轮转 ----------------------------
    def _rotate(self, now_ns: int) -> None:
        # 调用方必须持有写锁
        passed = (now_ns - self._last_rotate_ns) // self._bucket_ns
        if passed <= 0:
            return
        if passed >= self._size:
            # 整个窗口已过期
            for i in range(self._size):
                self._buckets[i] = 0.0
            self._cursor = 0
            logger.debug("window fully stale after %d buckets, cleared", passed)
        else:
            # 逐个推进游标，清空经过的桶
            while passed > 0:
                self._cursor = (self._cursor + 1) % self._size
                self._buckets[self._cursor] = 0.0
                passed -= 1
        self._last_rotate_ns = now_ns

    # ---------------------------- 写操作 ----------------------------
    def append(self, value: float) -> None:
        """Overwrite the current bucket."""
        with self._lock.write_locked():
            self._rotate(self._clock())
            self._buckets[self._cursor] = float(value)

    def inc(self, delta: float) -> None:
        with self._lock.write_locked():
            now = self._clock()
            self._rotate(now)
            self._last_update_ns = now
            self._buckets[self._cursor] += delta

    def dec(self, delta: float) -> None:
        with self._lock.write_locked():
            now = self._clock()
            self._rotate(now)
            self._last_update_ns = now
            self._buckets[self._cursor] -= delta

    def reset(self, value: float) -> None:
        """Overwrite the current bucket (same effect as append)."""
        with self._lock.write_locked():
            self._rotate(self._clock())
            self._buckets[self._cursor] = float(value)

    # ---------------------------- 读操作 ----------------------------
    def sum(self) -> float:
        with self._lock.read_locked():
            return sum(self._buckets)

    def count(self) -> int:
        """Number of non-zero buckets. A bucket that nets out to 0 counts as empty."""
        with self._lock.read_locked():
            return self._count()

    def avg(self) -> float:
        with self._lock.read_locked():
            count = self._count()
            if count == 0:
                return 0.0
            return sum(self._buckets) / count

    def _count(self) -> int:
        return sum(1 for v in self._buckets if v != 0)

    def get_latest_value(self) -> Tuple[float, bool]:
        with self._lock.read_locked():
            return self._buckets[self._cursor], True

    def last_update_time(self) -> int:
        """Nanosecond timestamp of the last inc/dec, 0 if never called."""
        with self._lock.read_locked():
            return self._last_update_ns

    def _recent_first(self) -> List[float]:
        return [self._buckets[(self._cursor - i) % self._size] for i in range(self._size)]

    def get_data(self) -> List[WindowData]:
        """All buckets, most recent first; entry i is stamped now - i * bucket_ns."""
        with self._lock.write_locked():
            now = self._clock()
            self._rotate(now)
            return [
                WindowData(timestamp_ns=now - i * self._bucket_ns, values=[value])
                for i, value in enumerate(self._recent_first())
            ]

    def render_histogram(self, option: HistogramOption | None = None) -> str:
        with self._lock.write_locked():
            self._rotate(self._clock())
            values = self._recent_first()
            bucket_seconds = self._bucket_ns // NS_PER_SECOND
        return render_histogram(values, bucket_seconds, option)

    # ---------------------------- 持久化 ----------------------------
    def snapshot(self) -> WindowSnapshot:
        with self._lock.read_locked():
            return WindowSnapshot(
                buckets=list(self._buckets),
                size=self._size,
                duration=self._bucket_ns,
                last_time=self._last_rotate_ns,
                cursor=self._cursor,
                last_update=self._last_update_ns,
            )

    def restore(self, snapshot: WindowSnapshot) -> bool:
        """Replace the whole state with ``snapshot``.

        Incoherent snapshots are ignored and the current state is kept.
        Returns whether the snapshot was applied.
        """
        if not snapshot.is_coherent():
            logger.warning("ignoring incoherent window snapshot: size=%s cursor=%s buckets=%d duration=%s",
                           snapshot.size, snapshot.cursor, len(snapshot.buckets), snapshot.duration)
            return False
        with self._lock.write_locked():
            self._buckets = [float(v) for v in snapshot.buckets]
            self._size = snapshot.size
            self._bucket_ns = snapshot.duration
            self._last_rotate_ns = snapshot.last_time
            self._cursor = snapshot.cursor
            self._last_update_ns = snapshot.last_update
        return True
