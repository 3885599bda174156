from __future__ import annotations


SECOND = 1_000_000_000


class FakeClock:
    """可手动推进的纳秒时钟。"""

    def __init__(self, start_ns: int = 1_700_000_000 * SECOND) -> None:
        self.now = start_ns

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * SECOND)
