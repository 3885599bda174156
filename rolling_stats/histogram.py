from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


DEFAULT_HEIGHT = 20
NO_DATA = "No data available\n"

_BAR = "▇ "
_BLANK = "  "
_RULE = "──"


@dataclass(slots=True)
class HistogramOption:
    """直方图显示选项。

    height: 图表高度（行数），<= 0 时使用默认值 20。
    """

    height: int = DEFAULT_HEIGHT

    def effective_height(self) -> int:
        return self.height if self.height > 0 else DEFAULT_HEIGHT


def label_interval(size: int) -> int:
    """时间刻度间隔：桶数较多时每 size/10 个桶标注一次，避免拥挤。"""
    if size > 20:
        return size // 10
    return 1


def render_histogram(values: Sequence[float], bucket_seconds: int, option: HistogramOption | None = None) -> str:
    """将按"最新在前"排列的桶值渲染为垂直柱状图。

    只有严格为正的值会参与最大值计算并绘制柱子；全部非正时返回 NO_DATA。
    第 i 列的相对时间为 -i * bucket_seconds。
    """
    if option is None:
        option = HistogramOption()
    height = option.effective_height()

    size = len(values)
    bars: List[float] = [v if v > 0 else 0.0 for v in values]
    max_value = max(bars, default=0.0)
    if max_value == 0:
        return NO_DATA

    parts: List[str] = ["\nTime Window Histogram:\n\n"]

    # 从上到下逐行绘制
    for h in range(height, 0, -1):
        threshold = max_value * h / height
        for v in bars:
            parts.append(_BAR if v > 0 and v >= threshold else _BLANK)
        parts.append("\n")

    parts.append(_RULE * size)
    parts.append("\n")

    for v in bars:
        parts.append(f"{v:<2.0f}" if v > 0 else _BLANK)
    parts.append("\n")

    interval = label_interval(size)
    for i in range(size):
        if i % interval == 0:
            parts.append(f"{-i * bucket_seconds:<2d}")
        else:
            parts.append(_BLANK)
    parts.append("s\n")

    return "".join(parts)
