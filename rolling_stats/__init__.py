"""时间分桶滚动计数器。

固定容量的环形时间窗口，支持累加/覆盖写入、求和/均值/非零计数查询以及文本直方图。
"""

from .window import RollingWindow
from .histogram import HistogramOption, render_histogram
from .models import WindowData, WindowSnapshot
from .codec import encode_window, decode_window, DEFAULT_DURATION_NS
from .config import WindowConfig, load_config, configure_logging

__all__ = [
    "RollingWindow",
    "HistogramOption",
    "render_histogram",
    "WindowData",
    "WindowSnapshot",
    "encode_window",
    "decode_window",
    "DEFAULT_DURATION_NS",
    "WindowConfig",
    "load_config",
    "configure_logging",
]
