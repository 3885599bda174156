from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .adapters.redis_state import RedisWindowStore
from .histogram import DEFAULT_HEIGHT, HistogramOption
from .window import NS_PER_SECOND, Clock, RollingWindow


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class WindowConfig:
    """窗口配置。

    - size * bucket_seconds 即窗口总跨度（默认 60 个 1 秒桶）
    - histogram_height: 直方图行数
    - redis_*: 可选快照存储
    """

    size: int = 60
    bucket_seconds: float = 1.0
    histogram_height: int = DEFAULT_HEIGHT
    log_level: str = "INFO"
    redis_url: str = "redis://localhost:6379/0"
    redis_prefix: str = "rolling"

    def __post_init__(self) -> None:
        self.bucket_ns = int(self.bucket_seconds * NS_PER_SECOND)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WindowConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    def build_window(self, clock: Optional[Clock] = None) -> RollingWindow:
        return RollingWindow(self.size, self.bucket_ns, clock=clock)

    def histogram_option(self) -> HistogramOption:
        return HistogramOption(height=self.histogram_height)

    def build_store(self, client: Optional[Any] = None) -> RedisWindowStore:
        return RedisWindowStore(url=self.redis_url, prefix=self.redis_prefix, client=client)

    def configure_logging(self) -> None:
        configure_logging(self.log_level)


def load_config(filepath: Union[str, Path]) -> WindowConfig:
    """从文件加载配置，.yaml/.yml 使用 YAML，其余按 JSON 解析。"""
    path = Path(filepath)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    return WindowConfig.from_dict(data or {})


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
