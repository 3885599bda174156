from __future__ import annotations

import argparse
import time
from typing import Callable, Dict

from .histogram import HistogramOption
from .window import RollingWindow


def _time_op(fn: Callable[[int], object], iterations: int) -> float:
    t0 = time.perf_counter()
    for i in range(iterations):
        fn(i)
    return time.perf_counter() - t0


def micro_benchmark(iterations: int = 100_000, size: int = 60) -> Dict[str, float]:
    """对热点操作计时，返回每个操作的平均耗时（纳秒）。"""
    window = RollingWindow.from_seconds(size, 1.0)
    for i in range(100):
        window.append(float(i))
    opt = HistogramOption()

    ops: Dict[str, Callable[[int], object]] = {
        "append": lambda i: window.append(float(i)),
        "inc": lambda i: window.inc(1.0),
        "sum": lambda i: window.sum(),
        "avg": lambda i: window.avg(),
        "get_data": lambda i: window.get_data(),
        "render_histogram": lambda i: window.render_histogram(opt),
    }
    results: Dict[str, float] = {}
    for name, fn in ops.items():
        # 渲染较慢，减少迭代次数
        n = iterations // 100 if name == "render_histogram" else iterations
        n = max(1, n)
        elapsed = _time_op(fn, n)
        results[name] = elapsed / n * 1e9
    return results


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="RollingWindow micro benchmark")
    parser.add_argument("--iterations", type=int, default=100_000)
    parser.add_argument("--size", type=int, default=60)
    args = parser.parse_args(argv)

    for name, ns_per_op in micro_benchmark(args.iterations, args.size).items():
        print(f"{name:<18} {ns_per_op:>12,.0f} ns/op")


if __name__ == "__main__":
    main()
