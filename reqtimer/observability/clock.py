#!filepath: reqtimer/observability/clock.py
from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from reqtimer import logs
from reqtimer.utils.errors import ConfigError

Clock = Callable[[], float]

CLOCKS: Dict[str, Clock] = {
    "time": time.time,
    "monotonic": time.monotonic,
    "perf_counter": time.perf_counter,
}

REQUEST_TIME_KEY = "REQUEST_TIME"

# 进程级启动时间：嵌入方调用 mark_process_start 后才生效（reqtimer 自身不调用）
TIME_START: Optional[float] = None


def resolve_clock(name) -> Clock:
    """
    Config name (str or ClockName) → clock function.
    """
    key = getattr(name, "value", name)
    try:
        return CLOCKS[key]
    except KeyError:
        raise ConfigError(f"unknown clock: {key!r}") from None


def mark_process_start(value: Optional[float] = None) -> float:
    global TIME_START
    TIME_START = time.time() if value is None else float(value)
    return TIME_START


@dataclass
class RequestStart:
    """
    请求开始时间 provider。

    优先级：
      1. explicit（显式注入）
      2. 进程级 TIME_START
      3. environ["REQUEST_TIME"]（默认 os.environ，Flask 下为 WSGI environ）

    均缺失 → 0.0
    """

    explicit: Optional[float] = None
    environ: Optional[Mapping[str, object]] = None

    def resolve(self) -> float:
        if self.explicit is not None:
            return float(self.explicit)
        if TIME_START is not None:
            return float(TIME_START)

        environ = os.environ if self.environ is None else self.environ
        raw = environ.get(REQUEST_TIME_KEY)
        if raw is None or raw == "":
            return 0.0
        try:
            return float(raw)
        except (TypeError, ValueError):
            logs.warning(f"[RequestStart] unparsable {REQUEST_TIME_KEY}={raw!r}, using 0.0")
            return 0.0
