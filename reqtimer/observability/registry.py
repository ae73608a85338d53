#!filepath: reqtimer/observability/registry.py
from __future__ import annotations

import threading
import time
from typing import Dict, List, Optional

from reqtimer import logs
from reqtimer.observability.clock import Clock, RequestStart, resolve_clock
from reqtimer.observability.locator import Locator, caller_location
from reqtimer.observability.naming import first_open_key, next_free_key, suffixed
from reqtimer.observability.record import TimerRecord
from reqtimer.observability.report import Report, ReportEntry
from reqtimer.utils.errors import TimerNotFoundError

DEFAULT_CORE_LABEL = "Core Processing (Derived from request start time)"


class TimerRegistry:
    """
    Request 级手动计时器表
    ---------------------------------------
    - start(name) / stop(name) / elapsed_time(name)
    - get_all(clear) → 报告（第一条为 core processing）
    - 每个 request 一个实例，不做跨 request 共享
    ---------------------------------------

    契约（不抛异常）：
      start        → 永远 True（同名自动编号 " #N"）
      stop         → 找不到可关闭的 timer 时 False
      elapsed_time → 缺失 / 未关闭 返回 0

    所有读写都在同一把锁下执行，get_all(clear=True) 的"读后清空"是原子的。
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        locator: Optional[Locator] = None,
        request_start: Optional[RequestStart] = None,
        precision: int = 5,
        report_precision: int = 6,
        core_label: str = DEFAULT_CORE_LABEL,
    ):
        self._clock: Clock = clock or time.time
        self._locator: Locator = locator or caller_location
        self.request_start = request_start or RequestStart()
        self.precision = precision
        self.report_precision = report_precision
        self.core_label = core_label

        self._timers: Dict[str, TimerRecord] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, cfg, **kwargs) -> "TimerRegistry":
        """Build from a TimerConfig; kwargs (locator, request_start, ...) pass through."""
        kwargs.setdefault("clock", resolve_clock(cfg.clock))
        return cls(
            precision=cfg.precision,
            report_precision=cfg.report_precision,
            core_label=cfg.core_label,
            **kwargs,
        )

    # ---------------------------------------------------------
    # lifecycle
    # ---------------------------------------------------------
    def start(self, name: Optional[str] = None, message: Optional[str] = None) -> bool:
        self.start_timer(name, message)
        return True

    def start_timer(self, name: Optional[str] = None, message: Optional[str] = None) -> str:
        """Same as start(), but returns the effective (disambiguated) key."""
        now = self._clock()

        if name is None:
            named = False
            name = self._locator()
        else:
            named = True

        if message is None:
            message = name

        with self._lock:
            key, n = next_free_key(name, self._timers)
            if n > 1:
                message = suffixed(message, n)

            self._timers[key] = TimerRecord(start=now, message=message, named=named)

        logs.debug(f"[Timer] start {key!r} named={named}")
        return key

    def stop(self, name: Optional[str] = None) -> bool:
        now = self._clock()

        with self._lock:
            if name is None:
                key = self._last_open_anonymous()
            else:
                key = first_open_key(name, self._timers)

            record = self._timers.get(key) if key is not None else None
            if record is None:
                logs.debug(f"[Timer] stop {name!r}: no open timer")
                return False

            record.end = now

        logs.debug(f"[Timer] stop {key!r} after {now - record.start:.6f}s")
        return True

    def stop_key(self, key: str) -> bool:
        """
        只关闭 key 本身（不做编号探测）。
        key 不存在或已关闭 → False，不影响其他同名 timer。
        """
        now = self._clock()

        with self._lock:
            record = self._timers.get(key)
            if record is None or not record.is_open:
                logs.debug(f"[Timer] stop_key {key!r}: not open")
                return False

            record.end = now

        return True

    def _last_open_anonymous(self) -> Optional[str]:
        """
        反向扫描（最近 start 的优先）：
        - 跳过已关闭的
        - 第一个 open 的匿名 timer → 命中
        - 先遇到 open 的具名 timer → 停止，不猜测
        """
        for key in reversed(self._timers):
            record = self._timers[key]
            if not record.is_open:
                continue
            if not record.named:
                return key
            return None
        return None

    def clear(self) -> bool:
        with self._lock:
            self._timers.clear()
        return True

    # ---------------------------------------------------------
    # queries
    # ---------------------------------------------------------
    def elapsed_time(self, name: str = "default", precision: Optional[int] = None) -> float:
        if precision is None:
            precision = self.precision

        with self._lock:
            record = self._timers.get(name)
            if record is None or record.end is None:
                return 0
            return round(record.end - record.start, precision)

    def lookup(self, name: str) -> TimerRecord:
        """Strict accessor: raises TimerNotFoundError instead of returning a sentinel."""
        with self._lock:
            try:
                return self._timers[name]
            except KeyError:
                raise TimerNotFoundError(name) from None

    def names(self) -> List[str]:
        with self._lock:
            return list(self._timers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._timers

    def request_start_time(self) -> float:
        return self.request_start.resolve()

    def request_time(self) -> float:
        return self._clock() - self.request_start_time()

    # ---------------------------------------------------------
    # report（冷路径）
    # ---------------------------------------------------------
    def get_all(self, clear: bool = False) -> Report:
        start = self.request_start_time()

        with self._lock:
            # now 必须在锁内读取，否则并发 start 的 timer 可能晚于 now
            now = self._clock()
            if self._timers:
                first = next(iter(self._timers.values()))
                core_end = first.start
            else:
                core_end = now

            times: Report = {
                self.core_label: ReportEntry(
                    message=self.core_label,
                    start=0,
                    end=core_end - start,
                    time=round(core_end - start, self.report_precision),
                    named=None,
                )
            }

            for key, record in self._timers.items():
                # open timer 按 "now" 报告，但不修改存储
                end = record.end if record.end is not None else now
                times[key] = ReportEntry(
                    message=record.message,
                    start=record.start - start,
                    end=end - start,
                    time=self.elapsed_time(key),
                    named=record.named,
                )

            if clear:
                self._timers.clear()

        return times
