#!filepath: reqtimer/observability/instrumentation.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional

from reqtimer.observability.registry import TimerRegistry
from reqtimer.observability.report import Report, TimelineReporter


@dataclass
class Instrumentation:
    """
    TimerRegistry 的 context-manager 外观。

    设计铁律：
    1. with 块退出时只关闭自己 start 的那个 key（同名编号后的 key）
    2. 异常同样会关闭 timer，然后继续向上抛
    3. Instrumentation 本身不在热路径打日志
    """

    enabled: bool = True
    registry: TimerRegistry = field(default_factory=TimerRegistry)

    # ---------------------------------------------------------
    # Context Manager Timer
    # ---------------------------------------------------------
    def timer(self, name: Optional[str] = None, message: Optional[str] = None):
        """
        Context-manager timer.

        Parameters
        ----------
        name : str | None
            计时名称；None 时使用 with 语句所在位置
        message : str | None
            报告中显示的文字，默认等于 name
        """
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            key = inst.registry.start_timer(name, message)
            try:
                yield
            finally:
                inst.registry.stop_key(key)

        return _ctx()

    def report(self, clear: bool = False) -> Report:
        return self.registry.get_all(clear=clear)

    # ---------------------------------------------------------
    # Timeline 输出（冷路径）
    # ---------------------------------------------------------
    def generate_timeline_report(self, title: str, clear: bool = False):
        reporter = TimelineReporter(self.report(clear=clear), title)
        reporter.print()


# -------------------------------------------------------------
# No-op Instrumentation（禁用 observability）
# -------------------------------------------------------------
class NoOpInstrumentation:
    """Instrumentation disabled 时使用。"""

    enabled = False

    def timer(self, name: Optional[str] = None, message: Optional[str] = None):
        return _NoOpTimer()

    def report(self, clear: bool = False) -> Report:
        return {}

    def generate_timeline_report(self, title: str, clear: bool = False):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
