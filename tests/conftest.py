# tests/conftest.py
from __future__ import annotations

from typing import Iterable, List

import pytest
from loguru import logger

from reqtimer.observability import clock as clock_module
from reqtimer.observability.clock import RequestStart
from reqtimer.observability.locator import fixed_location
from reqtimer.observability.registry import TimerRegistry


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture(autouse=True)
def _reset_process_start(monkeypatch):
    # TIME_START 是进程级状态，测试之间不能泄漏
    monkeypatch.setattr(clock_module, "TIME_START", None)
    monkeypatch.delenv("REQUEST_TIME", raising=False)


class FakeClock:
    """
    可控时钟：
    - 指定 ticks 时依次返回（用完后停在最后一个值）
    - clock.now = x 直接设置当前时间
    """

    def __init__(self, ticks: Iterable[float] = ()):
        self._ticks: List[float] = list(ticks)
        self.now = self._ticks[0] if self._ticks else 0.0
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        if self._ticks:
            self.now = self._ticks.pop(0)
        return self.now


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_clock():
    """make_clock([10.0, 11.0]) → 按顺序返回的 FakeClock"""
    return FakeClock


@pytest.fixture
def make_registry(fake_clock):
    """
    Factory fixture for TimerRegistry (testing only).

    Usage:
        reg = make_registry()
        reg = make_registry(request_start=2.0, location="views.py line 7")
    """

    def _make(request_start: float = 0.0, location: str = "views.py line 7", **kwargs) -> TimerRegistry:
        kwargs.setdefault("clock", fake_clock)
        return TimerRegistry(
            locator=fixed_location(location),
            request_start=RequestStart(explicit=request_start),
            **kwargs,
        )

    return _make


@pytest.fixture
def captured_logs():
    """临时添加一个 sink 捕获 loguru 输出"""
    captured: List[str] = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)), level="DEBUG")
    yield captured
    logger.remove(sink_id)
