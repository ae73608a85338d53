#!filepath: reqtimer/observability/naming.py
"""
Timer key disambiguation.

同名 timer 依次编号：

    "x", "x #2", "x #3", ...

- start: 取第一个未被占用的 key（永不覆盖已有记录，无论 open / closed）
- stop : 取第一个不存在或仍然 open 的 key（从 base 本身开始探测）

纯函数，不依赖 registry。
"""
from __future__ import annotations

from itertools import count
from typing import Iterator, Mapping, Tuple

from reqtimer.observability.record import TimerRecord


def suffixed(base: str, n: int) -> str:
    if n == 1:
        return base
    return f"{base} #{n}"


def candidate_keys(base: str) -> Iterator[str]:
    """Infinite probe sequence: base, base #2, base #3, ..."""
    for n in count(1):
        yield suffixed(base, n)


def next_free_key(base: str, timers: Mapping[str, TimerRecord]) -> Tuple[str, int]:
    """
    First key of the probe sequence not present in ``timers``.

    Returns the key and its counter (1 for the bare base name).
    """
    for n in count(1):
        key = suffixed(base, n)
        if key not in timers:
            return key, n
    raise AssertionError("unreachable")


def first_open_key(base: str, timers: Mapping[str, TimerRecord]) -> str:
    """
    First key of the probe sequence whose record is missing or still open.

    The result may be absent from ``timers``; callers treat that as
    "nothing to stop".
    """
    for key in candidate_keys(base):
        record = timers.get(key)
        if record is None or record.is_open:
            return key
    raise AssertionError("unreachable")
