#!filepath: reqtimer/observability/report.py
from __future__ import annotations

import re
from typing import Dict, Optional, TypedDict

from reqtimer import logs

CORE_METRIC = "core"


class ReportEntry(TypedDict):
    """
    get_all() 输出的单条记录（下游 toolbar / header 依赖此结构）。

    start / end 是相对请求开始时间的偏移（秒）。
    """

    message: str
    start: float
    end: float
    time: float
    named: Optional[bool]


Report = Dict[str, ReportEntry]


class TimelineReporter:
    """
    Timer 报告输出：
    - 每个 timer → offset + 耗时秒数
    - 第一条为 core processing
    """

    def __init__(self, report: Report, title: str):
        self.report = report
        self.title = title

    def print(self):
        logs.info(f"[Timeline] ===== Request timeline for {self.title} =====")

        total = 0.0
        for index, entry in enumerate(self.report.values()):
            message = str(entry["message"])
            logs.info(
                f"[Timeline] {message:<40} "
                f"@{entry['start']:>9.4f}s {entry['time']:>9.5f}s"
            )
            if index:
                total += entry["time"]

        logs.info(f"[Timeline] Timers total{'':<28} {total:>20.5f}s")
        logs.info("[Timeline] ===========================================")


_UNSAFE_DESC = re.compile(r'["\\\r\n]')


def server_timing_header(report: Report) -> str:
    """
    Server-Timing header value, e.g.::

        core;desc="Core Processing";dur=12.3, t1;desc="db";dur=4.0
    """
    parts = []
    for index, entry in enumerate(report.values()):
        metric = CORE_METRIC if index == 0 else f"t{index}"
        desc = _UNSAFE_DESC.sub("", str(entry["message"]))
        parts.append(f'{metric};desc="{desc}";dur={entry["time"] * 1000.0:.1f}')
    return ", ".join(parts)
