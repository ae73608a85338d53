#!filepath: reqtimer/observability/record.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class TimerRecord:
    """
    单个 timer 的存储记录。

    start / end 为同一 Clock 的读数（秒）。
    end 为 None 表示 timer 仍然 open。
    named=False 表示名字由调用位置自动生成。
    """

    start: float
    message: str
    named: bool
    end: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.end is None
