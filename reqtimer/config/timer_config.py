#!filepath: reqtimer/config/timer_config.py
from enum import Enum

from pydantic import BaseModel, Field


class ClockName(str, Enum):
    TIME = "time"
    MONOTONIC = "monotonic"
    PERF_COUNTER = "perf_counter"


class TimerConfig(BaseModel):
    # request start (REQUEST_TIME) 是墙钟时间，默认 clock 必须与之一致
    clock: ClockName = ClockName.TIME
    precision: int = Field(default=5, ge=0)
    report_precision: int = Field(default=6, ge=0)
    core_label: str = "Core Processing (Derived from request start time)"
