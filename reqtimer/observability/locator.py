# reqtimer/observability/locator.py
from __future__ import annotations

import inspect
import os
from typing import Callable

Locator = Callable[[], str]

# 这些模块内部的帧不算"调用位置"
_SKIPPED_MODULES = ("reqtimer.observability", "reqtimer.api", "contextlib")

UNKNOWN_LOCATION = "unknown file line n/a"


def trim_path(path: str) -> str:
    """Shorten ``path`` to be relative to the working directory when below it."""
    cwd = os.getcwd()
    absolute = os.path.abspath(path)
    if absolute.startswith(cwd + os.sep):
        return os.path.relpath(absolute, cwd)
    return path


def _skipped(module: str) -> bool:
    return any(module == m or module.startswith(m + ".") for m in _SKIPPED_MODULES)


def caller_location() -> str:
    """
    Label of the first frame outside the timer machinery,
    e.g. ``"app/views.py line 42"``.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None:
            module = frame.f_globals.get("__name__", "")
            if not _skipped(module):
                return f"{trim_path(frame.f_code.co_filename)} line {frame.f_lineno}"
            frame = frame.f_back
        return UNKNOWN_LOCATION
    finally:
        # 避免 frame 引用环
        del frame


def fixed_location(label: str) -> Locator:
    """Locator that always returns ``label``."""

    def _locate() -> str:
        return label

    return _locate
