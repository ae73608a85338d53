from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional

from reqtimer.api.timers import current_timers


def timed_view(name: Optional[str] = None, message: Optional[str] = None):
    """
    Decorator: wrap a Flask view in a request timer.

    Contract:
    - name 默认为 view 函数名
    - view 抛异常时 timer 同样关闭
    """

    def decorator(func: Callable[..., Any]):
        timer_name = name or func.__name__

        @wraps(func)
        def wrapper(*args, **kwargs):
            registry = current_timers()
            key = registry.start_timer(timer_name, message)
            try:
                return func(*args, **kwargs)
            finally:
                registry.stop_key(key)

        return wrapper

    return decorator
