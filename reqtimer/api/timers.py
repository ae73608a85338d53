# reqtimer/api/timers.py
from __future__ import annotations

from flask import Flask, current_app, g, has_app_context, request

from reqtimer import logs
from reqtimer.config import AppConfig
from reqtimer.observability.clock import REQUEST_TIME_KEY, RequestStart, resolve_clock
from reqtimer.observability.registry import TimerRegistry
from reqtimer.observability.report import TimelineReporter, server_timing_header

EXTENSION_KEY = "reqtimer"


def install_timers(app: Flask, config: AppConfig | None = None) -> Flask:
    """
    为每个 request 创建独立的 TimerRegistry（挂在 flask.g.timers）。

    - before_request: 新 registry；请求开始时间取 WSGI environ 的
      REQUEST_TIME，缺失时取 before_request 时的 clock 读数
    - after_request : get_all(clear=True) → Server-Timing header / timeline 日志
    """
    config = config or AppConfig()
    app.extensions[EXTENSION_KEY] = config

    @app.before_request
    def _open_timers():
        cfg: AppConfig = current_app.extensions[EXTENSION_KEY]
        clock = resolve_clock(cfg.timer.clock)

        if request.environ.get(REQUEST_TIME_KEY):
            request_start = RequestStart(environ=request.environ)
        else:
            request_start = RequestStart(explicit=clock())

        g.timers = TimerRegistry.from_config(
            cfg.timer, clock=clock, request_start=request_start
        )

    @app.after_request
    def _close_timers(response):
        registry: TimerRegistry | None = g.pop("timers", None)
        if registry is None:
            return response

        cfg: AppConfig = current_app.extensions[EXTENSION_KEY]
        report = registry.get_all(clear=True)

        if cfg.server.server_timing:
            response.headers["Server-Timing"] = server_timing_header(report)
        if cfg.server.log_timeline:
            TimelineReporter(report, f"{request.method} {request.path}").print()

        return response

    logs.debug(f"[Timer] installed on app {app.name!r}")
    return app


def current_timers() -> TimerRegistry:
    """
    当前 request 的 registry。
    request 之外（或未 install_timers）调用 → RuntimeError
    """
    registry = g.get("timers") if has_app_context() else None
    if registry is None:
        raise RuntimeError("no request timers: call install_timers(app) and use inside a request")
    return registry
