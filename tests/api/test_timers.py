from __future__ import annotations

import pytest
from flask import Flask

from reqtimer.api.timers import current_timers, install_timers


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json == {"ok": True}
    assert resp.headers["Server-Timing"].startswith("core;desc=")


def test_timed_view_server_timing_header(client):
    resp = client.get("/orders")

    assert resp.status_code == 200
    header = resp.headers["Server-Timing"]
    assert 'desc="SELECT orders"' in header
    assert 'desc="serialize"' in header
    assert header.count(";dur=") == 3


def test_timeline_logged(client, captured_logs):
    client.get("/orders")

    output = "\n".join(captured_logs)
    assert "Request timeline for GET /orders" in output


def test_debug_timers_report(client):
    resp = client.get("/debug/timers")

    assert resp.status_code == 200
    data = resp.json
    assert data["request_time"] >= 0
    [core] = data["timers"].values()
    assert core["start"] == 0
    assert core["named"] is None


def test_request_time_from_wsgi_environ(client):
    resp = client.get("/debug/timers", environ_base={"REQUEST_TIME": "1000"})

    assert resp.json["request_start"] == 1000.0


def test_each_request_gets_fresh_registry(app, client):
    seen = []

    @app.get("/count")
    def count():
        registry = current_timers()
        registry.start("work")
        seen.append(registry)
        return {"timers": len(registry)}

    first = client.get("/count").json
    second = client.get("/count").json

    assert first == second == {"timers": 1}
    assert seen[0] is not seen[1]


def test_view_exception_still_reports_timer(app):
    app.config["PROPAGATE_EXCEPTIONS"] = False
    with app.test_client() as client:
        resp = client.get("/boom")

    assert resp.status_code == 500
    assert 'desc="boom"' in resp.headers["Server-Timing"]


def test_server_timing_disabled():
    from reqtimer.config import AppConfig

    cfg = AppConfig()
    cfg.server.server_timing = False
    app = install_timers(Flask(__name__), cfg)

    @app.get("/")
    def index():
        return "ok"

    resp = app.test_client().get("/")

    assert "Server-Timing" not in resp.headers


def test_current_timers_outside_request():
    with pytest.raises(RuntimeError):
        current_timers()


def test_current_timers_without_install():
    app = Flask(__name__)

    with app.test_request_context("/"):
        with pytest.raises(RuntimeError):
            current_timers()


def test_timed_view_exit_leaves_foreign_timer_open(app, client):
    from functools import wraps

    from reqtimer.api.decorators import timed_view

    seen = {}

    def check_after(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            resp = func(*args, **kwargs)
            registry = current_timers()
            seen["own"] = registry.lookup("work").is_open
            seen["foreign"] = registry.lookup("work #2").is_open
            return resp
        return wrapper

    @app.get("/nested")
    @check_after
    @timed_view("work")
    def nested():
        registry = current_timers()
        registry.start("work")
        registry.stop("work")
        return {"ok": True}

    resp = client.get("/nested")

    assert resp.status_code == 200
    assert seen == {"own": False, "foreign": True}
