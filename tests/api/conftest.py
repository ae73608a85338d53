from __future__ import annotations

import pytest

from reqtimer.api.app import create_app
from reqtimer.api.decorators import timed_view
from reqtimer.api.timers import current_timers
from reqtimer.config import AppConfig


@pytest.fixture
def app():
    """
    Flask app with a couple of instrumented demo views.
    """
    cfg = AppConfig()
    cfg.server.log_timeline = True
    app = create_app(cfg)
    app.config["TESTING"] = True

    @app.get("/orders")
    @timed_view("load orders", "SELECT orders")
    def orders():
        registry = current_timers()
        registry.start("serialize")
        registry.stop("serialize")
        return {"count": 0}

    @app.get("/boom")
    @timed_view()
    def boom():
        raise ValueError("boom")

    return app


@pytest.fixture
def client(app):
    """
    Flask test client (no real server).
    """
    with app.test_client() as client:
        yield client
