# reqtimer/api/app.py
from __future__ import annotations

from flask import Flask, jsonify

from reqtimer.api.timers import current_timers, install_timers
from reqtimer.config import AppConfig


def create_app(config: AppConfig | None = None) -> Flask:
    app = Flask(__name__)
    # 报告是有序的（core processing 在前）
    app.json.sort_keys = False
    install_timers(app, config)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.get("/debug/timers")
    def debug_timers():
        """
        当前 request 的计时报告（request 级，不跨 request 保存）。
        """
        registry = current_timers()
        return jsonify({
            "request_start": registry.request_start_time(),
            "request_time": registry.request_time(),
            "timers": registry.get_all(),
        })

    return app


if __name__ == "__main__":
    # 允许 python -m reqtimer.api.app 启动
    cfg = AppConfig.load()
    create_app(cfg).run(host=cfg.server.host, port=cfg.server.port)
