#!filepath: reqtimer/cli.py
from typing import Optional

import typer
from rich import print

from reqtimer import __version__
from reqtimer.config import AppConfig
from reqtimer.utils.logger import init_logging

app = typer.Typer(help="reqtimer request timer CLI")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def config(path: Optional[str] = typer.Option(None, "--config", "-c", help="YAML config file")):
    """
    打印合并 .env / 环境变量之后的最终配置
    """
    cfg = AppConfig.load(path)
    print(cfg.model_dump(mode="json"))


@app.command()
def serve(
    path: Optional[str] = typer.Option(None, "--config", "-c", help="YAML config file"),
    host: Optional[str] = typer.Option(None, help="override server.host"),
    port: Optional[int] = typer.Option(None, help="override server.port"),
):
    """
    启动带 request timer 的 Flask 服务
    """
    from reqtimer.api.app import create_app

    cfg = AppConfig.load(path)
    logs = init_logging(cfg.log)

    host = host or cfg.server.host
    port = port or cfg.server.port

    print(f"[green]Serving on http://{host}:{port}[/green]")
    logs.catch("server crashed", log_time=False)(create_app(cfg).run)(host=host, port=port)


if __name__ == "__main__":
    app()

# python -m reqtimer.cli serve --port 5000
