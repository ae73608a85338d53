#!filepath: reqtimer/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .log_config import LogConfig
from .server_config import ServerConfig
from .timer_config import TimerConfig
from reqtimer import logs


def package_root() -> str:
    """
    返回 reqtimer 包目录（基于当前文件位置推导）:
    reqtimer/config/app_config.py → reqtimer/config → reqtimer
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def default_config_path() -> str:
    return os.path.join(package_root(), "config", "base.yml")


# 环境变量 → (section, field)
_ENV_OVERRIDES = {
    "REQTIMER_HOST": ("server", "host"),
    "REQTIMER_PORT": ("server", "port"),
    "REQTIMER_LOG_LEVEL": ("log", "level"),
}


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    timer: TimerConfig = Field(default_factory=TimerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 reqtimer/config/base.yml
        - 不依赖当前工作目录
        - REQTIMER_* 环境变量覆盖 YAML
        """
        # 1) 先加载 .env（当前工作目录，已存在的环境变量优先）
        load_dotenv(os.path.join(os.getcwd(), ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = default_config_path()

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        # 4) env 注入
        for env_name, (section, key) in _ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                raw.setdefault(section, {})[key] = value

        logs.debug(f"[Config] loaded {path}")
        return cls(**raw)
