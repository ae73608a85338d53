#!filepath: reqtimer/__init__.py

__version__ = "0.1.0"

from .utils.logger import Logging, logs, init_logging
from .config.app_config import AppConfig
from .observability.registry import TimerRegistry
from .observability.instrumentation import Instrumentation, NoOpInstrumentation

__all__ = [
    "logs", "Logging", "init_logging",
    "AppConfig",
    "TimerRegistry",
    "Instrumentation", "NoOpInstrumentation",
]
