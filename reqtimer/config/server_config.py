# reqtimer/config/server_config.py
from pydantic import BaseModel


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 5000
    server_timing: bool = True
    log_timeline: bool = False
