from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "Host Metrics Stream"
    debug: bool = False
    log_level: str = "INFO"

    # --- sampling ---
    tick_interval: float = 1.0  # seconds between frames on each connection
    disk_index: int = 1  # position of the reported disk in enumeration order

    # --- server ---
    host: str = "0.0.0.0"
    port: int = 9000
    cors_origins: list[str] = ["*"]
    cors_methods: list[str] = ["GET", "OPTIONS", "POST"]

    model_config = {"env_file": ".env", "env_prefix": "HOSTSTREAM_"}


settings = Settings()
