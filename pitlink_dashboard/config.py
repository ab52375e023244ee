"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "pitlinkpqc-dashboard"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 8080
    cors_allow_origins: list[str] = ["*"]

    # Retention
    history_capacity: int = Field(default=1000, ge=1)

    # Demo producer (off unless the transport runtime is absent)
    simulate: bool = False
    simulate_interval_seconds: float = Field(default=1.0, gt=0.0)
    simulate_slow_every: int = Field(default=5, ge=1)

    model_config = {"env_prefix": "DASHBOARD_"}


settings = Settings()
