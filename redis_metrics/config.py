"""Process settings for the redis-metrics agent."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from REDIS_METRICS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REDIS_METRICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Agent configuration file (YAML or JSON)
    config_file: Path = Path("cfg.json")

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None


settings = Settings()
