"""Application settings loaded from the environment (and an optional .env file)."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the alert monitor.

    Field names map case-insensitively to environment variables
    (e.g. ``batch_size`` <- ``BATCH_SIZE``).
    """

    database_url: str = "sqlite:///./stock_alerts.db"
    sql_echo: bool = False

    # Quote providers
    finnhub_api_key: str | None = None
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    provider_timeout_seconds: float = 10.0

    # Outbound email
    smtp_host: str = "smtp.qcloudmail.com"
    smtp_port: int = 465
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_use_ssl: bool = True
    email_from: str = "alerts@stocktracker.com"
    email_max_attempts: int = 3
    email_retry_delay_seconds: float = 1.0

    # Monitor cycle
    batch_size: int = 10
    batch_delay_seconds: float = 0.5
    check_interval_minutes: int = 5
    startup_delay_seconds: float = 5.0
    scheduler_enabled: bool = True

    # HTTP surface
    cron_secret: str | None = None
    host: str = "127.0.0.1"
    port: int = 8001
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process settings (read once)."""
    return Settings()
