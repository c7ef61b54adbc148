# tutoring_calendar/config.py

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    redis_url: str = "redis://localhost:6379/0"

    # Empty URL turns the booking dispatcher into a no-op
    webhook_url: str = ""
    webhook_timeout_seconds: float = 10.0

    booking_delay_seconds: float = 1.0
    form_debounce_seconds: float = 0.3
    session_ttl_seconds: int = 3600
    # How often in-process form/selection state of expired sessions is dropped
    session_sweep_interval_seconds: float = 60.0
    list_view_limit: int = 20

    default_page_title: str = "Akademia Wiedzy"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
