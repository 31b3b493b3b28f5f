"""Environment-driven configuration for the time tracker service.

Every knob the service reads lives on ``AppSettings``. Values come from the
process environment first and then from ``.env``/``.env.local`` files, so a
development checkout boots without any setup while deployments override what
they need.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Time Tracker"
    BASE_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2])
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")
    # Wall-clock zone used to decide what "today" is for reports.
    TZ: str = "Europe/Rome"

    DB_URL: str = Field(default="", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    JWT_SECRET: str = "change-me"
    JWT_ACCESS_TTL_MIN: int = 15
    JWT_REFRESH_TTL_DAYS: int = 7
    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = Field(default_factory=list)

    # Accounts registered with one of these emails are granted the admin role.
    ADMIN_EMAILS: Annotated[list[str], NoDecode] = Field(default_factory=list)

    ADMIN_REPORT_MONTHS: int = 3
    REPORT_PAGE_SIZE: int = 20

    LOG_LEVEL: str = "INFO"

    @field_validator("ALLOWED_ORIGINS", "ADMIN_EMAILS", mode="before")
    @classmethod
    def parse_csv_list(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("expected a comma separated string or list")

    @property
    def admin_emails(self) -> set[str]:
        return {email.lower() for email in self.ADMIN_EMAILS}


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    if not settings.DB_URL:
        settings.DB_URL = f"sqlite:///{settings.DATA_DIR}/data.db"
    return settings


settings = get_settings()
