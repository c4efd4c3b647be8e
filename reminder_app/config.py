from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App environment
    env: str = Field(default="development", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    console_log_level: str = Field(default="INFO", alias="CONSOLE_LOG_LEVEL")

    # Database (key-value persistence)
    database_url: str = Field(default="sqlite+aiosqlite:///./reminders.db", alias="DATABASE_URL")

    # Reminder settings
    reminder_storage_key: str = Field(default="@reminders", alias="REMINDER_STORAGE_KEY")
    # Off by default: editing keeps the previously scheduled notification
    reminder_reschedule_on_edit: bool = Field(default=False, alias="REMINDER_RESCHEDULE_ON_EDIT")

    # Scheduler settings
    scheduler_timezone: Optional[str] = Field(default=None, alias="SCHEDULER_TIMEZONE")  # None → local zone
    scheduler_jobstore_url: Optional[str] = Field(default=None, alias="SCHEDULER_JOBSTORE_URL")  # None → in-memory
    scheduler_misfire_grace_seconds: int = Field(default=60, alias="SCHEDULER_MISFIRE_GRACE_SECONDS")

    # Notification settings
    notification_permission: str = Field(default="granted", alias="NOTIFICATION_PERMISSION")  # granted | denied
    notification_push_url: Optional[str] = Field(default=None, alias="NOTIFICATION_PUSH_URL")
    notification_push_token: Optional[str] = Field(default=None, alias="NOTIFICATION_PUSH_TOKEN")
    notification_push_timeout: float = Field(default=10.0, alias="NOTIFICATION_PUSH_TIMEOUT")
    notify_show_alert: bool = Field(default=True, alias="NOTIFY_SHOW_ALERT")
    notify_play_sound: bool = Field(default=True, alias="NOTIFY_PLAY_SOUND")
    notify_set_badge: bool = Field(default=False, alias="NOTIFY_SET_BADGE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
