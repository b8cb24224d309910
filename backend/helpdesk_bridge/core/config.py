from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    db_url: str = Field(default="sqlite+aiosqlite:///./helpdesk_bridge.db", alias="DB_URL")
    helpdesk_api_base_url: str = Field(
        default="https://api.helper.ai", alias="HELPDESK_API_BASE_URL"
    )
    helpdesk_mailbox_slug: str = Field(default="support", alias="HELPDESK_MAILBOX_SLUG")
    # NOTE: Widget calls go to a separate host from the administrative API.
    helpdesk_widget_host: str = Field(
        default="https://helperai.dev", alias="HELPDESK_WIDGET_HOST"
    )
    helpdesk_secret_key: str = Field(default="", alias="HELPDESK_SECRET_KEY")
    helpdesk_widget_secret: str = Field(default="", alias="HELPDESK_WIDGET_SECRET")
    helpdesk_widget_title: str = Field(default="Support", alias="HELPDESK_WIDGET_TITLE")
    helpdesk_timeout_sec: float = Field(default=15, alias="HELPDESK_TIMEOUT_SEC")
    customer_info_host: str = Field(
        default="http://localhost:8000", alias="CUSTOMER_INFO_HOST"
    )

    model_config = SettingsConfigDict(env_file=(".env", "backend/.env"), extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
