"""
Централизованная конфигурация клиента
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from dropnshare_client.constants import (
    DEFAULT_API_URL,
    DEFAULT_TOKEN_FILE,
    DEFAULT_TOKEN_KEY,
    DEFAULT_UPLOAD_MAX_RETRIES,
)


class Settings(BaseSettings):
    """Настройки клиента с валидацией через Pydantic"""

    # API
    api_url: str = Field(
        default=DEFAULT_API_URL,
        validation_alias=AliasChoices(
            "api_url", "dropnshare_api_url", "expo_public_api_url"
        ),
    )
    web_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "web_url", "dropnshare_web_url", "expo_public_web_url"
        ),
    )
    request_timeout: Optional[float] = None

    # Token storage
    token_file: Path = Path(DEFAULT_TOKEN_FILE).expanduser()
    token_key: str = DEFAULT_TOKEN_KEY

    # Upload
    upload_max_retries: int = Field(default=DEFAULT_UPLOAD_MAX_RETRIES, ge=1)

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    class Config:
        env_file = ".env"
        env_prefix = "dropnshare_"
        case_sensitive = False
        extra = "ignore"

    @field_validator("api_url")
    @classmethod
    def strip_api_url(cls, v: str) -> str:
        """Убирает завершающий слэш у базового URL API."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("api_url must not be empty")
        return v

    @field_validator("web_url")
    @classmethod
    def strip_web_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @field_validator("token_file")
    @classmethod
    def expand_token_file(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @property
    def web_origin(self) -> str:
        """
        Origin веб-страниц скачивания.

        Returns:
            web_url, а если он не задан - api_url без завершающего "/api"
        """
        if self.web_url:
            return self.web_url
        if self.api_url.endswith("/api"):
            return self.api_url[: -len("/api")]
        return self.api_url


@lru_cache()
def get_settings() -> Settings:
    """Возвращает синглтон настроек"""
    return Settings()
