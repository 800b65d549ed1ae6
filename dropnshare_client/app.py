"""
Точка сборки клиента: настройки -> хранилище -> API -> сессия
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from dropnshare_client.api_client import APIClient
from dropnshare_client.config import Settings, get_settings
from dropnshare_client.core.auth import SessionManager
from dropnshare_client.core.logging_config import setup_logging
from dropnshare_client.core.session import Session
from dropnshare_client.core.storage import FileTokenStore, TokenStore
from dropnshare_client.core.uploads import UploadService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """
    Всё, что нужно UI: сессия для чтения и объекты для действий.

    Передаётся явно, глобального состояния сессии нет.
    """

    settings: Settings
    token_store: TokenStore
    api_client: APIClient
    session: Session
    session_manager: SessionManager
    uploads: UploadService

    def close(self) -> None:
        self.api_client.close()


def create_app(
    settings: Optional[Settings] = None,
    *,
    token_store: Optional[TokenStore] = None,
    http: Optional[requests.Session] = None,
    restore: bool = True,
    configure_logging: bool = False,
) -> AppContext:
    """
    Создает и связывает компоненты клиента.

    Args:
        settings: Настройки (по умолчанию из окружения)
        token_store: Хранилище токена (по умолчанию файл из настроек)
        http: HTTP сессия requests
        restore: Восстановить сессию по сохранённому токену сразу
        configure_logging: Настроить логгер пакета по настройкам

    Returns:
        AppContext
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(
            level=settings.log_level,
            json_logs=settings.json_logs,
            log_file=settings.log_file,
        )

    token_store = token_store or FileTokenStore(settings.token_file, settings.token_key)

    api_client = APIClient(
        base_url=settings.api_url,
        token_store=token_store,
        http=http,
        timeout=settings.request_timeout,
    )
    session = Session()
    session_manager = SessionManager(api_client, token_store, session)
    uploads = UploadService(
        api_client,
        api_origin=settings.api_url,
        web_origin=settings.web_origin,
        max_attempts=settings.upload_max_retries,
    )

    logger.info(
        "Client created",
        extra={"api_url": settings.api_url, "web_origin": settings.web_origin},
    )

    if restore:
        session_manager.restore()

    return AppContext(
        settings=settings,
        token_store=token_store,
        api_client=api_client,
        session=session,
        session_manager=session_manager,
        uploads=uploads,
    )
