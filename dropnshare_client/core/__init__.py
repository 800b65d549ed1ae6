"""Модуль core: хранилище токена, сессия, авторизация и загрузка файлов."""

from dropnshare_client.core.auth import (
    SessionManager,
    validate_login_form,
    validate_register_form,
)
from dropnshare_client.core.logging_config import setup_logging
from dropnshare_client.core.session import Session
from dropnshare_client.core.storage import FileTokenStore, MemoryTokenStore, TokenStore
from dropnshare_client.core.uploads import (
    UploadService,
    build_download_url,
    download_filename,
)
from dropnshare_client.core.users import normalize_user

__all__ = [
    # auth
    "SessionManager",
    "validate_login_form",
    "validate_register_form",
    # logging
    "setup_logging",
    # session
    "Session",
    # storage
    "FileTokenStore",
    "MemoryTokenStore",
    "TokenStore",
    # uploads
    "UploadService",
    "build_download_url",
    "download_filename",
    # users
    "normalize_user",
]
