"""Клиент DropNShare: сессия, авторизация по токену и загрузка файлов."""

from dropnshare_client.api_client import APIClient
from dropnshare_client.app import AppContext, create_app
from dropnshare_client.config import Settings, get_settings
from dropnshare_client.exceptions import AppException, StorageError, ValidationError
from dropnshare_client.models import (
    AuthResult,
    RequestResult,
    SessionState,
    UploadFile,
    UploadResult,
    User,
)

__all__ = [
    "APIClient",
    "AppContext",
    "AppException",
    "AuthResult",
    "RequestResult",
    "SessionState",
    "Settings",
    "StorageError",
    "UploadFile",
    "UploadResult",
    "User",
    "ValidationError",
    "create_app",
    "get_settings",
]

__version__ = "1.0.0"
