"""
Исключения клиента
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """Базовое исключение клиента"""

    error_code: str = "CLIENT_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация исключения в словарь"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class StorageError(AppException):
    """Ошибки чтения/записи хранилища токена"""

    error_code = "STORAGE_ERROR"


class ValidationError(AppException):
    """Некорректные аргументы, обнаруженные до обращения к сети"""

    error_code = "VALIDATION_ERROR"
