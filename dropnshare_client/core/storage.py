"""Хранилище токена авторизации."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

from dropnshare_client.constants import DEFAULT_TOKEN_KEY
from dropnshare_client.exceptions import StorageError

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    """Хранилище единственного токена. Никогда не бросает исключений наружу."""

    def get(self) -> Optional[str]:
        ...

    def set(self, token: Optional[str]) -> bool:
        ...


class FileTokenStore:
    """
    Токен в JSON файле вида {key: token}.

    Файл переживает перезапуск процесса - это единственный механизм
    восстановления сессии. Запись атомарная (временный файл + replace).
    """

    def __init__(self, path: Path, key: str = DEFAULT_TOKEN_KEY) -> None:
        """
        Args:
            path: Путь к файлу с токеном
            key: Ключ, под которым хранится токен
        """
        self.path = Path(path)
        self.key = key

    def get(self) -> Optional[str]:
        """
        Прочитать токен.

        Returns:
            Токен или None, если его нет или хранилище недоступно
        """
        try:
            token = self._load().get(self.key)
        except StorageError as e:
            logger.warning(f"[GET_TOKEN] Token storage unavailable, treating as anonymous: {e}")
            return None

        if isinstance(token, str) and token:
            return token
        return None

    def set(self, token: Optional[str]) -> bool:
        """
        Сохранить токен или удалить его при token=None.

        Returns:
            True если запись прошла успешно
        """
        try:
            try:
                data = self._load()
            except StorageError as e:
                # Испорченный файл перезаписывается целиком
                logger.warning(f"[SET_TOKEN] Discarding unreadable token storage: {e}")
                data = {}
            if token:
                data[self.key] = token
            else:
                data.pop(self.key, None)
            self._save(data)
        except StorageError as e:
            logger.error(f"[SET_TOKEN] Failed to persist token: {e}")
            return False

        if token:
            logger.info(f"[SET_TOKEN] Token saved, length: {len(token)}")
        else:
            logger.info("[SET_TOKEN] Token removed")
        return True

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise StorageError(
                f"Failed to read {self.path}: {e}", details={"path": str(self.path)}
            ) from e
        if not isinstance(data, dict):
            raise StorageError(
                f"Unexpected content in {self.path}", details={"path": str(self.path)}
            )
        return data

    def _save(self, data: Dict[str, str]) -> None:
        temp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w", dir=self.path.parent, delete=False, encoding="utf-8"
            ) as tf:
                json.dump(data, tf)
                temp_path = Path(tf.name)
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise StorageError(
                f"Failed to write {self.path}: {e}", details={"path": str(self.path)}
            ) from e


class MemoryTokenStore:
    """Токен в памяти процесса (тесты, эфемерные сессии)."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token or None
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set(self, token: Optional[str]) -> bool:
        with self._lock:
            self._token = token or None
        return True
