"""Управление сессией: вход, регистрация, выход и восстановление по токену."""

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Tuple

from dropnshare_client.api_client import APIClient
from dropnshare_client.constants import (
    MSG_EMPTY_CREDENTIALS,
    MSG_EMPTY_REGISTER_FIELDS,
    MSG_INVALID_RESPONSE,
    MSG_PASSWORDS_MISMATCH,
)
from dropnshare_client.core.session import Session
from dropnshare_client.core.storage import TokenStore
from dropnshare_client.core.users import normalize_user
from dropnshare_client.models import AuthResult, RequestResult, SessionState, User

logger = logging.getLogger(__name__)


def validate_login_form(email: str, password: str) -> Optional[str]:
    """
    Проверка формы входа перед отправкой.

    Returns:
        Сообщение об ошибке или None если всё ок
    """
    if not (email or "").strip() or not password:
        return MSG_EMPTY_CREDENTIALS
    return None


def validate_register_form(
    name: str,
    email: str,
    password: str,
    confirm: Optional[str] = None,
) -> Optional[str]:
    """
    Проверка формы регистрации перед отправкой.

    Args:
        name: Имя пользователя
        email: Email пользователя
        password: Пароль
        confirm: Повтор пароля (если форма его спрашивает)

    Returns:
        Сообщение об ошибке или None если всё ок
    """
    if not (name or "").strip() or not (email or "").strip() or not password:
        return MSG_EMPTY_REGISTER_FIELDS
    if confirm is not None and confirm != password:
        return MSG_PASSWORDS_MISMATCH
    return None


def _user_from_me(result: RequestResult[Any]) -> Optional[User]:
    data = result.data if isinstance(result.data, Mapping) else {}
    raw = data.get("user")
    return normalize_user(raw) if raw is not None else None


def _auth_payload(result: RequestResult[Any]) -> Tuple[Optional[str], Optional[User]]:
    data = result.data if isinstance(result.data, Mapping) else {}
    token = data.get("token")
    raw_user = data.get("user")
    user = normalize_user(raw_user) if raw_user is not None else None
    return (token if isinstance(token, str) and token else None), user


class SessionManager:
    """
    Единственный писатель сессии.

    Действия не сериализуются между собой: если UI вызывает их параллельно,
    в сессии остаётся результат того, что завершилось последним.
    """

    def __init__(
        self,
        api_client: APIClient,
        token_store: TokenStore,
        session: Optional[Session] = None,
    ) -> None:
        """
        Args:
            api_client: Клиент API
            token_store: Хранилище токена
            session: Наблюдаемая сессия (по умолчанию создаётся новая)
        """
        self.api_client = api_client
        self.token_store = token_store
        self.session = session if session is not None else Session()

    def _set_user(self, user: Optional[User]) -> None:
        self.session.publish(replace(self.session.state, user=user))

    def _invalidate(self) -> None:
        """Токен больше не работает - считаем это истечением сессии."""
        self.token_store.set(None)
        self._set_user(None)

    def restore(self) -> SessionState:
        """
        Восстановить сессию по сохранённому токену.

        is_loading становится False только после завершения проверки.

        Returns:
            Итоговое состояние сессии
        """
        logger.info("[RESTORE] Restoring session from stored token")
        user: Optional[User] = None
        try:
            token = self.token_store.get()
            if not token:
                logger.info("[RESTORE] No stored token, anonymous session")
            else:
                result = self.api_client.get_user_info()
                user = _user_from_me(result)
                if user is None:
                    logger.warning(
                        f"[RESTORE] Stored token rejected (status={result.status}), clearing it"
                    )
                    self.token_store.set(None)
                else:
                    logger.info(f"[RESTORE] Session restored for user: {user.email}")
        finally:
            self.session.publish(SessionState(user=user, is_loading=False))
        return self.session.state

    def login(self, email: str, password: str) -> AuthResult:
        """
        Вход пользователя.

        Returns:
            AuthResult с error=None при успехе; при ошибке сессия не меняется
        """
        result = self.api_client.login(email, password)
        return self._apply_auth_result(result, "LOGIN")

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """
        Регистрация нового пользователя; при успехе это сразу вход.

        Returns:
            AuthResult с error=None при успехе; при ошибке сессия не меняется
        """
        result = self.api_client.register(name, email, password)
        return self._apply_auth_result(result, "REGISTER")

    def _apply_auth_result(self, result: RequestResult[Any], tag: str) -> AuthResult:
        if result.error:
            logger.warning(f"[{tag}] Failed with status {result.status}: {result.error}")
            return AuthResult(error=result.error)

        token, user = _auth_payload(result)
        if token is None or user is None:
            keys = sorted(result.data.keys()) if isinstance(result.data, Mapping) else []
            logger.warning(
                f"[{tag}] Invalid response: expected {{token, user}}",
                extra={"has_token": token is not None, "has_user": user is not None, "keys": keys},
            )
            return AuthResult(error=MSG_INVALID_RESPONSE)

        if not self.token_store.set(token):
            logger.warning(f"[{tag}] Token was not persisted, session will not survive restart")
        self._set_user(user)
        logger.info(f"[{tag}] Authenticated as {user.email}")
        return AuthResult()

    def logout(self) -> None:
        """
        Выход из системы.

        Серверный вызов - best effort; токен и пользователь очищаются всегда.
        """
        result = self.api_client.logout()
        if result.error:
            logger.warning(
                f"[LOGOUT] Server logout failed (status={result.status}): {result.error}"
            )
        self.token_store.set(None)
        self._set_user(None)
        logger.info("User logged out")

    def refresh_user(self) -> Optional[User]:
        """
        Перечитать текущего пользователя. is_loading не меняется.

        Returns:
            Актуальный пользователь или None, если сессия недействительна
        """
        token = self.token_store.get()
        if not token:
            self._set_user(None)
            return None

        result = self.api_client.get_user_info()
        user = _user_from_me(result)
        if user is None:
            logger.warning(f"[REFRESH] Stored token rejected (status={result.status}), clearing it")
            self._invalidate()
            return None

        self._set_user(user)
        return user
