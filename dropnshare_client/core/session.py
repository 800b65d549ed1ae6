"""Наблюдаемое состояние сессии."""

import logging
import threading
from typing import Callable, List, Optional

from dropnshare_client.models import SessionState, User

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]


class Session:
    """
    Текущее состояние сессии, на которое подписывается UI.

    Писать в сессию может только SessionManager (через publish),
    остальной код получает снимки через state и подписки.
    """

    def __init__(self) -> None:
        self._state = SessionState()
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user(self) -> Optional[User]:
        return self._state.user

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Подписаться на изменения сессии.

        Args:
            listener: Вызывается с новым SessionState после каждого изменения

        Returns:
            Функция отписки
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, state: SessionState) -> None:
        """Заменить состояние и оповестить подписчиков (последняя запись побеждает)."""
        with self._lock:
            self._state = state
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                logger.error(f"[SESSION] Listener failed: {e}", exc_info=True)
