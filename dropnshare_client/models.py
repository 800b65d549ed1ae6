"""
Модели данных клиента: пользователь, результат запроса, загрузка файлов и состояние сессии
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class User(BaseModel):
    """
    Пользователь, подтверждённый сервером.

    Экземпляры создаются только через core.users.normalize_user -
    сырой JSON от сервера напрямую в User не превращается.

    Attributes:
        id: Идентификатор пользователя
        name: Имя (если сервер его не прислал - совпадает с email)
        email: Email пользователя (непустой)
        email_verified_at: Дата подтверждения email, если есть
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str
    email_verified_at: Optional[str] = None


@dataclass(frozen=True)
class RequestResult(Generic[T]):
    """
    Нормализованный результат HTTP запроса.

    Attributes:
        data: Распарсенное тело ответа (может быть заполнено и вместе с error)
        error: Сообщение об ошибке; вызывающий код проверяет его первым
        status: HTTP статус, 0 - ответ не получен (ошибка транспорта)
    """

    data: Optional[T] = None
    error: Optional[str] = None
    status: int = 0

    @property
    def ok(self) -> bool:
        return not self.error

    @property
    def is_transport_failure(self) -> bool:
        return bool(self.error) and self.status == 0


@dataclass(frozen=True)
class AuthResult:
    """Результат login/register: error is None означает успех."""

    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UploadFile:
    """
    Файл для загрузки.

    Attributes:
        uri: Путь к файлу или file:// URI
        name: Имя файла (по умолчанию - последний сегмент uri)
        type: MIME тип (по умолчанию - угадывается по имени)
    """

    uri: str
    name: Optional[str] = None
    type: Optional[str] = None


class UploadResult(BaseModel):
    """
    Ответ на загрузку вместе с производными ссылками.

    Attributes:
        download_url: Ссылка, которую вернул сервер
        expires_at: Когда ссылка перестанет работать
        filename: Последний сегмент download_url
        download_page_url: Страница скачивания на веб-origin
        direct_download_url: Прямая ссылка на API-origin
    """

    model_config = ConfigDict(frozen=True)

    download_url: str
    expires_at: Optional[str] = None
    filename: str
    download_page_url: str
    direct_download_url: str


@dataclass(frozen=True)
class SessionState:
    """Снимок сессии, который видят подписчики."""

    user: Optional[User] = None
    is_loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
