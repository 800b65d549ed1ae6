"""Централизованный API клиент для взаимодействия с backend."""

import json
import logging
import mimetypes
from contextlib import ExitStack
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import requests

from dropnshare_client.constants import (
    CONTENT_TYPE_JSON,
    DEFAULT_MIME_TYPE,
    ENDPOINT_AUTH_LOGIN,
    ENDPOINT_AUTH_LOGOUT,
    ENDPOINT_AUTH_ME,
    ENDPOINT_AUTH_REGISTER,
    ENDPOINT_UPLOAD,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_REQUESTED_WITH,
    MSG_NETWORK_ERROR,
    MSG_NO_FILES,
    MSG_REQUEST_FAILED,
    REQUESTED_WITH_AJAX,
    STATUS_TRANSPORT_FAILURE,
    UPLOAD_FIELD_NAME,
)
from dropnshare_client.exceptions import ValidationError
from dropnshare_client.models import RequestResult, UploadFile

if TYPE_CHECKING:
    from dropnshare_client.core.storage import TokenStore

logger = logging.getLogger(__name__)

# (field, (filename, fileobj, mime)) - формат files= для requests
MultipartBody = Sequence[Tuple[str, Tuple[str, Any, str]]]


def _flatten_errors(errors: Any) -> List[str]:
    """Развернуть {"field": ["msg", ...]} или список сообщений в плоский список."""
    if isinstance(errors, Mapping):
        values = list(errors.values())
    elif isinstance(errors, (list, tuple)):
        values = list(errors)
    else:
        return []

    messages: List[str] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            messages.extend(str(item) for item in value if item not in (None, ""))
        elif value not in (None, ""):
            messages.append(str(value))
    return messages


def extract_error_message(data: Any, text: str, reason: str) -> str:
    """
    Сообщение об ошибке из ответа с неуспешным статусом.

    Приоритет: message -> error -> errors (через запятую) -> текст -> reason.

    Args:
        data: Распарсенное тело ответа (если было)
        text: Сырой текст ответа
        reason: HTTP reason phrase

    Returns:
        Непустое сообщение об ошибке
    """
    if isinstance(data, Mapping):
        for key in ("message", "error"):
            value = data.get(key)
            if value:
                return str(value)
        flattened = _flatten_errors(data.get("errors"))
        if flattened:
            return ", ".join(flattened)
    return text or reason or MSG_REQUEST_FAILED


def _local_path(uri: str) -> Path:
    """Путь к файлу из обычного пути или file:// URI."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(unquote(parsed.path)))
    return Path(uri).expanduser()


def _upload_name(file: UploadFile, index: int) -> str:
    if file.name:
        return file.name
    segment = PurePosixPath(unquote(urlparse(file.uri).path or file.uri)).name
    return segment or f"file_{index}"


def _upload_type(file: UploadFile, name: str) -> str:
    if file.type:
        return file.type
    guessed, _ = mimetypes.guess_type(name)
    return guessed or DEFAULT_MIME_TYPE


class APIClient:
    """
    Клиент для взаимодействия с DropNShare backend.

    Каждый вызов - одна попытка без повторов. Методы никогда не бросают
    исключений из-за сети или ответа сервера - все ошибки возвращаются
    в RequestResult.error.
    """

    def __init__(
        self,
        base_url: str,
        token_store: "TokenStore",
        http: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Инициализация API клиента.

        Args:
            base_url: Базовый URL API (например https://example.com/api)
            token_store: Хранилище токена, читается перед каждым запросом
            http: HTTP сессия requests (по умолчанию создаётся новая)
            timeout: Таймаут запросов в секундах (None - без таймаута)
        """
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        """Закрыть HTTP сессию"""
        self.http.close()

    def build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.strip('/')}"

    def _get_headers(
        self,
        multipart: bool,
        extra: Optional[Mapping[str, str]] = None,
    ) -> Tuple[Dict[str, str], bool]:
        """
        Получить заголовки для запроса.

        Returns:
            Заголовки и флаг наличия токена
        """
        headers: Dict[str, str] = {}
        if not multipart:
            headers[HEADER_CONTENT_TYPE] = CONTENT_TYPE_JSON
            headers[HEADER_ACCEPT] = CONTENT_TYPE_JSON

        # Laravel определяет AJAX запросы по этому заголовку
        headers[HEADER_REQUESTED_WITH] = REQUESTED_WITH_AJAX

        token = self.token_store.get()
        if token:
            headers[HEADER_AUTHORIZATION] = f"Bearer {token}"

        if extra:
            headers.update(extra)
        if multipart:
            # boundary выставляет requests
            for key in [k for k in headers if k.lower() == HEADER_CONTENT_TYPE.lower()]:
                del headers[key]
        return headers, bool(token)

    def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        json_body: Any = None,
        multipart_body: Optional[MultipartBody] = None,
    ) -> RequestResult[Any]:
        """
        Выполнить один HTTP запрос и нормализовать ответ.

        Args:
            path: Путь относительно базового URL
            method: HTTP метод (по умолчанию GET)
            headers: Дополнительные заголовки
            json_body: Тело запроса, сериализуется в JSON
            multipart_body: multipart поля в формате files= для requests

        Returns:
            RequestResult: status=0 при ошибке транспорта, иначе HTTP статус
        """
        method = (method or "GET").upper()
        url = self.build_url(path)
        multipart = multipart_body is not None
        request_headers, has_token = self._get_headers(multipart, headers)

        body: Optional[str] = None
        if not multipart and json_body is not None:
            try:
                body = json.dumps(json_body)
            except (TypeError, ValueError) as e:
                logger.error(f"[API] {method} {path} body is not JSON serializable: {e}")
                return RequestResult(error=str(e), status=STATUS_TRANSPORT_FAILURE)

        logger.debug(
            f"[API] {method} {path}",
            extra={"url": url, "has_body": body is not None or multipart, "has_token": has_token},
        )

        try:
            response = self.http.request(
                method,
                url,
                headers=request_headers,
                data=body,
                files=multipart_body,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"[API] {method} {path} failed (network): {e}")
            return RequestResult(
                error=str(e) or MSG_NETWORK_ERROR,
                status=STATUS_TRANSPORT_FAILURE,
            )
        except (ValueError, UnicodeError) as e:
            # Запрос не собрался: например, заголовок не кодируется в latin-1
            logger.error(f"[API] {method} {path} could not be sent: {e}")
            return RequestResult(
                error=str(e) or MSG_NETWORK_ERROR,
                status=STATUS_TRANSPORT_FAILURE,
            )

        return self._handle_response(response, method, path)

    def _handle_response(
        self,
        response: requests.Response,
        method: str,
        path: str,
    ) -> RequestResult[Any]:
        """
        Обработка ответа от сервера.

        Тело читается как текст и парсится как JSON только если оно непустое.
        """
        status = response.status_code
        reason = response.reason or ""
        text = response.text or ""
        logger.debug(
            f"[API] Response {method} {path}",
            extra={"status": status, "ok": response.ok, "text_length": len(text)},
        )

        data: Any = None
        if text:
            try:
                data = json.loads(text)
            except ValueError:
                logger.warning(f"[API] Response {method} {path} is not JSON: {text[:200]}")
                return RequestResult(
                    error=text or reason or MSG_REQUEST_FAILED,
                    status=status,
                )

        if not response.ok:
            message = extract_error_message(data, text, reason)
            logger.warning(f"[API] {method} {path} failed with status {status}: {message}")
            return RequestResult(data=data, error=message, status=status)

        return RequestResult(data=data, status=status)

    def register(self, name: str, email: str, password: str) -> RequestResult[Any]:
        """
        Регистрация нового пользователя.

        Returns:
            Ожидаемое тело ответа: {token, user}
        """
        return self.request(
            ENDPOINT_AUTH_REGISTER,
            method="POST",
            json_body={"name": name, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> RequestResult[Any]:
        """
        Вход пользователя.

        Returns:
            Ожидаемое тело ответа: {token, user}
        """
        logger.debug(f"[API] login email={email} has_password={bool(password)}")
        return self.request(
            ENDPOINT_AUTH_LOGIN,
            method="POST",
            json_body={"email": email, "password": password},
        )

    def get_user_info(self) -> RequestResult[Any]:
        """Текущий пользователь по сохранённому токену: {user}"""
        return self.request(ENDPOINT_AUTH_ME, method="GET")

    def logout(self) -> RequestResult[Any]:
        """Выход на сервере. Локальный токен здесь не трогается."""
        return self.request(ENDPOINT_AUTH_LOGOUT, method="POST")

    def upload(self, files: Sequence[UploadFile]) -> RequestResult[Any]:
        """
        Загрузка файлов одним multipart запросом.

        Args:
            files: Файлы для загрузки (поле files[] повторяется)

        Returns:
            Ожидаемое тело ответа: {download_url, expires_at}

        Raises:
            ValidationError: Если файлов нет или локальный файл не открывается
        """
        if not files:
            raise ValidationError(MSG_NO_FILES)

        with ExitStack() as stack:
            multipart: List[Tuple[str, Tuple[str, Any, str]]] = []
            for index, file in enumerate(files):
                path = _local_path(file.uri)
                try:
                    handle = stack.enter_context(open(path, "rb"))
                except OSError as e:
                    raise ValidationError(
                        f"Cannot open {file.uri}: {e.strerror or e}",
                        details={"uri": file.uri},
                    ) from e
                name = _upload_name(file, index)
                multipart.append((UPLOAD_FIELD_NAME, (name, handle, _upload_type(file, name))))

            logger.info(f"[UPLOAD] Uploading {len(multipart)} file(s)")
            return self.request(ENDPOINT_UPLOAD, method="POST", multipart_body=multipart)
