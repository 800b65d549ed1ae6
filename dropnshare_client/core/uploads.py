"""
Загрузка файлов и построение ссылок на скачивание
"""

import logging
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlparse

from tenacity import (
    RetryCallState,
    retry,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from dropnshare_client.api_client import APIClient
from dropnshare_client.constants import (
    DEFAULT_UPLOAD_MAX_RETRIES,
    DOWNLOAD_PATH,
    MSG_INVALID_RESPONSE,
)
from dropnshare_client.models import RequestResult, UploadFile, UploadResult

logger = logging.getLogger(__name__)


def download_filename(download_url: str) -> str:
    """
    Имя архива - последний сегмент пути download_url.

    Сегмент остаётся в исходной (percent-encoded) форме, чтобы его можно
    было подставить в другой URL как есть. Query string и fragment игнорируются.
    """
    path = urlparse(download_url).path or download_url
    return path.rstrip("/").rsplit("/", 1)[-1]


def build_download_url(origin: str, filename: str) -> str:
    """<origin>/download/<filename>"""
    return f"{origin.rstrip('/')}{DOWNLOAD_PATH}/{filename}"


def _log_retry(retry_state: RetryCallState) -> None:
    result = retry_state.outcome.result() if retry_state.outcome else None
    logger.warning(
        f"[UPLOAD] Transport failure on attempt {retry_state.attempt_number}, retrying",
        extra={"error": getattr(result, "error", None)},
    )


class UploadService:
    """
    Загрузка файлов с проверкой ответа и производными ссылками.

    upload() - одна попытка, как и весь API слой.
    upload_with_retry() - явный повтор на стороне вызывающего кода,
    только для ошибок транспорта (status 0).
    """

    def __init__(
        self,
        api_client: APIClient,
        api_origin: str,
        web_origin: str,
        max_attempts: int = DEFAULT_UPLOAD_MAX_RETRIES,
        retry_wait: Optional[wait_base] = None,
    ) -> None:
        """
        Args:
            api_client: Клиент API
            api_origin: Базовый URL API (для прямых ссылок)
            web_origin: Origin веб-страниц скачивания
            max_attempts: Попыток по умолчанию для upload_with_retry
            retry_wait: Стратегия ожидания между повторами upload_with_retry
        """
        self.api_client = api_client
        self.api_origin = api_origin.rstrip("/")
        self.web_origin = web_origin.rstrip("/")
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)

    def download_page_url(self, filename: str) -> str:
        return build_download_url(self.web_origin, filename)

    def direct_download_url(self, filename: str) -> str:
        return build_download_url(self.api_origin, filename)

    def to_upload_result(self, data: Any) -> Optional[UploadResult]:
        """Проверить ответ {download_url, expires_at} и дополнить ссылками."""
        if not isinstance(data, Mapping):
            return None
        download_url = data.get("download_url")
        if not isinstance(download_url, str) or not download_url:
            return None
        filename = download_filename(download_url)
        if not filename:
            return None

        expires_at = data.get("expires_at")
        return UploadResult(
            download_url=download_url,
            expires_at=str(expires_at) if expires_at is not None else None,
            filename=filename,
            download_page_url=self.download_page_url(filename),
            direct_download_url=self.direct_download_url(filename),
        )

    def upload(self, files: Sequence[UploadFile]) -> RequestResult[UploadResult]:
        """
        Загрузить файлы и получить ссылку.

        Raises:
            ValidationError: Если файлов нет или локальный файл не открывается
        """
        result = self.api_client.upload(files)
        if result.error:
            return RequestResult(error=result.error, status=result.status)

        upload_result = self.to_upload_result(result.data)
        if upload_result is None:
            logger.warning(f"[UPLOAD] Invalid response: {str(result.data)[:200]}")
            return RequestResult(error=MSG_INVALID_RESPONSE, status=result.status)

        logger.info(
            "[UPLOAD] Upload finished",
            extra={"archive": upload_result.filename, "expires_at": upload_result.expires_at},
        )
        return RequestResult(data=upload_result, status=result.status)

    def upload_with_retry(
        self,
        files: Sequence[UploadFile],
        max_attempts: Optional[int] = None,
    ) -> RequestResult[UploadResult]:
        """
        Загрузка с повторами при ошибках транспорта.

        HTTP ошибки не повторяются. После исчерпания попыток возвращается
        результат последней.

        Args:
            files: Файлы для загрузки
            max_attempts: Максимальное количество попыток (по умолчанию из настроек)
        """
        attempts = max_attempts or self.max_attempts

        @retry(
            stop=stop_after_attempt(attempts),
            wait=self.retry_wait,
            retry=retry_if_result(lambda r: r.is_transport_failure),
            before_sleep=_log_retry,
            retry_error_callback=lambda state: state.outcome.result(),
        )
        def _attempt() -> RequestResult[UploadResult]:
            return self.upload(files)

        return _attempt()
