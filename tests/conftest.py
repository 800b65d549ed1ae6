"""
Общие фикстуры: поддельный HTTP транспорт и хранилище токена
"""

import json
from typing import Any, Dict, List, Optional, Union

import pytest
import requests

from dropnshare_client.api_client import APIClient
from dropnshare_client.config import Settings
from dropnshare_client.core.auth import SessionManager
from dropnshare_client.core.session import Session
from dropnshare_client.core.storage import MemoryTokenStore

API_URL = "https://api.example.com/api"

REASONS = {
    200: "OK",
    201: "Created",
    204: "No Content",
    401: "Unauthorized",
    404: "Not Found",
    422: "Unprocessable Content",
    500: "Internal Server Error",
}


def make_response(
    status: int = 200,
    body: Union[None, str, Dict[str, Any], List[Any]] = None,
    reason: Optional[str] = None,
) -> requests.Response:
    """Собрать настоящий requests.Response без сети."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason if reason is not None else REASONS.get(status, "")
    if body is None:
        content = b""
    elif isinstance(body, str):
        content = body.encode("utf-8")
    else:
        content = json.dumps(body).encode("utf-8")
    response._content = content
    response.encoding = "utf-8"
    return response


class FakeHTTP:
    """
    Заменяет requests.Session: отдаёт заранее заданные ответы по (method, path).

    Ответ может быть requests.Response или исключением, которое нужно бросить.
    """

    def __init__(self) -> None:
        self.routes: Dict[tuple, list] = {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes.setdefault((method.upper(), path), []).extend(responses)

    def request(self, method, url, **kwargs):
        path = url[len(API_URL):] if url.startswith(API_URL) else url
        files = kwargs.get("files")
        self.calls.append(
            {
                "method": method,
                "url": url,
                "path": path,
                "headers": dict(kwargs.get("headers") or {}),
                "data": kwargs.get("data"),
                "files": [(field, (name, mime)) for field, (name, _, mime) in files] if files else None,
                "timeout": kwargs.get("timeout"),
            }
        )
        queue = self.routes.get((method, path))
        if not queue:
            raise requests.exceptions.ConnectionError(f"No route for {method} {path}")
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def calls_to(self, path: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["path"] == path]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def http() -> FakeHTTP:
    return FakeHTTP()


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def api_client(http: FakeHTTP, token_store: MemoryTokenStore) -> APIClient:
    return APIClient(API_URL, token_store, http=http)


@pytest.fixture
def session_manager(api_client: APIClient, token_store: MemoryTokenStore) -> SessionManager:
    return SessionManager(api_client, token_store, Session())


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(api_url=API_URL, token_file=tmp_path / "token.json", _env_file=None)


USER_PAYLOAD = {"id": 7, "name": "Ada", "email": "ada@example.com"}
