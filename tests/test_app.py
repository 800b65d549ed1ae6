"""
Тесты сборки клиента, настроек и логирования
"""

import json
import logging

import pytest

from conftest import API_URL, USER_PAYLOAD, make_response
from dropnshare_client.app import create_app
from dropnshare_client.config import Settings
from dropnshare_client.core.logging_config import JSONFormatter, setup_logging
from dropnshare_client.core.storage import FileTokenStore, MemoryTokenStore


# ==================== Settings ====================


def test_web_origin_falls_back_to_api_url_without_api_suffix():
    settings = Settings(api_url="https://files.example.com/api/", _env_file=None)

    assert settings.api_url == "https://files.example.com/api"
    assert settings.web_origin == "https://files.example.com"


def test_explicit_web_url_wins():
    settings = Settings(
        api_url="https://api.example.com/api",
        web_url="https://www.example.com/",
        _env_file=None,
    )

    assert settings.web_origin == "https://www.example.com"


def test_api_url_without_api_suffix_is_its_own_web_origin():
    settings = Settings(api_url="https://example.com", _env_file=None)

    assert settings.web_origin == "https://example.com"


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.delenv("API_URL", raising=False)
    monkeypatch.delenv("DROPNSHARE_API_URL", raising=False)
    monkeypatch.setenv("EXPO_PUBLIC_API_URL", "https://env.example.com/api")
    monkeypatch.setenv("DROPNSHARE_TOKEN_FILE", str(tmp_path / "t.json"))
    monkeypatch.setenv("DROPNSHARE_REQUEST_TIMEOUT", "30")

    settings = Settings(_env_file=None)

    assert settings.api_url == "https://env.example.com/api"
    assert settings.token_file == tmp_path / "t.json"
    assert settings.request_timeout == 30.0


def test_default_timeout_is_none():
    assert Settings(_env_file=None).request_timeout is None


# ==================== Composition root ====================


def test_create_app_restores_session_from_token_file(settings, http):
    FileTokenStore(settings.token_file, settings.token_key).set("tok")
    http.add("GET", "/auth/me", make_response(200, {"user": USER_PAYLOAD}))

    app = create_app(settings, http=http)

    assert app.session.is_authenticated
    assert not app.session.is_loading
    assert app.session_manager.session is app.session
    assert app.uploads.web_origin == "https://api.example.com"
    assert app.uploads.direct_download_url("xyz.zip") == f"{API_URL}/download/xyz.zip"


def test_create_app_without_restore_stays_loading(settings, http):
    app = create_app(settings, token_store=MemoryTokenStore(), http=http, restore=False)

    assert app.session.is_loading
    assert http.calls == []


def test_full_login_logout_cycle_persists_to_file(settings, http):
    app = create_app(settings, http=http)
    http.add("POST", "/auth/login", make_response(200, {"token": "tok", "user": USER_PAYLOAD}))
    http.add("POST", "/auth/logout", make_response(204))

    assert app.session_manager.login("ada@example.com", "secret").ok
    assert FileTokenStore(settings.token_file, settings.token_key).get() == "tok"

    app.session_manager.logout()
    assert FileTokenStore(settings.token_file, settings.token_key).get() is None

    app.close()
    assert http.closed


# ==================== Logging ====================


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("dropnshare", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.user_id = 7

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == 7


@pytest.fixture
def package_logger():
    logger = logging.getLogger("dropnshare_client")
    saved = logger.handlers[:], logger.level, logger.propagate
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers, logger.level, logger.propagate = saved[0], saved[1], saved[2]


def test_setup_logging_with_file(tmp_path, package_logger):
    log_file = tmp_path / "client.log"

    setup_logging(level="DEBUG", log_file=str(log_file))
    logging.getLogger("dropnshare_client.test").info("written", extra={"step": 1})
    for handler in package_logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any(line["message"] == "written" and line["step"] == 1 for line in lines)


def test_setup_logging_leaves_root_logger_alone(package_logger):
    root = logging.getLogger()
    root_handlers = root.handlers[:]

    setup_logging(level="INFO")
    setup_logging(level="WARNING", json_logs=True)

    assert root.handlers == root_handlers
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0].formatter, JSONFormatter)
    assert package_logger.level == logging.WARNING
