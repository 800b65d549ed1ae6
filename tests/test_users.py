"""
Тесты нормализации пользователя
"""

import pytest

from dropnshare_client.core.users import normalize_user
from dropnshare_client.models import User


def test_string_id_is_coerced_and_name_defaults_to_email():
    user = normalize_user({"id": "7", "email": "a@b.com"})

    assert user == User(id=7, name="a@b.com", email="a@b.com")
    assert user.email_verified_at is None


def test_full_record_is_kept():
    raw = {
        "id": 3,
        "name": "Ada",
        "email": "ada@example.com",
        "email_verified_at": "2026-01-01T00:00:00Z",
        "role": "admin",
    }

    user = normalize_user(raw)

    assert user.id == 3
    assert user.name == "Ada"
    assert user.email == "ada@example.com"
    assert user.email_verified_at == "2026-01-01T00:00:00Z"


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {},
        "ada@example.com",
        42,
        ["id", "email"],
        {"id": 1},
        {"id": 1, "email": ""},
        {"id": 1, "email": None},
        {"email": "a@b.com"},
        {"id": None, "email": "a@b.com"},
        {"id": "abc", "email": "a@b.com"},
        {"id": "nan", "email": "a@b.com"},
        {"id": float("inf"), "email": "a@b.com"},
        {"id": 1.5, "email": "a@b.com"},
        {"id": True, "email": "a@b.com"},
        {"id": "", "email": "a@b.com"},
    ],
)
def test_invalid_input_is_rejected(raw):
    assert normalize_user(raw) is None


@pytest.mark.parametrize("raw_id", [7, "7", " 7 ", 7.0, "7.0"])
def test_numeric_ids(raw_id):
    assert normalize_user({"id": raw_id, "email": "a@b.com"}).id == 7


def test_values_are_coerced_to_strings():
    user = normalize_user({"id": 1, "email": 12345, "name": 678})

    assert user.email == "12345"
    assert user.name == "678"


def test_empty_name_defaults_to_email():
    user = normalize_user({"id": 1, "email": "a@b.com", "name": ""})

    assert user.name == "a@b.com"


def test_normalize_is_idempotent():
    first = normalize_user({"id": "7", "email": "a@b.com"})
    second = normalize_user(first.model_dump())

    assert first == second


def test_user_is_immutable():
    user = normalize_user({"id": 1, "email": "a@b.com"})

    with pytest.raises(Exception):
        user.email = "other@b.com"
