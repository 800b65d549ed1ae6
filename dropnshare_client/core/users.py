"""Нормализация пользователя из ответа сервера."""

import logging
import math
from typing import Any, Mapping, Optional

from dropnshare_client.models import User

logger = logging.getLogger(__name__)


def _coerce_id(value: Any) -> Optional[int]:
    """
    Привести id к целому числу.

    Строже, чем простое приведение к числу: None, "" и bool не
    превращаются в 0 или 1, а отклоняются, чтобы отсутствующий id не
    стал пользователем с id=0.

    Returns:
        Целое число или None, если значение не число (NaN, inf, дробное, пустое)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_user(raw: Any) -> Optional[User]:
    """
    Проверить и привести сырой объект пользователя к User.

    Единственное место, где из данных сервера создаётся User.

    Args:
        raw: Объект пользователя из JSON ответа

    Returns:
        User или None, если объект не проходит проверку
    """
    if not isinstance(raw, Mapping):
        return None

    user_id = _coerce_id(raw.get("id"))
    if user_id is None:
        logger.debug(f"[NORMALIZE_USER] Rejected user with id={raw.get('id')!r}")
        return None

    email = _coerce_str(raw.get("email"))
    if not email:
        logger.debug("[NORMALIZE_USER] Rejected user without email")
        return None

    name = _coerce_str(raw.get("name")) or email

    verified = raw.get("email_verified_at")
    email_verified_at = verified if isinstance(verified, str) and verified else None

    return User(
        id=user_id,
        name=name,
        email=email,
        email_verified_at=email_verified_at,
    )
