from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime


def require_int(data: dict, key: str) -> int:
    value = data.get(key)
    if value is None or value == "":
        raise ValidationError(f"{key} is required", field=key)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer", field=key)


def optional_float(data: dict, key: str) -> Optional[float]:
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number", field=key)


def optional_date(data: dict, key: str) -> Optional[date]:
    value = data.get(key)
    if not value:
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{key} must be YYYY-MM-DD", field=key)


def require_date(data: dict, key: str) -> date:
    value = optional_date(data, key)
    if value is None:
        raise ValidationError(f"{key} is required", field=key)
    return value


def optional_datetime(data: dict, key: str) -> Optional[datetime]:
    value = data.get(key)
    if not value:
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 datetime", field=key)


def optional_bool(data: dict, key: str, default: Optional[bool] = None) -> Optional[bool]:
    value: Any = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def optional_int(data: dict, key: str, default: int = 0) -> int:
    if data.get(key) in (None, ""):
        return default
    return require_int(data, key)
