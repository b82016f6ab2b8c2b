from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty", field=field_name)
    return value.strip()


def require_present(value, field_name: str):
    if value is None:
        raise ValidationError(f"{field_name} is required", field=field_name)
    return value


def require_range(value: float, field_name: str, *, min_value: float, max_value: float) -> float:
    """Inclusive bounds check; the offending field is named in the error."""
    if value is None or not (min_value <= float(value) <= max_value):
        raise ValidationError(
            f"{field_name} must be between {min_value} and {max_value} (got {value!r})",
            field=field_name,
        )
    return float(value)
