from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def _check_length(text: str, field_name: str, max_length: Optional[int]) -> str:
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return text


def require_non_empty(value: Any, field_name: str, *, max_length: Optional[int] = None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return _check_length(str(value).strip(), field_name, max_length)


def optional_text(value: Any, default: str, *, field_name: str = "value", max_length: Optional[int] = None) -> str:
    if value is None or not str(value).strip():
        return default
    return _check_length(str(value).strip(), field_name, max_length)


def require_choice(value: Any, enum_cls: Type[E], field_name: str, default: Optional[E] = None) -> E:
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return enum_cls(value.strip() if isinstance(value, str) else value)
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}") from None


def require_positive_int(value: Any, field_name: str, *, maximum: Optional[int] = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    if maximum is not None:
        number = min(number, maximum)
    return number
