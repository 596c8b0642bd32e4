from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def require_text(value: Any, message: str) -> str:
    """Like ``require_non_empty`` but rejects JSON numbers, lists and objects."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


def require_fields(data: Mapping[str, Any], fields: tuple[str, ...], message: str) -> None:
    """Raise when any of ``fields`` is missing or blank in a JSON body."""
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_id(value: Any, message: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if parsed <= 0:
        raise ValidationError(message)
    return parsed


def optional_id(value: Any, message: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return parse_id(value, message)


def parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid role")


def parse_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid attendance status")


def parse_duration(value: Any) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Duration must be a number of minutes")
    if minutes <= 0:
        raise ValidationError("Duration must be a number of minutes")
    return minutes


def parse_bool(value: Any, message: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ValidationError(message)
