from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: str, field_name: str = "date") -> datetime:
    """Parse an ISO-8601 string into a naive UTC datetime.

    Accepts plain dates (``2025-03-01``), naive datetimes and offset/``Z``
    suffixed datetimes as sent by JavaScript clients.
    """

    text = (value or "").strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"Invalid {field_name}")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field_name}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def optional_iso_datetime(value: Optional[str], field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_iso_datetime(value, field_name)


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (the way DATETIME columns store it).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
