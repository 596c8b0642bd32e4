from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .datetime_utils import to_iso


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def fields_of(entity: Any) -> dict[str, Any]:
    """Shallow field dict of a dataclass entity, used to embed related rows."""
    return {f.name: getattr(entity, f.name) for f in fields(entity)}


def to_json(value: Any) -> Any:
    """Convert domain dataclasses into JSON-ready dicts with camelCase keys.

    Datetimes become ISO strings, enums their value; lists and dicts are
    converted recursively (dict keys are camel-cased too). Fields named
    ``password_hash`` are never emitted.
    """

    if is_dataclass(value) and not isinstance(value, type):
        value = fields_of(value)
    if isinstance(value, dict):
        return {
            camel_case(k): to_json(v)
            for k, v in value.items()
            if k != "password_hash"
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value
