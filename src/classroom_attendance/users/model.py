from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account that can log in.

    Plain data object (no database access). ``password_hash`` is never
    serialized into API responses.
    """

    id: int
    email: str
    name: str
    role: Role
    password_hash: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


@dataclass(frozen=True)
class TeacherSummary:
    """Public part of a teacher account embedded in group responses."""

    id: int
    name: str
    email: str
