from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_DAYS
from ..core.enums import Role
from ..core.exceptions import InvalidTokenError


@dataclass(frozen=True)
class Identity:
    """Who is calling: taken from a verified token and stored on ``flask.g``."""

    user_id: int
    role: Role

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER


class TokenService:
    """Issue and verify signed session tokens carrying ``{userId, role}``."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", expires_days: int = DEFAULT_TOKEN_DAYS):
        self._secret = secret
        self._algorithm = algorithm
        self._expires_days = int(expires_days)

    def issue(self, user_id: int, role: Role, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = {
            "userId": int(user_id),
            "role": role.value,
            "iat": now,
            "exp": now + timedelta(days=self._expires_days),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            raise InvalidTokenError("Invalid or expired token")

        try:
            return Identity(user_id=int(claims["userId"]), role=Role(claims["role"]))
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError("Invalid or expired token")
