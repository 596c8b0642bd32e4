from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..auth.tokens import TokenService
from ..common.datetime_utils import now_utc
from ..common.validators import parse_role, require_text
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository


@dataclass(frozen=True)
class AuthResult:
    """What register/login hand back to the client."""

    user: User
    token: str


class AuthService:
    """Use cases: register, login, current user."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def register(self, *, email: str, password: str, name: str, role: str) -> AuthResult:
        email = require_text(email, "All fields are required").strip()
        password = require_text(password, "All fields are required")
        name = require_text(name, "All fields are required").strip()
        if not role:
            raise ValidationError("All fields are required")
        parsed_role = parse_role(role)

        if self._users.get_by_email(email):
            raise ValidationError("User already exists")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=parsed_role,
            student_profile=parsed_role == Role.STUDENT,
        )

        user = self._users.get_by_id(user_id)
        token = self._tokens.issue(user.id, user.role)
        return AuthResult(user=user, token=token)

    def login(self, *, email: str, password: str, now: Optional[datetime] = None) -> AuthResult:
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise ValidationError("Email and password are required")

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except Exception:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        now = now or now_utc()
        self._users.update_last_login(user.id, when=now)

        token = self._tokens.issue(user.id, user.role)
        return AuthResult(user=replace(user, last_login=now), token=token)

    def me(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
