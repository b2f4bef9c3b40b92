"""
sourcing_portal.services.account_service

Registration and login.

Responsibilities:
- Create accounts with bcrypt-hashed passwords.
- Verify credentials and mint login tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from sourcing_portal.auth.jwt import JwtConfig, issue_token
from sourcing_portal.auth.passwords import hash_password, verify_password
from sourcing_portal.db.models import User, UserRole
from sourcing_portal.db.repositories.users import UserRepo
from sourcing_portal.observability.logging import get_logger
from sourcing_portal.services.errors import AuthenticationError, ValidationFailedError
from sourcing_portal.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LoginResult:
    token: str
    role: UserRole
    name: str


class AccountService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)

    async def register(
        self,
        *,
        name: str | None,
        email: str | None,
        password: str | None,
        role: UserRole | None,
    ) -> LoginResult:
        if not email or not password or role is None:
            raise ValidationFailedError("Email, password, and role are required")

        email = email.strip().lower()
        if await self._users.get(email) is not None:
            raise ValidationFailedError("Email already registered")

        user = await self._users.create(
            email=email,
            name=(name or "").strip() or None,
            password_hash=hash_password(password, rounds=self._settings.bcrypt_rounds),
            role=role,
        )
        await self._session.commit()
        log.info("user_registered", email=user.email, role=user.role.value)
        return self._login_result(user)

    async def login(self, *, email: str | None, password: str | None) -> LoginResult:
        user = await self._users.get(email.strip().lower()) if email else None
        if user is None or not password or not verify_password(password, user.password_hash):
            log.info("login_failed", email=email)
            raise AuthenticationError("Invalid email or password")
        return self._login_result(user)

    def _login_result(self, user: User) -> LoginResult:
        token = issue_token(
            cfg=JwtConfig.from_settings(self._settings),
            subject=user.email,
            role=user.role.value,
            ttl=timedelta(minutes=self._settings.token_ttl_minutes),
        )
        return LoginResult(token=token, role=user.role, name=user.name or user.email)
