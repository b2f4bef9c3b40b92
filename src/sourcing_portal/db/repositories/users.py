from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from sourcing_portal.db.models import User, UserRole


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, email: str) -> User | None:
        return await self._session.get(User, email)

    async def create(
        self,
        *,
        email: str,
        name: str | None,
        password_hash: str,
        role: UserRole,
    ) -> User:
        user = User(email=email, name=name, password_hash=password_hash, role=role)
        self._session.add(user)
        await self._session.flush()
        return user
