from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from fishing_api.db.models import AuthRefreshToken, User


class AuthRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user(self, user_id: UUID) -> User | None:
        return await self.session.get(User, user_id)

    async def find_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(func.lower(User.email) == email))
        return result.scalars().first()

    async def insert_user(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        await self.session.refresh(user)
        return user

    async def find_refresh_token(self, token_hash: str) -> AuthRefreshToken | None:
        result = await self.session.execute(
            select(AuthRefreshToken).where(AuthRefreshToken.token_hash == token_hash)
        )
        return result.scalars().first()

    async def add_refresh_token(self, token: AuthRefreshToken) -> None:
        self.session.add(token)
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()
