from __future__ import annotations
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from liftengine.models.user import User
from liftengine.repositories.base import Repository


class UserRepository(Repository[User, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> User | None:
        result = await self._session.execute(select(User).where(User.id == id))
        return result.scalar_one_or_none()

    async def create(self, entity: User) -> User:
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity

    async def update(self, id: int, updates: dict) -> User | None:
        user = await self.get(id)
        if user:
            for key, value in updates.items():
                if hasattr(user, key):
                    setattr(user, key, value)
            await self._session.flush()
        return user

    async def add_xp(self, id: int, amount: int) -> bool:
        """Increment the user's XP in one statement. False when the user is unknown."""
        result = await self._session.execute(
            update(User).where(User.id == id).values(xp=User.xp + amount)
        )
        return result.rowcount > 0
