from __future__ import annotations
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from liftengine.models.enums import SetType
from liftengine.models.workout_log import SetLog
from liftengine.repositories.base import Repository


class SetLogRepository(Repository[SetLog, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> SetLog | None:
        result = await self._session.execute(select(SetLog).where(SetLog.id == id))
        return result.scalar_one_or_none()

    async def best_working_weight(self, exercise_id: int) -> float | None:
        """Heaviest completed working-set weight ever logged for ``exercise_id``."""
        result = await self._session.execute(
            select(func.max(SetLog.weight)).where(
                SetLog.exercise_id == exercise_id,
                SetLog.set_type == SetType.WORKING.value,
                SetLog.completed.is_(True),
                SetLog.reps > 0,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, entity: SetLog) -> SetLog:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: int, updates: dict) -> SetLog | None:
        set_log = await self.get(id)
        if set_log:
            for key, value in updates.items():
                if hasattr(set_log, key):
                    setattr(set_log, key, value)
            await self._session.flush()
        return set_log
