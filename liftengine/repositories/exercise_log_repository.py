from __future__ import annotations
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from liftengine.models.workout_log import ExerciseLog
from liftengine.repositories.base import Repository


class ExerciseLogRepository(Repository[ExerciseLog, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> ExerciseLog | None:
        result = await self._session.execute(
            select(ExerciseLog).where(ExerciseLog.id == id)
        )
        return result.scalar_one_or_none()

    async def get_for_session(self, workout_log_id: int, exercise_id: int) -> ExerciseLog | None:
        result = await self._session.execute(
            select(ExerciseLog).where(
                ExerciseLog.workout_log_id == workout_log_id,
                ExerciseLog.exercise_id == exercise_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, entity: ExerciseLog) -> ExerciseLog:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: int, updates: dict) -> ExerciseLog | None:
        exercise_log = await self.get(id)
        if exercise_log:
            for key, value in updates.items():
                if hasattr(exercise_log, key):
                    setattr(exercise_log, key, value)
            await self._session.flush()
        return exercise_log
