from __future__ import annotations
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from liftengine.models.enums import SessionStatus
from liftengine.models.workout_log import ExerciseLog, WorkoutLog
from liftengine.repositories.base import Repository


class WorkoutLogRepository(Repository[WorkoutLog, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> WorkoutLog | None:
        result = await self._session.execute(
            select(WorkoutLog).where(WorkoutLog.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, entity: WorkoutLog) -> WorkoutLog:
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity

    async def update(self, id: int, updates: dict) -> WorkoutLog | None:
        workout_log = await self.get(id)
        if workout_log:
            for key, value in updates.items():
                if hasattr(workout_log, key):
                    setattr(workout_log, key, value)
            await self._session.flush()
        return workout_log

    async def list_completed_with_exercise(self, exercise_id: int, limit: int) -> list[WorkoutLog]:
        """Completed sessions that logged ``exercise_id``, most recent first.

        Each returned log has its exercise logs and sets loaded.
        """
        result = await self._session.execute(
            select(WorkoutLog)
            .join(ExerciseLog, ExerciseLog.workout_log_id == WorkoutLog.id)
            .options(selectinload(WorkoutLog.exercise_logs).selectinload(ExerciseLog.sets))
            .where(
                ExerciseLog.exercise_id == exercise_id,
                WorkoutLog.status == SessionStatus.COMPLETED.value,
                WorkoutLog.completed_at.is_not(None),
            )
            .order_by(WorkoutLog.completed_at.desc(), WorkoutLog.id.desc())
            .limit(limit)
        )
        return list(result.scalars().unique().all())
