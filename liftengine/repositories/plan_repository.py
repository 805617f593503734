from __future__ import annotations
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from liftengine.models.exercise import WorkoutDayExercise
from liftengine.repositories.base import Repository


class PlanRepository(Repository[WorkoutDayExercise, int]):
    """Per-day exercise prescriptions. The exercise relationship loads eagerly."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> WorkoutDayExercise | None:
        result = await self._session.execute(
            select(WorkoutDayExercise).where(WorkoutDayExercise.id == id)
        )
        return result.unique().scalar_one_or_none()

    async def list_by_day(self, workout_day_id: int) -> list[WorkoutDayExercise]:
        result = await self._session.execute(
            select(WorkoutDayExercise)
            .where(WorkoutDayExercise.workout_day_id == workout_day_id)
            .order_by(WorkoutDayExercise.exercise_order, WorkoutDayExercise.id)
        )
        return list(result.unique().scalars().all())

    async def create(self, entity: WorkoutDayExercise) -> WorkoutDayExercise:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: int, updates: dict) -> WorkoutDayExercise | None:
        prescription = await self.get(id)
        if prescription:
            for key, value in updates.items():
                if hasattr(prescription, key):
                    setattr(prescription, key, value)
            await self._session.flush()
        return prescription
