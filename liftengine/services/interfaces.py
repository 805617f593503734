"""Collaborator protocols consumed by the session and progression engines.

Implementations raise ``PersistenceError`` for any failed read or write.
"""
from __future__ import annotations

from typing import Protocol

from liftengine.schemas.plan import WorkoutPlanExercise
from liftengine.schemas.records import (
    ExerciseLogCreate,
    ExerciseLogRead,
    RecentPerformance,
    SessionCompletion,
    SessionRecordCreate,
    SessionRecordRead,
    SetRecordCreate,
    SetRecordRead,
)
from liftengine.schemas.targets import SetTarget


class PlanLoader(Protocol):
    async def load_plan(self, workout_day_id: int) -> list[WorkoutPlanExercise]: ...


class WorkoutStore(Protocol):
    async def create_session_record(self, data: SessionRecordCreate) -> SessionRecordRead: ...

    async def find_exercise_log(self, session_id: int, exercise_id: int) -> ExerciseLogRead | None: ...

    async def create_exercise_log(self, data: ExerciseLogCreate) -> ExerciseLogRead: ...

    async def create_set_record(self, data: SetRecordCreate) -> SetRecordRead: ...

    async def complete_session_record(
        self, session_id: int, completion: SessionCompletion
    ) -> SessionRecordRead: ...

    async def fetch_recent_performance(
        self, exercise_id: int, limit: int
    ) -> list[RecentPerformance]: ...

    async def get_plan_exercise(self, plan_exercise_id: int) -> WorkoutPlanExercise: ...


class TargetWriter(Protocol):
    async def update_exercise_targets(
        self, plan_exercise_id: int, sets: list[SetTarget]
    ) -> None: ...
