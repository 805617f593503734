"""Turns a logged set into persisted records."""
from __future__ import annotations

from liftengine.core.logging import get_logger
from liftengine.schemas.plan import WorkoutPlanExercise
from liftengine.schemas.records import (
    ExerciseLogCreate,
    ExerciseLogRead,
    PerformanceInput,
    SetRecordCreate,
    SetRecordRead,
)
from liftengine.services.base import BaseService
from liftengine.services.interfaces import WorkoutStore


logger = get_logger(__name__)


class PerformanceRecorder(BaseService):
    """Persists completed sets, keeping one exercise log per (session, exercise).

    Logs are cached only after the store confirms them, so a failed creation
    is retried on the next call instead of being referenced.
    """

    def __init__(self, store: WorkoutStore):
        super().__init__(store)
        self._exercise_logs: dict[tuple[int, int], ExerciseLogRead] = {}

    async def record_set(
        self,
        session_id: int,
        plan_exercise: WorkoutPlanExercise,
        set_index: int,
        performance: PerformanceInput,
    ) -> SetRecordRead:
        if not 0 <= set_index < len(plan_exercise.sets):
            raise IndexError(f"set_index {set_index} out of range for plan exercise {plan_exercise.id}")

        exercise_log = await self.get_or_create_exercise_log(session_id, plan_exercise)
        target = plan_exercise.sets[set_index]

        record = await self._call_store(
            "create_set_record",
            self._store.create_set_record(
                SetRecordCreate(
                    exercise_log_id=exercise_log.id,
                    exercise_id=plan_exercise.exercise_id,
                    set_number=set_index + 1,
                    set_type=target.type,
                    weight=performance.weight,
                    reps=performance.reps,
                    rpe=performance.rpe,
                    time_seconds=performance.time_seconds,
                    distance=performance.distance,
                    notes=performance.notes,
                    completed=True,
                )
            ),
            session_id=session_id,
            exercise_id=plan_exercise.exercise_id,
        )

        logger.info(
            "set_recorded",
            session_id=session_id,
            exercise_id=plan_exercise.exercise_id,
            exercise_log_id=exercise_log.id,
            set_number=record.set_number,
            weight=record.weight,
            reps=record.reps,
        )
        return record

    async def get_or_create_exercise_log(
        self, session_id: int, plan_exercise: WorkoutPlanExercise
    ) -> ExerciseLogRead:
        key = (session_id, plan_exercise.exercise_id)
        cached = self._exercise_logs.get(key)
        if cached is not None:
            return cached

        existing = await self._call_store(
            "find_exercise_log",
            self._store.find_exercise_log(session_id, plan_exercise.exercise_id),
            session_id=session_id,
            exercise_id=plan_exercise.exercise_id,
        )
        if existing is None:
            existing = await self._call_store(
                "create_exercise_log",
                self._store.create_exercise_log(
                    ExerciseLogCreate(
                        workout_log_id=session_id,
                        exercise_id=plan_exercise.exercise_id,
                        exercise_order=plan_exercise.exercise_order,
                        exercise_name=plan_exercise.exercise.name,
                    )
                ),
                session_id=session_id,
                exercise_id=plan_exercise.exercise_id,
            )
            logger.info(
                "exercise_log_created",
                session_id=session_id,
                exercise_id=plan_exercise.exercise_id,
                exercise_log_id=existing.id,
            )

        self._exercise_logs[key] = existing
        return existing

