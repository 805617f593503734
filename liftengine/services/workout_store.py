"""
SQL Workout Store

SQLAlchemy implementation of the PlanLoader, WorkoutStore and TargetWriter
protocols. Each call runs in its own short session and commits before
returning; any database failure is rolled back and raised as
``PersistenceError``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pydantic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from liftengine.core.exceptions import NotFoundError, PersistenceError, PlanInvalidError
from liftengine.core.logging import get_logger
from liftengine.models.enums import SessionStatus, SetType
from liftengine.models.exercise import WorkoutDayExercise
from liftengine.models.workout_log import ExerciseLog, SetLog, WorkoutLog
from liftengine.repositories import (
    ExerciseLogRepository,
    PlanRepository,
    SetLogRepository,
    UserRepository,
    WorkoutLogRepository,
)
from liftengine.schemas.plan import ExerciseDefinition, WorkoutPlanExercise
from liftengine.schemas.records import (
    ExerciseLogCreate,
    ExerciseLogRead,
    PerformedSet,
    RecentPerformance,
    SessionCompletion,
    SessionRecordCreate,
    SessionRecordRead,
    SetRecordCreate,
    SetRecordRead,
)
from liftengine.schemas.targets import SetTarget, dump_set_targets, parse_set_targets


logger = get_logger(__name__)


def to_plan_exercise(row: WorkoutDayExercise) -> WorkoutPlanExercise:
    """Map a stored prescription onto the plan schema."""
    try:
        sets = parse_set_targets(row.sets or [])
    except pydantic.ValidationError as e:
        raise PlanInvalidError(
            f"stored set targets are malformed: {e.error_count()} error(s)",
            {"field": "sets", "plan_exercise_id": row.id},
        ) from e

    return WorkoutPlanExercise(
        id=row.id,
        exercise=ExerciseDefinition.model_validate(row.exercise),
        exercise_order=row.exercise_order,
        sets=sets,
        rest_seconds=row.rest_time,
        notes=row.notes,
    )


class SqlWorkoutStore:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    @asynccontextmanager
    async def _transaction(self, operation: str, **context) -> AsyncIterator[AsyncSession]:
        async with self._session_maker() as db:
            try:
                yield db
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error("store_operation_failed", operation=operation, error=str(e), **context)
                raise PersistenceError(operation, f"{operation} failed", context) from e

    # ------------------------------------------------------------------
    # PlanLoader
    # ------------------------------------------------------------------

    async def load_plan(self, workout_day_id: int) -> list[WorkoutPlanExercise]:
        async with self._transaction("load_plan", workout_day_id=workout_day_id) as db:
            rows = await PlanRepository(db).list_by_day(workout_day_id)
            return [to_plan_exercise(row) for row in rows]

    async def get_plan_exercise(self, plan_exercise_id: int) -> WorkoutPlanExercise:
        async with self._transaction("get_plan_exercise", plan_exercise_id=plan_exercise_id) as db:
            row = await PlanRepository(db).get(plan_exercise_id)
            if row is None:
                raise NotFoundError("plan_exercise", details={"plan_exercise_id": plan_exercise_id})
            return to_plan_exercise(row)

    # ------------------------------------------------------------------
    # TargetWriter
    # ------------------------------------------------------------------

    async def update_exercise_targets(self, plan_exercise_id: int, sets: list[SetTarget]) -> None:
        async with self._transaction("update_exercise_targets", plan_exercise_id=plan_exercise_id) as db:
            row = await PlanRepository(db).update(plan_exercise_id, {"sets": dump_set_targets(sets)})
            if row is None:
                raise NotFoundError("plan_exercise", details={"plan_exercise_id": plan_exercise_id})

        logger.info("exercise_targets_updated", plan_exercise_id=plan_exercise_id, sets=len(sets))

    # ------------------------------------------------------------------
    # WorkoutStore
    # ------------------------------------------------------------------

    async def create_session_record(self, data: SessionRecordCreate) -> SessionRecordRead:
        async with self._transaction("create_session_record", workout_day_id=data.workout_day_id) as db:
            workout_log = await WorkoutLogRepository(db).create(
                WorkoutLog(
                    name=data.name,
                    workout_day_id=data.workout_day_id,
                    user_id=data.user_id,
                    status=SessionStatus.IN_PROGRESS.value,
                    started_at=data.started_at,
                )
            )
            return SessionRecordRead.model_validate(workout_log)

    async def find_exercise_log(self, session_id: int, exercise_id: int) -> ExerciseLogRead | None:
        async with self._transaction("find_exercise_log", session_id=session_id, exercise_id=exercise_id) as db:
            exercise_log = await ExerciseLogRepository(db).get_for_session(session_id, exercise_id)
            return ExerciseLogRead.model_validate(exercise_log) if exercise_log else None

    async def create_exercise_log(self, data: ExerciseLogCreate) -> ExerciseLogRead:
        async with self._transaction(
            "create_exercise_log", session_id=data.workout_log_id, exercise_id=data.exercise_id
        ) as db:
            exercise_log = await ExerciseLogRepository(db).create(
                ExerciseLog(
                    workout_log_id=data.workout_log_id,
                    exercise_id=data.exercise_id,
                    exercise_order=data.exercise_order,
                    exercise_name=data.exercise_name,
                )
            )
            return ExerciseLogRead.model_validate(exercise_log)

    async def create_set_record(self, data: SetRecordCreate) -> SetRecordRead:
        async with self._transaction(
            "create_set_record", exercise_log_id=data.exercise_log_id, set_number=data.set_number
        ) as db:
            repo = SetLogRepository(db)
            is_personal_record = False
            if data.completed and data.set_type is SetType.WORKING and data.weight and data.reps:
                best = await repo.best_working_weight(data.exercise_id)
                # The first ever working set sets the baseline, not a record
                is_personal_record = best is not None and data.weight > best

            set_log = await repo.create(
                SetLog(
                    exercise_log_id=data.exercise_log_id,
                    exercise_id=data.exercise_id,
                    set_number=data.set_number,
                    set_type=data.set_type.value,
                    weight=data.weight,
                    reps=data.reps,
                    rpe=data.rpe,
                    time_seconds=data.time_seconds,
                    distance=data.distance,
                    notes=data.notes,
                    completed=data.completed,
                    is_personal_record=is_personal_record,
                )
            )
            return SetRecordRead.model_validate(set_log)

    async def complete_session_record(
        self, session_id: int, completion: SessionCompletion
    ) -> SessionRecordRead:
        """Mark the session completed and credit its XP to the owning user.

        A session that is already completed is returned unchanged, so XP is
        credited once.
        """
        async with self._transaction("complete_session_record", session_id=session_id) as db:
            workout_logs = WorkoutLogRepository(db)
            workout_log = await workout_logs.get(session_id)
            if workout_log is None:
                raise NotFoundError("session", details={"session_id": session_id})
            if workout_log.status == SessionStatus.COMPLETED.value:
                logger.info("session_already_completed", session_id=session_id)
                return SessionRecordRead.model_validate(workout_log)

            workout_log = await workout_logs.update(
                session_id,
                {"status": SessionStatus.COMPLETED.value, **completion.model_dump()},
            )
            if workout_log.user_id is not None:
                credited = await UserRepository(db).add_xp(workout_log.user_id, completion.xp_earned)
                if not credited:
                    logger.warning(
                        "user_xp_not_credited", session_id=session_id, user_id=workout_log.user_id
                    )
            return SessionRecordRead.model_validate(workout_log)

    async def fetch_recent_performance(self, exercise_id: int, limit: int) -> list[RecentPerformance]:
        async with self._transaction("fetch_recent_performance", exercise_id=exercise_id) as db:
            workout_logs = await WorkoutLogRepository(db).list_completed_with_exercise(exercise_id, limit)
            return [
                RecentPerformance(
                    session_id=workout_log.id,
                    date=workout_log.completed_at,
                    sets=[
                        PerformedSet.model_validate(set_log)
                        for exercise_log in workout_log.exercise_logs
                        if exercise_log.exercise_id == exercise_id
                        for set_log in exercise_log.sets
                        if set_log.completed
                    ],
                )
                for workout_log in workout_logs
            ]
