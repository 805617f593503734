"""Shared fixtures: plan builders, an in-memory store and a SQLite database."""
from datetime import datetime, timedelta
from itertools import count

import pytest
import pytest_asyncio

from liftengine.config.progression_config_loader import ProgressionConfigLoader
from liftengine.config.settings import Settings
from liftengine.db.database import close_engine, create_engine, create_session_maker, init_db
from liftengine.models.enums import SetType
from liftengine.schemas.plan import ExerciseDefinition, WorkoutPlanExercise
from liftengine.schemas.records import (
    ExerciseLogRead,
    PerformedSet,
    RecentPerformance,
    SessionRecordRead,
    SetRecordRead,
)
from liftengine.schemas.targets import ExactReps, RepRange, SetTarget, ToFailure


def working(weight: float = 100, reps=10) -> SetTarget:
    return SetTarget(type=SetType.WORKING, target_weight=weight, target_reps=_reps(reps))


def warmup(weight: float = 50, reps: int = 8) -> SetTarget:
    return SetTarget(type=SetType.WARMUP, target_weight=weight, target_reps=ExactReps(value=reps))


def dropset(weight: float = 70, reps: int = 12) -> SetTarget:
    return SetTarget(type=SetType.DROPSET, target_weight=weight, target_reps=ExactReps(value=reps))


def _reps(reps):
    if isinstance(reps, tuple):
        return RepRange(min=reps[0], max=reps[1])
    if reps == "failure":
        return ToFailure()
    return ExactReps(value=reps)


def plan_exercise(
    id: int,
    sets: list[SetTarget],
    name: str | None = None,
    exercise_id: int | None = None,
    rest_seconds: int = 90,
) -> WorkoutPlanExercise:
    return WorkoutPlanExercise(
        id=id,
        exercise=ExerciseDefinition(id=exercise_id or id * 10, name=name or f"Exercise {id}"),
        exercise_order=id,
        sets=sets,
        rest_seconds=rest_seconds,
    )


def recent(session_id: int, *reps: int, weight: float = 100, days_ago: int = 0) -> RecentPerformance:
    """A past session whose working sets performed ``reps``."""
    return RecentPerformance(
        session_id=session_id,
        date=datetime(2026, 1, 31) - timedelta(days=days_ago),
        sets=[
            PerformedSet(set_number=i + 1, set_type=SetType.WORKING, weight=weight, reps=r)
            for i, r in enumerate(reps)
        ],
    )


class FakeWorkoutStore:
    """In-memory WorkoutStore, PlanLoader and TargetWriter.

    ``fail_on`` maps an operation name to how many upcoming calls should raise.
    """

    def __init__(self, plans: dict[int, list[WorkoutPlanExercise]] | None = None):
        self.plans = plans or {}
        self.recent: dict[int, list[RecentPerformance]] = {}
        self.sessions: dict[int, SessionRecordRead] = {}
        self.exercise_logs: dict[int, ExerciseLogRead] = {}
        self.set_records: list[SetRecordRead] = []
        self.completions: list = []
        self.target_updates: list[tuple[int, list[SetTarget]]] = []
        self.fail_on: dict[str, int] = {}
        self.calls: list[str] = []
        self._ids = count(1)

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        remaining = self.fail_on.get(operation, 0)
        if remaining:
            self.fail_on[operation] = remaining - 1
            raise RuntimeError(f"{operation} unavailable")

    async def load_plan(self, workout_day_id):
        self._enter("load_plan")
        return list(self.plans.get(workout_day_id, []))

    async def get_plan_exercise(self, plan_exercise_id):
        self._enter("get_plan_exercise")
        for plan in self.plans.values():
            for exercise in plan:
                if exercise.id == plan_exercise_id:
                    return exercise
        raise KeyError(plan_exercise_id)

    async def update_exercise_targets(self, plan_exercise_id, sets):
        self._enter("update_exercise_targets")
        self.target_updates.append((plan_exercise_id, list(sets)))

    async def create_session_record(self, data):
        self._enter("create_session_record")
        record = SessionRecordRead(id=next(self._ids), **data.model_dump())
        self.sessions[record.id] = record
        return record

    async def find_exercise_log(self, session_id, exercise_id):
        self._enter("find_exercise_log")
        for log in self.exercise_logs.values():
            if log.workout_log_id == session_id and log.exercise_id == exercise_id:
                return log
        return None

    async def create_exercise_log(self, data):
        self._enter("create_exercise_log")
        log = ExerciseLogRead(id=next(self._ids), **data.model_dump())
        self.exercise_logs[log.id] = log
        return log

    async def create_set_record(self, data):
        self._enter("create_set_record")
        record = SetRecordRead(id=next(self._ids), **data.model_dump(exclude={"notes"}))
        self.set_records.append(record)
        return record

    async def complete_session_record(self, session_id, completion):
        self._enter("complete_session_record")
        self.completions.append((session_id, completion))
        record = self.sessions[session_id].model_copy(update=completion.model_dump())
        self.sessions[session_id] = record
        return record

    async def fetch_recent_performance(self, exercise_id, limit):
        self._enter("fetch_recent_performance")
        return list(self.recent.get(exercise_id, []))[:limit]


@pytest.fixture
def settings():
    return Settings(rest_timer_tick_seconds=1.0, default_rpe=7)


@pytest.fixture
def progression_config():
    return ProgressionConfigLoader().config


@pytest.fixture
def two_exercise_plan():
    """Exercise A with 3 working sets, exercise B with 2."""
    return [
        plan_exercise(1, [working(100, 10)] * 3, name="Bench Press", rest_seconds=120),
        plan_exercise(2, [working(60, 12)] * 2, name="Barbell Row", rest_seconds=60),
    ]


@pytest.fixture
def store(two_exercise_plan):
    return FakeWorkoutStore(plans={7: two_exercise_plan})


@pytest_asyncio.fixture
async def engine():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield engine
    await close_engine(engine)


@pytest_asyncio.fixture
async def session_maker(engine):
    return create_session_maker(engine)
