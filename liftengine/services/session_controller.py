"""
Session Controller

Drives one live workout session:
- walks the pointer through the plan's exercises and sets
- records each completed set through the PerformanceRecorder
- runs the rest countdown between sets
- persists the session's completion with totals and XP

One controller instance owns one session. All control state lives in a
``SessionState`` value that only changes through ``transition``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime

from liftengine.config.progression_config_loader import RewardConfig, get_progression_config
from liftengine.config.settings import Settings, get_settings
from liftengine.core.exceptions import (
    InvalidTransitionError,
    PlanInvalidError,
    SessionAlreadyFinishedError,
)
from liftengine.core.logging import add_log_context, clear_log_context, get_logger
from liftengine.schemas.plan import WorkoutPlanExercise
from liftengine.schemas.records import (
    PerformanceInput,
    SessionCompletion,
    SessionRecordCreate,
    SessionRecordRead,
)
from liftengine.schemas.session import (
    PerformanceDefaults,
    SessionProgress,
    SessionSummary,
    SetCompletionResult,
    WorkoutCompletePreview,
)
from liftengine.schemas.targets import SetTarget, default_reps
from liftengine.services.base import BaseService
from liftengine.services.interfaces import PlanLoader, WorkoutStore
from liftengine.services.performance_recorder import PerformanceRecorder
from liftengine.services.rest_timer import RestTimer
from liftengine.services.session_pointer import SessionPlan, SessionPointer
from liftengine.services.session_rewards import CompletedSet, summarize_session
from liftengine.services.session_state import (
    SessionEvent,
    SessionPhase,
    SessionState,
    transition,
)


logger = get_logger(__name__)

_UNSET = object()


def validate_plan(plan: list[WorkoutPlanExercise]) -> None:
    """Raise PlanInvalidError unless every exercise has at least one set."""
    if not plan:
        raise PlanInvalidError("plan has no exercises")
    empty = [ex.id for ex in plan if not ex.sets]
    if empty:
        raise PlanInvalidError(
            "every exercise needs at least one set",
            {"field": "plan", "plan_exercise_ids": empty},
        )


class SessionController(BaseService):
    """Orchestrates pointer advancement, the rest timer and set recording.

    Callers issue one action at a time; an action started while a previous
    one is still saving is rejected with ``ActionInProgressError``. Actions
    after the session completed are ignored.
    """

    def __init__(
        self,
        store: WorkoutStore,
        plan_loader: PlanLoader | None = None,
        *,
        settings: Settings | None = None,
        rewards: RewardConfig | None = None,
        recorder: PerformanceRecorder | None = None,
        rest_tick_seconds: float | None | object = _UNSET,
        clock: Callable[[], datetime] = datetime.utcnow,
        user_id: int | None = None,
    ):
        super().__init__(store)
        self._plan_loader = plan_loader
        self._settings = settings or get_settings()
        self._rewards = rewards or get_progression_config().rewards
        self._recorder = recorder or PerformanceRecorder(store)
        self._clock = clock
        self._user_id = user_id

        tick = self._settings.rest_timer_tick_seconds if rest_tick_seconds is _UNSET else rest_tick_seconds
        self._rest_timer = RestTimer(on_complete=self._on_rest_complete, tick_seconds=tick)

        self._state = SessionState()
        self._plan: SessionPlan | None = None
        self._session: SessionRecordRead | None = None
        self._defaults: PerformanceDefaults | None = None
        self._completed_sets: list[CompletedSet] = []
        self._summary: SessionSummary | None = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def pointer(self) -> SessionPointer | None:
        return self._state.pointer

    @property
    def session_record(self) -> SessionRecordRead | None:
        return self._session

    @property
    def defaults(self) -> PerformanceDefaults | None:
        return self._defaults

    @property
    def rest_timer(self) -> RestTimer:
        return self._rest_timer

    @property
    def summary(self) -> SessionSummary | None:
        return self._summary

    @property
    def completed_sets(self) -> list[CompletedSet]:
        return list(self._completed_sets)

    @property
    def plan(self) -> SessionPlan | None:
        return self._plan

    def current_exercise(self) -> WorkoutPlanExercise | None:
        if self._plan is None or self._state.pointer is None:
            return None
        return self._plan.exercise_at(self._state.pointer)

    def current_target(self) -> SetTarget | None:
        if self._plan is None or self._state.pointer is None:
            return None
        return self._plan.target_at(self._state.pointer)

    def progress(self) -> SessionProgress:
        if self._plan is None:
            raise InvalidTransitionError(self._state.phase.value, "progress")
        return self._plan.progress(self._state.pointer)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(
        self,
        plan: list[WorkoutPlanExercise],
        name: str = "Workout",
        workout_day_id: int | None = None,
    ) -> SessionState:
        """Validate ``plan``, create the session record and point at the first set."""
        return await self._start(lambda: _resolved(plan), name, workout_day_id)

    async def start_for_day(self, workout_day_id: int, name: str = "Workout") -> SessionState:
        if self._plan_loader is None:
            raise InvalidTransitionError(self._state.phase.value, "start_for_day")
        loader = self._plan_loader
        return await self._start(
            lambda: self._call_store(
                "load_plan", loader.load_plan(workout_day_id), workout_day_id=workout_day_id
            ),
            name,
            workout_day_id,
        )

    async def _start(
        self,
        load: Callable[[], Awaitable[list[WorkoutPlanExercise]]],
        name: str,
        workout_day_id: int | None,
    ) -> SessionState:
        self._state = transition(self._state, SessionEvent.START_REQUESTED)
        try:
            plan = await load()
            validate_plan(plan)
            record = await self._call_store(
                "create_session_record",
                self._store.create_session_record(
                    SessionRecordCreate(
                        name=name,
                        workout_day_id=workout_day_id,
                        user_id=self._user_id,
                        started_at=self._clock(),
                    )
                ),
                workout_day_id=workout_day_id,
            )
        except BaseException as e:
            self._state = transition(self._state, SessionEvent.LOAD_FAILED)
            logger.warning("session_start_failed", error=str(e), workout_day_id=workout_day_id)
            raise

        self._session = record
        self._plan = SessionPlan(plan)
        pointer = self._plan.first()
        self._state = transition(self._state, SessionEvent.STARTED, pointer=pointer)
        self._seed_defaults()

        add_log_context(session_id=record.id)
        logger.info(
            "session_started",
            session_id=record.id,
            exercises=self._plan.exercise_count,
            total_sets=self._plan.total_sets,
        )
        return self._state

    async def complete_current_set(self, performance: PerformanceInput) -> SetCompletionResult | None:
        """Persist the current set and move into the rest period.

        On ``PersistenceError`` the pointer stays on the same set so the call
        can be retried.
        """
        try:
            submitted = transition(self._state, SessionEvent.SET_SUBMITTED)
        except SessionAlreadyFinishedError:
            logger.info("action_ignored_session_finished", action="complete_current_set")
            return None

        pointer = submitted.pointer
        exercise = self._plan.exercise_at(pointer)
        target = self._plan.target_at(pointer)
        self._state = submitted

        try:
            record = await self._recorder.record_set(
                self._session.id, exercise, pointer.set_index, performance
            )
        except BaseException:
            self._state = transition(self._state, SessionEvent.SET_FAILED)
            logger.warning(
                "set_completion_failed",
                exercise_index=pointer.exercise_index,
                set_index=pointer.set_index,
            )
            raise

        self._completed_sets.append(CompletedSet(record=record, target=target))
        preview = self._plan.preview_next(pointer)
        self._state = transition(self._state, SessionEvent.SET_RECORDED, preview=preview)

        result = SetCompletionResult(record=record, preview=preview, rest_seconds=exercise.rest_seconds)
        if isinstance(preview, WorkoutCompletePreview):
            self._advance()
        else:
            self._rest_timer.start(exercise.rest_seconds)
        return result

    def advance_past_rest(self) -> SessionState:
        """End the rest period now, whether or not the countdown finished."""
        try:
            transition(self._state, SessionEvent.REST_ENDED)
        except SessionAlreadyFinishedError:
            logger.info("action_ignored_session_finished", action="advance_past_rest")
            return self._state
        # Skipping fires the same completion event the countdown would.
        if not self._rest_timer.skip():
            self._advance()
        return self._state

    def skip_exercise(self) -> SessionState:
        """Jump to the next exercise without recording the rest of this one."""
        try:
            transition(self._state, SessionEvent.EXERCISE_SKIPPED)
        except SessionAlreadyFinishedError:
            logger.info("action_ignored_session_finished", action="skip_exercise")
            return self._state

        self._rest_timer.stop()
        skipped = self._state.pointer
        upcoming = self._plan.skip_exercise(skipped)
        if upcoming is None:
            self._state = transition(
                self._state, SessionEvent.PLAN_EXHAUSTED, pointer=None, preview=None
            )
            self._defaults = None
        else:
            self._state = transition(
                self._state, SessionEvent.EXERCISE_SKIPPED, pointer=upcoming, preview=None
            )
            self._seed_defaults()

        logger.info(
            "exercise_skipped",
            exercise_index=skipped.exercise_index,
            phase=self._state.phase.value,
        )
        return self._state

    async def finish(self) -> SessionSummary:
        """Persist completion once. Repeated calls return the stored summary."""
        try:
            completing = transition(self._state, SessionEvent.FINISH_REQUESTED)
        except SessionAlreadyFinishedError:
            logger.info("action_ignored_session_finished", action="finish")
            return self._summary

        self._state = completing
        resting = self._rest_timer.is_running
        self._rest_timer.pause()

        summary = summarize_session(
            self._session.id,
            self._session.started_at,
            self._clock(),
            self._completed_sets,
            self._rewards,
        )
        try:
            await self._call_store(
                "complete_session_record",
                self._store.complete_session_record(
                    self._session.id,
                    SessionCompletion(
                        completed_at=summary.completed_at,
                        duration_seconds=summary.duration_seconds,
                        total_sets=summary.total_sets,
                        total_reps=summary.total_reps,
                        total_volume=summary.total_volume,
                        personal_records_count=summary.personal_records_count,
                        xp_earned=summary.xp.total,
                    ),
                ),
                session_id=self._session.id,
            )
        except BaseException:
            self._state = transition(self._state, SessionEvent.FINISH_FAILED)
            if resting:
                self._rest_timer.resume()
            raise

        self._summary = summary
        self._state = transition(self._state, SessionEvent.FINISH_PERSISTED, pointer=None, preview=None)
        self._defaults = None
        self._rest_timer.close()

        logger.info(
            "session_completed",
            session_id=summary.session_id,
            duration_seconds=summary.duration_seconds,
            total_sets=summary.total_sets,
            xp_earned=summary.xp.total,
        )
        clear_log_context()
        return summary

    def close(self) -> None:
        """Release the rest timer. Safe to call in any phase, including abandon."""
        self._rest_timer.close()
        if self._state.phase is not SessionPhase.COMPLETED:
            logger.info("session_closed", phase=self._state.phase.value)
        clear_log_context()

    async def aclose(self) -> None:
        await self._rest_timer.aclose()
        self.close()

    # ------------------------------------------------------------------
    # Rest timer controls
    # ------------------------------------------------------------------

    def pause_rest(self) -> None:
        self._rest_timer.pause()

    def resume_rest(self) -> None:
        self._rest_timer.resume()

    def adjust_rest(self, delta: int) -> None:
        self._rest_timer.adjust(delta)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _on_rest_complete(self) -> None:
        if self._state.phase is not SessionPhase.REST_PENDING:
            logger.warning("rest_completion_ignored", phase=self._state.phase.value)
            return
        self._advance()

    def _advance(self) -> None:
        upcoming = self._plan.advance(self._state.pointer)
        if upcoming is None:
            self._state = transition(
                self._state, SessionEvent.PLAN_EXHAUSTED, pointer=None, preview=None
            )
            self._defaults = None
            logger.info("plan_exhausted")
            return

        self._state = transition(self._state, SessionEvent.REST_ENDED, pointer=upcoming, preview=None)
        self._seed_defaults()

    def _seed_defaults(self) -> None:
        target = self._plan.target_at(self._state.pointer)
        self._defaults = PerformanceDefaults(
            weight=target.target_weight,
            reps=default_reps(target.target_reps),
            rpe=self._settings.default_rpe,
        )


async def _resolved(plan: list[WorkoutPlanExercise]) -> list[WorkoutPlanExercise]:
    return plan
