"""Session phases and the transition function that moves between them."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from liftengine.core.exceptions import (
    ActionInProgressError,
    InvalidTransitionError,
    SessionAlreadyFinishedError,
)
from liftengine.schemas.session import NextSetPreview, WorkoutCompletePreview
from liftengine.services.session_pointer import SessionPointer


class SessionPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
    RECORDING = "recording"
    REST_PENDING = "rest_pending"
    FINISHING = "finishing"
    COMPLETING = "completing"
    COMPLETED = "completed"
    ERROR = "error"


class SessionEvent(str, Enum):
    START_REQUESTED = "start_requested"
    STARTED = "started"
    LOAD_FAILED = "load_failed"
    SET_SUBMITTED = "set_submitted"
    SET_RECORDED = "set_recorded"
    SET_FAILED = "set_failed"
    REST_ENDED = "rest_ended"
    EXERCISE_SKIPPED = "exercise_skipped"
    PLAN_EXHAUSTED = "plan_exhausted"
    FINISH_REQUESTED = "finish_requested"
    FINISH_PERSISTED = "finish_persisted"
    FINISH_FAILED = "finish_failed"


# Phases with a persistence call outstanding
BUSY_PHASES = frozenset({SessionPhase.LOADING, SessionPhase.RECORDING, SessionPhase.COMPLETING})

TRANSITIONS: dict[tuple[SessionPhase, SessionEvent], SessionPhase] = {
    (SessionPhase.IDLE, SessionEvent.START_REQUESTED): SessionPhase.LOADING,
    (SessionPhase.LOADING, SessionEvent.STARTED): SessionPhase.ACTIVE,
    (SessionPhase.LOADING, SessionEvent.LOAD_FAILED): SessionPhase.ERROR,
    (SessionPhase.ERROR, SessionEvent.START_REQUESTED): SessionPhase.LOADING,
    (SessionPhase.ACTIVE, SessionEvent.SET_SUBMITTED): SessionPhase.RECORDING,
    (SessionPhase.ACTIVE, SessionEvent.EXERCISE_SKIPPED): SessionPhase.ACTIVE,
    (SessionPhase.ACTIVE, SessionEvent.PLAN_EXHAUSTED): SessionPhase.FINISHING,
    (SessionPhase.ACTIVE, SessionEvent.FINISH_REQUESTED): SessionPhase.COMPLETING,
    (SessionPhase.RECORDING, SessionEvent.SET_RECORDED): SessionPhase.REST_PENDING,
    (SessionPhase.RECORDING, SessionEvent.SET_FAILED): SessionPhase.ACTIVE,
    (SessionPhase.REST_PENDING, SessionEvent.REST_ENDED): SessionPhase.ACTIVE,
    (SessionPhase.REST_PENDING, SessionEvent.EXERCISE_SKIPPED): SessionPhase.ACTIVE,
    (SessionPhase.REST_PENDING, SessionEvent.PLAN_EXHAUSTED): SessionPhase.FINISHING,
    (SessionPhase.REST_PENDING, SessionEvent.FINISH_REQUESTED): SessionPhase.COMPLETING,
    (SessionPhase.FINISHING, SessionEvent.FINISH_REQUESTED): SessionPhase.COMPLETING,
    (SessionPhase.COMPLETING, SessionEvent.FINISH_PERSISTED): SessionPhase.COMPLETED,
}


@dataclass(frozen=True)
class SessionState:
    """Snapshot of a session's control state.

    ``pointer`` is None outside ACTIVE/RECORDING/REST_PENDING and after the
    plan has been walked to the end. ``resume_phase`` remembers where a
    failed finish returns to.
    """

    phase: SessionPhase = SessionPhase.IDLE
    pointer: SessionPointer | None = None
    preview: NextSetPreview | WorkoutCompletePreview | None = None
    resume_phase: SessionPhase | None = None


def transition(state: SessionState, event: SessionEvent, **changes) -> SessionState:
    """Return the state after ``event``, or raise if the event is illegal now."""
    if state.phase is SessionPhase.COMPLETED:
        raise SessionAlreadyFinishedError(event.value)

    if event is SessionEvent.FINISH_FAILED and state.phase is SessionPhase.COMPLETING:
        return replace(state, phase=state.resume_phase, resume_phase=None, **changes)

    target = TRANSITIONS.get((state.phase, event))
    if target is None:
        if state.phase in BUSY_PHASES:
            raise ActionInProgressError(state.phase.value, event.value)
        raise InvalidTransitionError(state.phase.value, event.value)

    if target is SessionPhase.COMPLETING:
        changes.setdefault("resume_phase", state.phase)
    return replace(state, phase=target, **changes)
