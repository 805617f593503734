"""Tests for the session phase transition table."""
import pytest

from liftengine.core.exceptions import (
    ActionInProgressError,
    InvalidTransitionError,
    SessionAlreadyFinishedError,
)
from liftengine.services.session_pointer import SessionPointer
from liftengine.services.session_state import (
    SessionEvent,
    SessionPhase,
    SessionState,
    transition,
)


def at(phase: SessionPhase, **kwargs) -> SessionState:
    return SessionState(phase=phase, **kwargs)


class TestLegalTransitions:
    def test_start_sequence(self):
        state = transition(SessionState(), SessionEvent.START_REQUESTED)
        assert state.phase is SessionPhase.LOADING

        state = transition(state, SessionEvent.STARTED, pointer=SessionPointer(0, 0))
        assert state.phase is SessionPhase.ACTIVE
        assert state.pointer == SessionPointer(0, 0)

    def test_load_failure_goes_to_error(self):
        assert transition(at(SessionPhase.LOADING), SessionEvent.LOAD_FAILED).phase is SessionPhase.ERROR

    def test_start_can_be_retried_after_error(self):
        assert transition(at(SessionPhase.ERROR), SessionEvent.START_REQUESTED).phase is SessionPhase.LOADING

    def test_error_only_leaves_through_start(self):
        with pytest.raises(InvalidTransitionError):
            transition(at(SessionPhase.ERROR), SessionEvent.SET_SUBMITTED)

    def test_set_failure_returns_to_active(self):
        pointer = SessionPointer(1, 2)
        state = transition(at(SessionPhase.ACTIVE, pointer=pointer), SessionEvent.SET_SUBMITTED)
        state = transition(state, SessionEvent.SET_FAILED)

        assert state.phase is SessionPhase.ACTIVE
        assert state.pointer == pointer

    def test_finish_failure_restores_previous_phase(self):
        state = transition(at(SessionPhase.REST_PENDING), SessionEvent.FINISH_REQUESTED)
        assert state.phase is SessionPhase.COMPLETING
        assert state.resume_phase is SessionPhase.REST_PENDING

        state = transition(state, SessionEvent.FINISH_FAILED)
        assert state.phase is SessionPhase.REST_PENDING
        assert state.resume_phase is None

    def test_finishing_then_completed(self):
        state = transition(at(SessionPhase.FINISHING), SessionEvent.FINISH_REQUESTED)
        state = transition(state, SessionEvent.FINISH_PERSISTED)

        assert state.phase is SessionPhase.COMPLETED

    def test_transition_returns_new_state(self):
        original = at(SessionPhase.ACTIVE)
        transition(original, SessionEvent.SET_SUBMITTED)

        assert original.phase is SessionPhase.ACTIVE


class TestIllegalTransitions:
    def test_second_action_while_recording(self):
        with pytest.raises(ActionInProgressError) as exc_info:
            transition(at(SessionPhase.RECORDING), SessionEvent.SET_SUBMITTED)

        assert exc_info.value.code == "CF_SESSION_001"

    def test_action_while_completing(self):
        with pytest.raises(ActionInProgressError):
            transition(at(SessionPhase.COMPLETING), SessionEvent.EXERCISE_SKIPPED)

    def test_rest_end_while_active(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            transition(at(SessionPhase.ACTIVE), SessionEvent.REST_ENDED)

        assert exc_info.value.code == "BR_SESSION_001"
        assert exc_info.value.details == {"phase": "active", "event": "rest_ended"}

    def test_start_twice(self):
        with pytest.raises(InvalidTransitionError):
            transition(at(SessionPhase.ACTIVE), SessionEvent.START_REQUESTED)

    @pytest.mark.parametrize("event", list(SessionEvent))
    def test_any_event_after_completion(self, event):
        with pytest.raises(SessionAlreadyFinishedError) as exc_info:
            transition(at(SessionPhase.COMPLETED), event)

        assert exc_info.value.code == "BR_SESSION_002"
