"""Tests for domain exception classes and their error codes."""
import pytest

from liftengine.core.exceptions import (
    ActionInProgressError,
    BusinessRuleError,
    ConflictError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    PlanInvalidError,
    SessionAlreadyFinishedError,
    ValidationError,
)


class TestDomainErrorExceptions:
    """Base hierarchy."""

    def test_domain_error_base(self):
        """Test base DomainError class."""
        error = DomainError(code="TEST_001", message="Test error message", details={"key": "value"})

        assert error.code == "TEST_001"
        assert error.message == "Test error message"
        assert error.details == {"key": "value"}
        assert str(error) == "Test error message"

    def test_not_found_error_default_message(self):
        """Test NotFoundError generates default message when none provided."""
        error = NotFoundError("plan_exercise")

        assert error.code == "NF_PLAN_EXERCISE_001"
        assert error.message == "plan_exercise not found"
        assert error.details == {}

    def test_validation_error(self):
        """Test ValidationError generates correct error code."""
        error = ValidationError("weight", "must be positive")

        assert error.code == "VAL_WEIGHT_001"
        assert error.message == "Validation failed for weight: must be positive"
        assert error.details == {"field": "weight"}

    def test_business_rule_error_default(self):
        error = BusinessRuleError("Cannot finish twice")

        assert error.code == "BR_001"
        assert error.details == {}

    def test_conflict_error_custom(self):
        error = ConflictError("Already saving", code="CF_X", details={"a": 1})

        assert error.code == "CF_X"
        assert error.details == {"a": 1}


class TestSessionErrors:
    """Errors raised by the session and persistence layers."""

    def test_plan_invalid(self):
        error = PlanInvalidError("plan has no exercises")

        assert isinstance(error, ValidationError)
        assert error.code == "VAL_PLAN_001"
        assert error.details == {"field": "plan"}

    def test_persistence_error_carries_operation(self):
        error = PersistenceError("create_set_record", "write failed", {"session_id": 4})

        assert error.code == "PERSIST_001"
        assert error.operation == "create_set_record"
        assert error.details == {"operation": "create_set_record", "session_id": 4}

    def test_invalid_transition(self):
        error = InvalidTransitionError("active", "rest_ended")

        assert isinstance(error, BusinessRuleError)
        assert error.code == "BR_SESSION_001"
        assert error.details == {"phase": "active", "event": "rest_ended"}
        assert "rest_ended" in error.message

    def test_session_already_finished(self):
        error = SessionAlreadyFinishedError("finish_requested")

        assert isinstance(error, InvalidTransitionError)
        assert error.code == "BR_SESSION_002"
        assert error.phase == "completed"

    def test_action_in_progress(self):
        error = ActionInProgressError("recording", "set_submitted")

        assert isinstance(error, ConflictError)
        assert error.code == "CF_SESSION_001"

    @pytest.mark.parametrize(
        "error",
        [
            PlanInvalidError("x"),
            PersistenceError("op", "x"),
            InvalidTransitionError("idle", "e"),
            ActionInProgressError("recording", "e"),
        ],
    )
    def test_all_are_domain_errors(self, error):
        assert isinstance(error, DomainError)
