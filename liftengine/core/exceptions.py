class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class ConflictError(DomainError):
    def __init__(self, message: str, code: str = "CF_001", details: dict | None = None):
        super().__init__(code, message, details)


class PlanInvalidError(ValidationError):
    """Workout plan is empty or contains an exercise without sets."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("plan", message, details)


class PersistenceError(DomainError):
    """A read or write against the workout store failed.

    Recoverable: the caller's state is left unchanged and the same action may
    be retried.
    """

    def __init__(self, operation: str, message: str, details: dict | None = None):
        self.operation = operation
        super().__init__("PERSIST_001", message, {"operation": operation, **(details or {})})


class InvalidTransitionError(BusinessRuleError):
    def __init__(self, phase: str, event: str, code: str = "BR_SESSION_001"):
        self.phase = phase
        self.event = event
        super().__init__(
            f"Cannot apply '{event}' while session is {phase}",
            code,
            {"phase": phase, "event": event},
        )


class SessionAlreadyFinishedError(InvalidTransitionError):
    def __init__(self, event: str):
        super().__init__("completed", event, code="BR_SESSION_002")


class ActionInProgressError(ConflictError):
    def __init__(self, phase: str, event: str):
        super().__init__(
            f"Cannot apply '{event}' while a previous action is still saving",
            "CF_SESSION_001",
            {"phase": phase, "event": event},
        )
