"""Enumerations shared by models and schemas."""
from enum import Enum


class SetType(str, Enum):
    WARMUP = "warmup"
    WORKING = "working"
    DROPSET = "dropset"


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProgressionType(str, Enum):
    PROGRESSION = "progression"
    REGRESSION = "regression"
    STAGNATION = "stagnation"
    NONE = "none"


class ChangeMethod(str, Enum):
    WEIGHT = "weight"
    REPS = "reps"
    VOLUME = "volume"
    KEEP_CURRENT = "keep_current"


class SetStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"
