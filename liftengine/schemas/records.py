"""Schemas exchanged with the workout store."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from liftengine.models.enums import SessionStatus, SetType


class PerformanceInput(BaseModel):
    """What the user logged for a single set."""

    weight: float = Field(default=0, ge=0)
    reps: int = Field(default=0, ge=0)
    rpe: float | None = Field(default=None, ge=0, le=10)
    time_seconds: int | None = Field(default=None, ge=0)
    distance: float | None = Field(default=None, ge=0)
    notes: str | None = None


class SessionRecordCreate(BaseModel):
    name: str
    workout_day_id: int | None = None
    user_id: int | None = None
    started_at: datetime = Field(default_factory=datetime.utcnow)


class SessionRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    workout_day_id: int | None = None
    user_id: int | None = None
    status: SessionStatus = SessionStatus.IN_PROGRESS
    started_at: datetime
    completed_at: datetime | None = None
    duration_seconds: int | None = None
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float | None = None
    personal_records_count: int = 0
    xp_earned: int = 0


class SessionCompletion(BaseModel):
    """Terminal write for a session record."""

    completed_at: datetime
    duration_seconds: int = Field(ge=0)
    total_sets: int = Field(ge=0)
    total_reps: int = Field(ge=0)
    total_volume: float = Field(ge=0)
    personal_records_count: int = Field(ge=0)
    xp_earned: int = Field(ge=0)


class ExerciseLogCreate(BaseModel):
    workout_log_id: int
    exercise_id: int
    exercise_order: int
    exercise_name: str


class ExerciseLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    workout_log_id: int
    exercise_id: int
    exercise_order: int
    exercise_name: str


class SetRecordCreate(BaseModel):
    exercise_log_id: int
    exercise_id: int
    set_number: int = Field(ge=1)
    set_type: SetType
    weight: float | None = None
    reps: int | None = None
    rpe: float | None = None
    time_seconds: int | None = None
    distance: float | None = None
    notes: str | None = None
    completed: bool = True


class SetRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    exercise_log_id: int
    exercise_id: int
    set_number: int
    set_type: SetType
    weight: float | None = None
    reps: int | None = None
    rpe: float | None = None
    time_seconds: int | None = None
    distance: float | None = None
    completed: bool = True
    is_personal_record: bool = False


class PerformedSet(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    set_number: int
    set_type: SetType
    weight: float | None = None
    reps: int | None = None


class RecentPerformance(BaseModel):
    """One past completed session's sets for a single exercise."""

    session_id: int
    date: datetime
    sets: list[PerformedSet] = Field(default_factory=list)
