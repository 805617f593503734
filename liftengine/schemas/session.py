"""Session-facing views: defaults, previews, progress and summaries."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from liftengine.models.enums import SetStatus, SetType
from liftengine.schemas.records import SetRecordRead
from liftengine.schemas.targets import RepsTarget


class PerformanceDefaults(BaseModel):
    """Values pre-filled in the log form for the current set."""

    model_config = ConfigDict(frozen=True)

    weight: float
    reps: int
    rpe: float


class NextSetPreview(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["next_set"] = "next_set"
    exercise_name: str
    exercise_index: int
    set_index: int
    set_number: int
    total_sets: int
    set_type: SetType
    target_weight: float
    target_reps: RepsTarget
    target_reps_display: str


class WorkoutCompletePreview(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["workout_complete"] = "workout_complete"


class SetProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    global_index: int
    exercise_index: int
    set_index: int
    status: SetStatus


class SessionProgress(BaseModel):
    global_set_index: int
    total_sets: int
    sets: list[SetProgress]


class SetCompletionResult(BaseModel):
    record: SetRecordRead
    preview: NextSetPreview | WorkoutCompletePreview = Field(discriminator="kind")
    rest_seconds: int


class XPBreakdown(BaseModel):
    base: int = 0
    set_completion: int = 0
    effort_multiplier: float = 1.0
    effort_bonus: int = 0
    adjusted_set_xp: int = 0
    perfect_workout_bonus: int = 0
    pr_bonus: int = 0
    total: int = 0


class SessionSummary(BaseModel):
    session_id: int
    completed_at: datetime
    duration_seconds: int
    total_sets: int
    total_reps: int
    total_volume: float
    personal_records_count: int
    xp: XPBreakdown
