"""Progression analysis inputs and results."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from liftengine.models.enums import ChangeMethod, ProgressionType


class ProgressionSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    consecutive_successes_required: int = Field(default=2, ge=1)
    reps_tolerance: int = Field(default=0, ge=0)
    regression_failures_required: int = Field(default=2, ge=1)
    history_window: int = Field(default=4, ge=2)


class CurrentTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    weight: float
    reps: int
    sets: int


class ProgressionHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: int
    date: datetime
    target_reps: int
    actual_reps: int
    weight: float
    success: bool


class WeightOption(BaseModel):
    increment: float
    label: str
    new_weight: float


class RepOption(BaseModel):
    increment: int
    new_reps: int


class VolumeOption(BaseModel):
    increment: int
    new_sets: int


class SuggestedChange(BaseModel):
    method: ChangeMethod
    value: float
    reasoning: str


class ProgressionRecommendation(BaseModel):
    weight_options: list[WeightOption] = Field(default_factory=list)
    rep_options: list[RepOption] = Field(default_factory=list)
    volume_options: list[VolumeOption] = Field(default_factory=list)
    suggested: SuggestedChange | None = None


class ProgressionAnalysis(BaseModel):
    type: ProgressionType
    current: CurrentTarget
    history: list[ProgressionHistoryEntry]
    consecutive_successes: int
    consecutive_failures: int
    trigger_reason: str
    recommendation: ProgressionRecommendation | None = None

    exercise_id: int | None = None
    exercise_name: str | None = None
    plan_exercise_id: int | None = None

    @property
    def is_actionable(self) -> bool:
        return self.type is not ProgressionType.NONE


class ProgressionChange(BaseModel):
    """The option the user confirmed."""

    method: ChangeMethod
    delta: float = 0
