from pydantic import BaseModel, ConfigDict, Field

from liftengine.schemas.targets import SetTarget


class ExerciseDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    tracks_weight: bool = True
    tracks_reps: bool = True
    tracks_time: bool = False
    tracks_distance: bool = False


class WorkoutPlanExercise(BaseModel):
    """An exercise as prescribed for one workout day."""

    model_config = ConfigDict(frozen=True)

    id: int
    exercise: ExerciseDefinition
    exercise_order: int = 0
    sets: list[SetTarget] = Field(default_factory=list)
    rest_seconds: int = Field(default=90, ge=0)
    notes: str | None = None

    @property
    def exercise_id(self) -> int:
        return self.exercise.id

    @property
    def working_sets(self) -> list[SetTarget]:
        return [s for s in self.sets if s.is_working]
