"""SQLAlchemy models."""
from liftengine.models.exercise import Exercise, WorkoutDayExercise
from liftengine.models.user import User
from liftengine.models.workout_log import ExerciseLog, SetLog, WorkoutLog

__all__ = [
    "Exercise",
    "WorkoutDayExercise",
    "User",
    "WorkoutLog",
    "ExerciseLog",
    "SetLog",
]
