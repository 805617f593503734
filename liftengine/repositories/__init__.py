"""Repositories package."""
from liftengine.repositories.base import Repository
from liftengine.repositories.exercise_log_repository import ExerciseLogRepository
from liftengine.repositories.plan_repository import PlanRepository
from liftengine.repositories.set_log_repository import SetLogRepository
from liftengine.repositories.user_repository import UserRepository
from liftengine.repositories.workout_log_repository import WorkoutLogRepository

__all__ = [
    "Repository",
    "ExerciseLogRepository",
    "PlanRepository",
    "SetLogRepository",
    "UserRepository",
    "WorkoutLogRepository",
]
