"""Exercise reference data and the per-day exercise prescriptions."""
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from liftengine.db.database import Base


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    tracks_weight = Column(Boolean, nullable=False, default=True)
    tracks_reps = Column(Boolean, nullable=False, default=True)
    tracks_time = Column(Boolean, nullable=False, default=False)
    tracks_distance = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    prescriptions = relationship("WorkoutDayExercise", back_populates="exercise")


class WorkoutDayExercise(Base):
    """An exercise prescribed on a workout day with its ordered set targets.

    ``sets`` holds the serialized ``SetTarget`` list. Progression changes
    replace the whole list between sessions.
    """

    __tablename__ = "workout_day_exercises"

    id = Column(Integer, primary_key=True, index=True)
    workout_day_id = Column(Integer, nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False)
    exercise_order = Column(Integer, nullable=False, default=0)
    sets = Column(JSON, nullable=False, default=list)
    rest_time = Column(Integer, nullable=False, default=90)
    notes = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    exercise = relationship("Exercise", back_populates="prescriptions", lazy="joined")
