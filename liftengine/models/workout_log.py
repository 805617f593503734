"""Persisted session records: workout log, per-exercise log, and sets."""
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from liftengine.db.database import Base
from liftengine.models.enums import SessionStatus


class WorkoutLog(Base):
    __tablename__ = "workout_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    workout_day_id = Column(Integer, nullable=True, index=True)
    name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default=SessionStatus.IN_PROGRESS.value, index=True)
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True, index=True)
    duration_seconds = Column(Integer, nullable=True)
    total_sets = Column(Integer, nullable=False, default=0)
    total_reps = Column(Integer, nullable=False, default=0)
    total_volume = Column(Float, nullable=True)
    personal_records_count = Column(Integer, nullable=False, default=0)
    xp_earned = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)

    exercise_logs = relationship(
        "ExerciseLog",
        back_populates="workout_log",
        cascade="all, delete-orphan",
        order_by="ExerciseLog.exercise_order",
    )


class ExerciseLog(Base):
    __tablename__ = "exercise_logs"

    id = Column(Integer, primary_key=True, index=True)
    workout_log_id = Column(Integer, ForeignKey("workout_logs.id", ondelete="CASCADE"), nullable=False)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_order = Column(Integer, nullable=False, default=0)
    exercise_name = Column(String(200), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    workout_log = relationship("WorkoutLog", back_populates="exercise_logs")
    sets = relationship(
        "SetLog",
        back_populates="exercise_log",
        cascade="all, delete-orphan",
        order_by="SetLog.set_number",
    )

    __table_args__ = (
        UniqueConstraint("workout_log_id", "exercise_id", name="uq_workout_log_exercise"),
    )


class SetLog(Base):
    __tablename__ = "sets"

    id = Column(Integer, primary_key=True, index=True)
    exercise_log_id = Column(Integer, ForeignKey("exercise_logs.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, nullable=False, index=True)
    set_number = Column(Integer, nullable=False)
    set_type = Column(String(20), nullable=False)
    weight = Column(Float, nullable=True)
    reps = Column(Integer, nullable=True)
    time_seconds = Column(Integer, nullable=True)
    distance = Column(Float, nullable=True)
    rpe = Column(Float, nullable=True)
    completed = Column(Boolean, nullable=False, default=True)
    is_personal_record = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    exercise_log = relationship("ExerciseLog", back_populates="sets")

    __table_args__ = (
        CheckConstraint("rpe IS NULL OR (rpe >= 0 AND rpe <= 10)", name="ck_sets_rpe_range"),
    )
