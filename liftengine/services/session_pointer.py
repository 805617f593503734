"""Position tracking within an ordered exercise → set plan."""
from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate

from liftengine.models.enums import SetStatus
from liftengine.schemas.plan import WorkoutPlanExercise
from liftengine.schemas.session import (
    NextSetPreview,
    SessionProgress,
    SetProgress,
    WorkoutCompletePreview,
)
from liftengine.schemas.targets import describe_reps


@dataclass(frozen=True)
class SessionPointer:
    exercise_index: int
    set_index: int


class SessionPlan:
    """Read-only view of a workout plan with pointer arithmetic.

    Pointers handed out by this class always satisfy
    ``0 <= exercise_index < exercise_count`` and
    ``0 <= set_index < set_counts[exercise_index]``.
    """

    def __init__(self, exercises: list[WorkoutPlanExercise]):
        self._exercises = list(exercises)
        self._set_counts = [len(ex.sets) for ex in self._exercises]
        # offsets[i] = number of sets before exercise i
        self._offsets = [0, *accumulate(self._set_counts)]

    @property
    def exercises(self) -> list[WorkoutPlanExercise]:
        return list(self._exercises)

    @property
    def exercise_count(self) -> int:
        return len(self._exercises)

    @property
    def set_counts(self) -> list[int]:
        return list(self._set_counts)

    @property
    def total_sets(self) -> int:
        return self._offsets[-1]

    def first(self) -> SessionPointer:
        return self.validate(SessionPointer(0, 0))

    def validate(self, pointer: SessionPointer) -> SessionPointer:
        if not 0 <= pointer.exercise_index < self.exercise_count:
            raise IndexError(f"exercise_index {pointer.exercise_index} out of range")
        if not 0 <= pointer.set_index < self._set_counts[pointer.exercise_index]:
            raise IndexError(
                f"set_index {pointer.set_index} out of range for exercise {pointer.exercise_index}"
            )
        return pointer

    def exercise_at(self, pointer: SessionPointer) -> WorkoutPlanExercise:
        return self._exercises[pointer.exercise_index]

    def target_at(self, pointer: SessionPointer):
        return self._exercises[pointer.exercise_index].sets[pointer.set_index]

    def advance(self, pointer: SessionPointer) -> SessionPointer | None:
        """Next set in this exercise, else first set of the next; None at the end."""
        if pointer.set_index + 1 < self._set_counts[pointer.exercise_index]:
            return SessionPointer(pointer.exercise_index, pointer.set_index + 1)
        return self.skip_exercise(pointer)

    def skip_exercise(self, pointer: SessionPointer) -> SessionPointer | None:
        if pointer.exercise_index + 1 < self.exercise_count:
            return SessionPointer(pointer.exercise_index + 1, 0)
        return None

    def global_set_index(self, pointer: SessionPointer) -> int:
        return self._offsets[pointer.exercise_index] + pointer.set_index

    def preview_next(self, pointer: SessionPointer) -> NextSetPreview | WorkoutCompletePreview:
        """Describe the set after ``pointer`` without moving it."""
        upcoming = self.advance(pointer)
        if upcoming is None:
            return WorkoutCompletePreview()

        exercise = self.exercise_at(upcoming)
        target = self.target_at(upcoming)
        return NextSetPreview(
            exercise_name=exercise.exercise.name,
            exercise_index=upcoming.exercise_index,
            set_index=upcoming.set_index,
            set_number=upcoming.set_index + 1,
            total_sets=len(exercise.sets),
            set_type=target.type,
            target_weight=target.target_weight,
            target_reps=target.target_reps,
            target_reps_display=describe_reps(target.target_reps),
        )

    def progress(self, pointer: SessionPointer | None) -> SessionProgress:
        """Classify every set as completed, current or pending.

        A ``None`` pointer means the plan has been walked to the end.
        """
        current = self.total_sets if pointer is None else self.global_set_index(pointer)
        sets: list[SetProgress] = []
        for ex_idx, count in enumerate(self._set_counts):
            for set_idx in range(count):
                index = self._offsets[ex_idx] + set_idx
                if index < current:
                    status = SetStatus.COMPLETED
                elif index == current:
                    status = SetStatus.CURRENT
                else:
                    status = SetStatus.PENDING
                sets.append(
                    SetProgress(
                        global_index=index,
                        exercise_index=ex_idx,
                        set_index=set_idx,
                        status=status,
                    )
                )
        return SessionProgress(global_set_index=current, total_sets=self.total_sets, sets=sets)
