"""Set targets and the tagged rep-target variant.

A rep target is exactly one of ``ExactReps``, ``RepRange`` or ``ToFailure``.
Code that reads or rewrites reps matches on the variant and ends with
``assert_never`` so a new shape cannot be skipped silently.
"""
from typing import Annotated, Literal, Union, assert_never

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from liftengine.core.rounding import round_half_up
from liftengine.models.enums import SetType


class ExactReps(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["exact"] = "exact"
    value: int = Field(ge=0)


class RepRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["range"] = "range"
    min: int = Field(ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "RepRange":
        if self.min > self.max:
            raise ValueError(f"range min ({self.min}) must be <= max ({self.max})")
        return self


class ToFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"


RepsTarget = Annotated[Union[ExactReps, RepRange, ToFailure], Field(discriminator="kind")]


class SetTarget(BaseModel):
    """Prescribed load and reps for one set. Immutable during a session."""

    model_config = ConfigDict(frozen=True)

    type: SetType
    target_weight: float = Field(ge=0)
    target_reps: RepsTarget

    @model_validator(mode="after")
    def check_reps_shape(self) -> "SetTarget":
        if self.type is not SetType.WORKING and not isinstance(self.target_reps, ExactReps):
            raise ValueError(f"{self.type.value} sets require an exact rep target")
        return self

    @property
    def is_working(self) -> bool:
        return self.type is SetType.WORKING


SET_TARGET_LIST = TypeAdapter(list[SetTarget])


def parse_set_targets(raw: list[dict]) -> list[SetTarget]:
    return SET_TARGET_LIST.validate_python(raw)


def dump_set_targets(sets: list[SetTarget]) -> list[dict]:
    return SET_TARGET_LIST.dump_python(sets, mode="json")


def default_reps(target: RepsTarget) -> int:
    """Reps pre-filled in the log form for ``target``."""
    match target:
        case ExactReps(value=value):
            return value
        case RepRange(min=low):
            return low
        case ToFailure():
            return 0
        case _:
            assert_never(target)


def reference_reps(target: RepsTarget, failure_fallback: int) -> int:
    """Reps a set is judged against when analysing progression."""
    match target:
        case ExactReps(value=value):
            return value
        case RepRange(max=high):
            return high
        case ToFailure():
            return failure_fallback
        case _:
            assert_never(target)


def scoring_reps(target: RepsTarget, performed_reps: int) -> int:
    """Reps a completed set is scored against for XP.

    Ranges score against their midpoint; to-failure sets score against what
    was performed, so any effort earns full credit.
    """
    match target:
        case ExactReps(value=value):
            return value
        case RepRange(min=low, max=high):
            return round_half_up((low + high) / 2)
        case ToFailure():
            return performed_reps
        case _:
            assert_never(target)


def describe_reps(target: RepsTarget) -> str:
    match target:
        case ExactReps(value=value):
            return f"{value} reps"
        case RepRange(min=low, max=high):
            return f"{low}-{high} reps"
        case ToFailure():
            return "To Failure"
        case _:
            assert_never(target)
