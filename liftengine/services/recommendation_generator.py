"""
Recommendation Generator

Turns a progression analysis into concrete options the user can confirm and
applies the confirmed option to an exercise's set targets.

Option values, labels and reasoning come from progression_config.yaml.
"""

from __future__ import annotations

from typing import assert_never

from liftengine.config.progression_config_loader import (
    ProgressionConfig,
    TargetRulesConfig,
    get_progression_config,
)
from liftengine.models.enums import ChangeMethod, ProgressionType
from liftengine.schemas.progression import (
    CurrentTarget,
    ProgressionAnalysis,
    ProgressionRecommendation,
    RepOption,
    SuggestedChange,
    VolumeOption,
    WeightOption,
)
from liftengine.schemas.targets import ExactReps, RepRange, RepsTarget, SetTarget, ToFailure


def decrease_reps(reps: int, delta: int, floor: int) -> int:
    """Apply a rep change; a decrease never lands below ``floor``."""
    if delta >= 0:
        return reps + delta
    return max(floor, reps + delta)


def generate_progression_recommendation(
    current: CurrentTarget, config: ProgressionConfig | None = None
) -> ProgressionRecommendation:
    options = (config or get_progression_config()).progression
    return ProgressionRecommendation(
        weight_options=[
            WeightOption(
                increment=option.increment,
                label=option.label,
                new_weight=current.weight + option.increment,
            )
            for option in options.weight_options
        ],
        rep_options=[
            RepOption(increment=inc, new_reps=current.reps + inc) for inc in options.rep_increments
        ],
        volume_options=[
            VolumeOption(increment=inc, new_sets=current.sets + inc)
            for inc in options.volume_increments
        ],
        suggested=SuggestedChange(
            method=ChangeMethod.WEIGHT,
            value=options.suggested_weight_increment,
            reasoning=options.reasoning,
        ),
    )


def generate_regression_recommendation(
    current: CurrentTarget, config: ProgressionConfig | None = None
) -> ProgressionRecommendation:
    config = config or get_progression_config()
    options = config.regression
    floor = config.targets.min_reps_floor
    return ProgressionRecommendation(
        weight_options=[
            WeightOption(
                increment=option.increment,
                label=option.label,
                new_weight=max(0, current.weight + option.increment),
            )
            for option in options.weight_options
        ],
        rep_options=[
            RepOption(increment=dec, new_reps=decrease_reps(current.reps, dec, floor))
            for dec in options.rep_decrements
        ],
        suggested=SuggestedChange(
            method=ChangeMethod.WEIGHT,
            value=options.suggested_weight_increment,
            reasoning=options.reasoning,
        ),
    )


def recommend(
    analysis: ProgressionAnalysis, config: ProgressionConfig | None = None
) -> ProgressionAnalysis:
    """Return ``analysis`` with the recommendation matching its type attached.

    Stagnation and none carry no options.
    """
    match analysis.type:
        case ProgressionType.PROGRESSION:
            recommendation = generate_progression_recommendation(analysis.current, config)
        case ProgressionType.REGRESSION:
            recommendation = generate_regression_recommendation(analysis.current, config)
        case ProgressionType.STAGNATION | ProgressionType.NONE:
            recommendation = None
        case _:
            assert_never(analysis.type)
    return analysis.model_copy(update={"recommendation": recommendation})


def shift_reps(target: RepsTarget, delta: int, rules: TargetRulesConfig) -> RepsTarget:
    """Rep target after a rep change of ``delta``."""
    match target:
        case ExactReps(value=value):
            return ExactReps(value=decrease_reps(value, int(delta), rules.min_reps_floor))
        case RepRange(min=low, max=high):
            if rules.range_rep_policy == "unchanged":
                return target
            return RepRange(
                min=decrease_reps(low, int(delta), rules.min_reps_floor),
                max=decrease_reps(high, int(delta), rules.min_reps_floor),
            )
        case ToFailure():
            return target
        case _:
            assert_never(target)


def apply_change(
    sets: list[SetTarget],
    method: ChangeMethod,
    delta: float = 0,
    rules: TargetRulesConfig | None = None,
) -> list[SetTarget]:
    """Return a new target list with the confirmed change applied.

    - weight: every working set's weight moves by ``delta`` (not below 0)
    - reps: exact rep targets move by ``delta``; ranges follow the
      configured policy and to-failure sets are left alone
    - volume: the last working set is duplicated ``delta`` times at the end
    - keep_current: an equal copy
    """
    rules = rules or get_progression_config().targets

    match method:
        case ChangeMethod.WEIGHT:
            return [
                s.model_copy(update={"target_weight": max(0, s.target_weight + delta)})
                if s.is_working
                else s
                for s in sets
            ]
        case ChangeMethod.REPS:
            return [
                s.model_copy(update={"target_reps": shift_reps(s.target_reps, int(delta), rules)})
                for s in sets
            ]
        case ChangeMethod.VOLUME:
            working = [s for s in sets if s.is_working]
            if not working:
                return list(sets)
            return [*sets, *([working[-1]] * int(delta))]
        case ChangeMethod.KEEP_CURRENT:
            return list(sets)
        case _:
            assert_never(method)
