"""
Session Rewards

Aggregates a finished session's totals and XP:
- Base completion bonus
- Per working set credit scaled by how close reps came to the target
- Effort multiplier from average RPE
- Perfect-workout bonus when nearly every working set lands on target
- Personal record bonus (records are flagged by the persistence layer)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from liftengine.config.progression_config_loader import RewardConfig
from liftengine.core.rounding import round_half_up
from liftengine.models.enums import SetType
from liftengine.schemas.records import SetRecordRead
from liftengine.schemas.session import SessionSummary, XPBreakdown
from liftengine.schemas.targets import SetTarget, scoring_reps


@dataclass(frozen=True)
class CompletedSet:
    """A persisted set together with the target it was performed against."""

    record: SetRecordRead
    target: SetTarget | None = None


def score_set(completed: CompletedSet, rewards: RewardConfig) -> tuple[int, bool]:
    """XP for one working set and whether it landed on target."""
    record, target = completed.record, completed.target
    if target is None or record.reps is None:
        return rewards.set_xp, False

    target_reps = scoring_reps(target.target_reps, record.reps)
    if target_reps <= 0:
        return rewards.set_xp, False

    ratio = record.reps / target_reps
    if ratio >= 1.0:
        extra_reps = max(0, record.reps - target_reps)
        perfect = ratio <= 1.0 + rewards.perfect_set_tolerance
        return rewards.set_xp + extra_reps * rewards.extra_rep_xp, perfect
    if ratio >= rewards.near_target_ratio:
        return round_half_up(rewards.set_xp * ratio), False
    return round_half_up(rewards.set_xp * ratio * rewards.missed_target_credit), False


def effort_multiplier(rpes: list[float], rewards: RewardConfig) -> float:
    if not rpes:
        return 1.0
    average = sum(rpes) / len(rpes)
    if average <= rewards.low_effort_rpe:
        return rewards.low_effort_multiplier
    if average >= rewards.high_effort_rpe:
        return rewards.high_effort_multiplier
    return 1.0


def summarize_session(
    session_id: int,
    started_at: datetime,
    completed_at: datetime,
    completed_sets: list[CompletedSet],
    rewards: RewardConfig,
) -> SessionSummary:
    total_sets = 0
    total_reps = 0
    total_volume = 0.0
    set_completion_xp = 0
    perfect_sets = 0
    working_sets = 0
    rpes: list[float] = []

    for completed in completed_sets:
        record = completed.record
        if not record.completed:
            continue

        total_sets += 1
        total_reps += record.reps or 0
        total_volume += (record.weight or 0) * (record.reps or 0)

        # Warmups count toward totals only
        if record.set_type is SetType.WARMUP:
            continue

        working_sets += 1
        xp, perfect = score_set(completed, rewards)
        set_completion_xp += xp
        perfect_sets += int(perfect)

        if record.rpe is not None:
            rpes.append(record.rpe)

    multiplier = effort_multiplier(rpes, rewards)
    adjusted_set_xp = round_half_up(set_completion_xp * multiplier)

    perfect_ratio = perfect_sets / working_sets if working_sets else 0
    perfect_bonus = rewards.perfect_workout_bonus if perfect_ratio >= rewards.perfect_workout_ratio else 0

    pr_count = sum(1 for c in completed_sets if c.record.completed and c.record.is_personal_record)
    pr_bonus = pr_count * rewards.pr_bonus_xp

    xp = XPBreakdown(
        base=rewards.base_xp,
        set_completion=set_completion_xp,
        effort_multiplier=multiplier,
        effort_bonus=adjusted_set_xp - set_completion_xp,
        adjusted_set_xp=adjusted_set_xp,
        perfect_workout_bonus=perfect_bonus,
        pr_bonus=pr_bonus,
        total=rewards.base_xp + adjusted_set_xp + perfect_bonus + pr_bonus,
    )

    return SessionSummary(
        session_id=session_id,
        completed_at=completed_at,
        duration_seconds=max(0, math.floor((completed_at - started_at).total_seconds())),
        total_sets=total_sets,
        total_reps=total_reps,
        total_volume=total_volume,
        personal_records_count=pr_count,
        xp=xp,
    )
