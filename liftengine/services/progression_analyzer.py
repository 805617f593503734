"""
Progression Analyzer

Classifies the recent trend of one exercise as progression, regression,
stagnation or none. Every function here is pure: the same history, target
and settings always give the same result.

History is most-recent-first, as returned by
``WorkoutStore.fetch_recent_performance``.
"""

from __future__ import annotations

from liftengine.core.rounding import round_half_up
from liftengine.models.enums import ProgressionType, SetType
from liftengine.schemas.progression import (
    CurrentTarget,
    ProgressionAnalysis,
    ProgressionHistoryEntry,
    ProgressionSettings,
)
from liftengine.schemas.records import RecentPerformance
from liftengine.schemas.targets import SetTarget, reference_reps


MIN_HISTORY_ENTRIES = 2
STAGNATION_WINDOW = 4


def current_target_from_sets(
    sets: list[SetTarget], failure_fallback: int = 8
) -> CurrentTarget | None:
    """Weight and reps of the first working set plus the working-set count."""
    working = [s for s in sets if s.is_working]
    if not working:
        return None
    first = working[0]
    return CurrentTarget(
        weight=first.target_weight,
        reps=reference_reps(first.target_reps, failure_fallback),
        sets=len(working),
    )


def build_history(
    recent: list[RecentPerformance], target_reps: int, reps_tolerance: int = 0
) -> list[ProgressionHistoryEntry]:
    """Score each past session against ``target_reps``, keeping the input order."""
    history = []
    for performance in recent:
        working = [s for s in performance.sets if s.set_type is SetType.WORKING]
        if working:
            actual = round_half_up(sum(s.reps or 0 for s in working) / len(working))
            weight = working[0].weight or 0
        else:
            actual = 0
            weight = 0

        history.append(
            ProgressionHistoryEntry(
                session_id=performance.session_id,
                date=performance.date,
                target_reps=target_reps,
                actual_reps=actual,
                weight=weight,
                success=actual >= target_reps - reps_tolerance,
            )
        )
    return history


def count_streak(history: list[ProgressionHistoryEntry]) -> tuple[int, int]:
    """Length of the run sharing the most recent entry's outcome.

    Returns ``(consecutive_successes, consecutive_failures)``; at most one is
    non-zero.
    """
    if not history:
        return 0, 0

    leading = history[0].success
    run = 0
    for entry in history:
        if entry.success is not leading:
            break
        run += 1
    return (run, 0) if leading else (0, run)


def classify(
    history: list[ProgressionHistoryEntry],
    consecutive_successes: int,
    consecutive_failures: int,
    settings: ProgressionSettings,
) -> tuple[ProgressionType, str]:
    """Apply the rules in priority order and return the type with its reason."""
    if consecutive_successes >= settings.consecutive_successes_required:
        return (
            ProgressionType.PROGRESSION,
            f"Hit target reps for {consecutive_successes} consecutive workouts",
        )
    if consecutive_failures >= settings.regression_failures_required:
        return (
            ProgressionType.REGRESSION,
            f"Failed to hit target reps for {consecutive_failures} consecutive workouts",
        )
    if len(history) >= STAGNATION_WINDOW and not any(entry.success for entry in history):
        return ProgressionType.STAGNATION, f"No progress in last {len(history)} workouts"
    return ProgressionType.NONE, "No change recommended"


def analyze(
    recent: list[RecentPerformance],
    current_target: CurrentTarget,
    settings: ProgressionSettings | None = None,
) -> ProgressionAnalysis | None:
    """Classify the trend for one exercise.

    Returns None when fewer than two sessions are available.
    """
    settings = settings or ProgressionSettings()
    if len(recent) < MIN_HISTORY_ENTRIES:
        return None

    history = build_history(recent, current_target.reps, settings.reps_tolerance)
    successes, failures = count_streak(history)
    progression_type, reason = classify(history, successes, failures, settings)

    return ProgressionAnalysis(
        type=progression_type,
        current=current_target,
        # oldest first for display
        history=list(reversed(history)),
        consecutive_successes=successes,
        consecutive_failures=failures,
        trigger_reason=reason,
    )
