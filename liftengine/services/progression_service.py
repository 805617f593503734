"""
Progression Service

Reads an exercise's recent history, produces a recommendation and writes the
change the user confirms back to the plan.

Analysis is advisory: any domain or configuration failure while analysing is
logged and reported as no recommendation. Failures while applying a confirmed
change propagate to the caller.
"""

from __future__ import annotations

from liftengine.config.progression_config_loader import (
    ProgressionConfig,
    ProgressionConfigLoadError,
    get_progression_config,
)
from liftengine.config.settings import get_settings
from liftengine.core.exceptions import DomainError
from liftengine.core.logging import get_logger
from liftengine.models.enums import ChangeMethod
from liftengine.schemas.progression import (
    ProgressionAnalysis,
    ProgressionChange,
    ProgressionSettings,
)
from liftengine.schemas.targets import SetTarget
from liftengine.services import progression_analyzer
from liftengine.services.base import BaseService
from liftengine.services.interfaces import TargetWriter, WorkoutStore
from liftengine.services.recommendation_generator import apply_change, recommend


logger = get_logger(__name__)


def default_progression_settings() -> ProgressionSettings:
    settings = get_settings()
    return ProgressionSettings(
        consecutive_successes_required=settings.consecutive_successes_required,
        reps_tolerance=settings.reps_tolerance,
        history_window=settings.progression_history_window,
    )


class ProgressionService(BaseService):
    def __init__(
        self,
        store: WorkoutStore,
        target_writer: TargetWriter | None = None,
        config: ProgressionConfig | None = None,
    ):
        super().__init__(store)
        # The SQL store implements both protocols
        self._target_writer = target_writer or store
        self._config = config

    @property
    def config(self) -> ProgressionConfig:
        return self._config or get_progression_config()

    async def analyze_exercise(
        self,
        plan_exercise_id: int,
        settings: ProgressionSettings | None = None,
    ) -> ProgressionAnalysis | None:
        """Analyse one prescribed exercise. None when nothing should be shown."""
        settings = settings or default_progression_settings()
        try:
            config = self.config
            plan_exercise = await self._call_store(
                "get_plan_exercise",
                self._store.get_plan_exercise(plan_exercise_id),
                plan_exercise_id=plan_exercise_id,
            )
            current = progression_analyzer.current_target_from_sets(
                plan_exercise.sets, config.targets.failure_target_reps_fallback
            )
            if current is None:
                logger.info("progression_skipped_no_working_sets", plan_exercise_id=plan_exercise_id)
                return None

            recent = await self._call_store(
                "fetch_recent_performance",
                self._store.fetch_recent_performance(plan_exercise.exercise_id, settings.history_window),
                exercise_id=plan_exercise.exercise_id,
            )

            analysis = progression_analyzer.analyze(recent, current, settings)
            if analysis is None:
                logger.debug(
                    "progression_insufficient_history",
                    plan_exercise_id=plan_exercise_id,
                    sessions=len(recent),
                )
                return None

            analysis = recommend(analysis, config).model_copy(
                update={
                    "exercise_id": plan_exercise.exercise_id,
                    "exercise_name": plan_exercise.exercise.name,
                    "plan_exercise_id": plan_exercise.id,
                }
            )
        except DomainError as e:
            logger.warning(
                "progression_analysis_failed",
                plan_exercise_id=plan_exercise_id,
                error_code=e.code,
                error=e.message,
            )
            return None
        except ProgressionConfigLoadError as e:
            logger.error(
                "progression_analysis_failed",
                plan_exercise_id=plan_exercise_id,
                error_code="CONFIG_ERROR",
                error=str(e),
                **e.details,
            )
            return None

        logger.info(
            "progression_analyzed",
            plan_exercise_id=plan_exercise_id,
            type=analysis.type.value,
            consecutive_successes=analysis.consecutive_successes,
            consecutive_failures=analysis.consecutive_failures,
        )
        return analysis

    async def apply_change(self, plan_exercise_id: int, change: ProgressionChange) -> list[SetTarget]:
        """Persist the confirmed change and return the resulting targets.

        ``keep_current`` reads the targets but writes nothing.
        """
        plan_exercise = await self._call_store(
            "get_plan_exercise",
            self._store.get_plan_exercise(plan_exercise_id),
            plan_exercise_id=plan_exercise_id,
        )
        if change.method is ChangeMethod.KEEP_CURRENT:
            logger.info("progression_kept_current", plan_exercise_id=plan_exercise_id)
            return list(plan_exercise.sets)

        updated = apply_change(plan_exercise.sets, change.method, change.delta, self.config.targets)
        await self._call_store(
            "update_exercise_targets",
            self._target_writer.update_exercise_targets(plan_exercise_id, updated),
            plan_exercise_id=plan_exercise_id,
        )
        logger.info(
            "progression_applied",
            plan_exercise_id=plan_exercise_id,
            method=change.method.value,
            delta=change.delta,
            sets=len(updated),
        )
        return updated
