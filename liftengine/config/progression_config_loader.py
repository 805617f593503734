"""
Progression Configuration Loader

Loads progression and reward tuning from progression_config.yaml into
validated frozen dataclasses. Supports an explicit reload for updates without
restarting the host process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Any, Literal

import yaml


RangeRepPolicy = Literal["unchanged", "shift"]


class ProgressionConfigLoadError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}


class ProgressionConfigValidationError(ProgressionConfigLoadError):
    """Raised when configuration fails validation."""


@dataclass(frozen=True)
class WeightOptionConfig:
    """A labelled weight increment offered to the user."""

    increment: float
    label: str


@dataclass(frozen=True)
class ProgressionOptionsConfig:
    """Options offered when the trend calls for an increase."""

    weight_options: tuple[WeightOptionConfig, ...]
    rep_increments: tuple[int, ...] = (1, 2, 3)
    volume_increments: tuple[int, ...] = (1, 2)
    suggested_weight_increment: float = 2
    reasoning: str = ""

    def __post_init__(self):
        if not self.weight_options:
            raise ProgressionConfigValidationError("progression.weight_options must not be empty")
        if any(option.increment <= 0 for option in self.weight_options):
            raise ProgressionConfigValidationError("progression weight increments must be positive")
        if any(inc <= 0 for inc in self.rep_increments + self.volume_increments):
            raise ProgressionConfigValidationError("progression rep/volume increments must be positive")


@dataclass(frozen=True)
class RegressionOptionsConfig:
    """Options offered when the trend calls for a decrease."""

    weight_options: tuple[WeightOptionConfig, ...]
    rep_decrements: tuple[int, ...] = (-1, -2)
    suggested_weight_increment: float = -2.5
    reasoning: str = ""

    def __post_init__(self):
        if not self.weight_options:
            raise ProgressionConfigValidationError("regression.weight_options must not be empty")
        if any(option.increment >= 0 for option in self.weight_options):
            raise ProgressionConfigValidationError("regression weight increments must be negative")
        if any(dec >= 0 for dec in self.rep_decrements):
            raise ProgressionConfigValidationError("regression rep decrements must be negative")


@dataclass(frozen=True)
class TargetRulesConfig:
    """Rules applied when rewriting set targets."""

    min_reps_floor: int = 6
    failure_target_reps_fallback: int = 8
    range_rep_policy: RangeRepPolicy = "unchanged"

    def __post_init__(self):
        if self.min_reps_floor < 1:
            raise ProgressionConfigValidationError(
                f"min_reps_floor ({self.min_reps_floor}) must be >= 1"
            )
        if self.range_rep_policy not in ("unchanged", "shift"):
            raise ProgressionConfigValidationError(
                f"range_rep_policy ({self.range_rep_policy}) must be 'unchanged' or 'shift'"
            )


@dataclass(frozen=True)
class RewardConfig:
    """XP constants used when a session is finished."""

    base_xp: int = 50
    set_xp: int = 10
    extra_rep_xp: int = 5
    near_target_ratio: float = 0.8
    missed_target_credit: float = 0.8
    perfect_set_tolerance: float = 0.05
    perfect_workout_ratio: float = 0.9
    perfect_workout_bonus: int = 50
    pr_bonus_xp: int = 100
    low_effort_rpe: float = 4
    high_effort_rpe: float = 8
    low_effort_multiplier: float = 0.8
    high_effort_multiplier: float = 1.2

    def __post_init__(self):
        if not 0 < self.near_target_ratio <= 1:
            raise ProgressionConfigValidationError(
                f"near_target_ratio ({self.near_target_ratio}) must be between 0 and 1"
            )
        if not 0 <= self.perfect_workout_ratio <= 1:
            raise ProgressionConfigValidationError(
                f"perfect_workout_ratio ({self.perfect_workout_ratio}) must be between 0 and 1"
            )
        if self.low_effort_rpe >= self.high_effort_rpe:
            raise ProgressionConfigValidationError(
                f"low_effort_rpe ({self.low_effort_rpe}) must be < high_effort_rpe ({self.high_effort_rpe})"
            )


@dataclass(frozen=True)
class ProgressionConfig:
    """Root progression configuration."""

    version: str
    last_updated: str
    progression: ProgressionOptionsConfig
    regression: RegressionOptionsConfig
    targets: TargetRulesConfig = field(default_factory=TargetRulesConfig)
    rewards: RewardConfig = field(default_factory=RewardConfig)


class ProgressionConfigLoader:
    """Loader for progression configuration with explicit reload support."""

    def __init__(self, config_path: Path | None = None):
        self._lock = RLock()
        self._config: ProgressionConfig | None = None
        self._config_path = config_path or self._default_config_path()

        self._load_config()

    @staticmethod
    def _default_config_path() -> Path:
        """Get default configuration file path."""
        return Path(__file__).parent / "progression_config.yaml"

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self._config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ProgressionConfigLoadError(
                f"Configuration file not found: {self._config_path}"
            )
        except yaml.YAMLError as e:
            raise ProgressionConfigLoadError(
                f"Failed to parse YAML configuration: {e}",
                details={"file_path": str(self._config_path)},
            )

        try:
            self._config = self._parse_config(data)
        except ProgressionConfigValidationError:
            raise
        except (TypeError, ValueError, KeyError) as e:
            raise ProgressionConfigLoadError(
                f"Failed to parse configuration: {e}",
                details={"file_path": str(self._config_path)},
            )

    def _parse_config(self, data: dict[str, Any]) -> ProgressionConfig:
        """Parse raw YAML data into ProgressionConfig.

        Raises:
            ProgressionConfigValidationError: If validation fails.
        """
        progression_data = data.get("progression", {})
        progression = ProgressionOptionsConfig(
            weight_options=self._parse_weight_options(progression_data.get("weight_options", [])),
            rep_increments=tuple(progression_data.get("rep_increments", [1, 2, 3])),
            volume_increments=tuple(progression_data.get("volume_increments", [1, 2])),
            suggested_weight_increment=progression_data.get("suggested_weight_increment", 2),
            reasoning=progression_data.get("reasoning", ""),
        )

        regression_data = data.get("regression", {})
        regression = RegressionOptionsConfig(
            weight_options=self._parse_weight_options(regression_data.get("weight_options", [])),
            rep_decrements=tuple(regression_data.get("rep_decrements", [-1, -2])),
            suggested_weight_increment=regression_data.get("suggested_weight_increment", -2.5),
            reasoning=regression_data.get("reasoning", ""),
        )

        return ProgressionConfig(
            version=str(data.get("version", "1.0.0")),
            last_updated=str(data.get("last_updated", "")),
            progression=progression,
            regression=regression,
            targets=TargetRulesConfig(**data.get("targets", {})),
            rewards=RewardConfig(**data.get("rewards", {})),
        )

    @staticmethod
    def _parse_weight_options(raw: list[dict[str, Any]]) -> tuple[WeightOptionConfig, ...]:
        return tuple(
            WeightOptionConfig(increment=float(item["increment"]), label=str(item["label"]))
            for item in raw
        )

    @property
    def config(self) -> ProgressionConfig:
        """Get current configuration (thread-safe)."""
        with self._lock:
            if self._config is None:
                self._load_config()
            return self._config

    def reload(self) -> None:
        """Force reload configuration from file."""
        with self._lock:
            self._load_config()


_loader_instance: ProgressionConfigLoader | None = None


def get_progression_config_loader(config_path: Path | None = None) -> ProgressionConfigLoader:
    """Get or create the shared ProgressionConfigLoader instance.

    Example:
        >>> loader = get_progression_config_loader()
        >>> floor = loader.config.targets.min_reps_floor
    """
    global _loader_instance
    if _loader_instance is None:
        _loader_instance = ProgressionConfigLoader(config_path)
    return _loader_instance


def get_progression_config() -> ProgressionConfig:
    """Get current progression configuration."""
    return get_progression_config_loader().config
