"""Application configuration module.

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, rest timer cadence, progression defaults
  - Loaded from .env file via pydantic-settings

- **progression_config.yaml**: Progression and reward tuning
  - Loaded by ProgressionConfigLoader into validated frozen dataclasses
  - Adjustment options, rep floor, rationale strings, XP constants
"""
from liftengine.config.settings import Settings, get_settings

# Progression config loader is imported lazily by its consumers:
# from liftengine.config.progression_config_loader import get_progression_config

__all__ = ["Settings", "get_settings"]
