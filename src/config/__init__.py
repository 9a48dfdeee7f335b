"""Configuration module for the game system."""

from .loader import ConfigLoader
from .models import (
    DIFFICULTY_NAMES,
    GameConfig,
    GameSettingsConfig,
    ObservabilityConfig,
    SessionsConfig,
    StoreConfig,
    resolve_env_vars,
)

__all__ = [
    "ConfigLoader",
    "DIFFICULTY_NAMES",
    "GameConfig",
    "GameSettingsConfig",
    "ObservabilityConfig",
    "SessionsConfig",
    "StoreConfig",
    "resolve_env_vars",
]
