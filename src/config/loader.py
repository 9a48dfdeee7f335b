"""Configuration loader for YAML configuration files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml

from .models import GameConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    def __init__(self, config_dir: Optional[str | Path] = None):
        if config_dir is None:
            self._config_dir = Path(__file__).parent.parent.parent / "config"
        else:
            self._config_dir = Path(config_dir)

        self._game_config: Optional[GameConfig] = None

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    def _load_yaml(self, filename: str) -> dict:
        filepath = self._config_dir / filename
        if not filepath.exists():
            logger.warning("Config file not found: %s, using defaults", filepath)
            return {}

        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return data or {}

    def load_game_config(self, force_reload: bool = False) -> GameConfig:
        if self._game_config is not None and not force_reload:
            return self._game_config

        data = self._load_yaml("game.yaml")
        self._game_config = GameConfig(**data)
        logger.info("Loaded game config from %s", self._config_dir / "game.yaml")
        return self._game_config

    @property
    def game(self) -> GameConfig:
        return self.load_game_config()
