"""Tests for configuration module."""

import os
import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from config.models import (
    GameConfig,
    GameSettingsConfig,
    ObservabilityConfig,
    SessionsConfig,
    StoreConfig,
    resolve_env_vars,
)
from config.loader import ConfigLoader


class TestResolveEnvVars:
    def test_resolve_simple_env_var(self):
        os.environ["TEST_VAR"] = "test_value"
        result = resolve_env_vars("${TEST_VAR}")
        assert result == "test_value"
        del os.environ["TEST_VAR"]

    def test_resolve_env_var_with_default(self):
        if "NONEXISTENT_VAR" in os.environ:
            del os.environ["NONEXISTENT_VAR"]
        result = resolve_env_vars("${NONEXISTENT_VAR:default_value}")
        assert result == "default_value"

    def test_resolve_env_var_in_string(self):
        os.environ["DATA_ROOT"] = "/srv/data"
        result = resolve_env_vars("${DATA_ROOT}/imdb.db")
        assert result == "/srv/data/imdb.db"
        del os.environ["DATA_ROOT"]

    def test_no_env_vars(self):
        result = resolve_env_vars("plain_string")
        assert result == "plain_string"


class TestStoreConfig:
    def test_default_values(self, monkeypatch):
        monkeypatch.delenv("MOVIE_ACTOR_DB", raising=False)
        config = StoreConfig()
        assert config.backend == "sqlite"
        assert config.path == "data/imdb.db"

    def test_env_var_resolution(self, monkeypatch):
        monkeypatch.setenv("MOVIE_ACTOR_DB", "/tmp/other.db")
        config = StoreConfig(path="${MOVIE_ACTOR_DB:data/imdb.db}")
        assert config.path == "/tmp/other.db"

    def test_env_var_default(self, monkeypatch):
        monkeypatch.delenv("MOVIE_ACTOR_DB", raising=False)
        config = StoreConfig(path="${MOVIE_ACTOR_DB:data/imdb.db}")
        assert config.path == "data/imdb.db"

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            StoreConfig(backend="postgres")


class TestGameSettingsConfig:
    def test_default_values(self):
        config = GameSettingsConfig()
        assert config.rounds_to_win == 5
        assert config.default_difficulty == "medium"
        assert config.resolver_limit == 5
        assert config.candidate_pool_size == 5
        assert config.top_k == 3

    def test_difficulty_normalised(self):
        config = GameSettingsConfig(default_difficulty="HARD")
        assert config.default_difficulty == "hard"

    def test_unknown_difficulty(self):
        with pytest.raises(ValidationError):
            GameSettingsConfig(default_difficulty="nightmare")

    def test_rounds_to_win_positive(self):
        with pytest.raises(ValidationError):
            GameSettingsConfig(rounds_to_win=0)


class TestGameConfig:
    def test_default_construction(self):
        config = GameConfig()
        assert isinstance(config.store, StoreConfig)
        assert isinstance(config.game, GameSettingsConfig)
        assert isinstance(config.sessions, SessionsConfig)
        assert isinstance(config.observability, ObservabilityConfig)
        assert config.difficulty == {}
        assert config.sessions.idle_timeout_seconds == 300

    def test_profile_overrides(self):
        config = GameConfig(difficulty={"hard": {"min_relevance_for_knowledge": 500}})
        assert config.profile_overrides("hard") == {"min_relevance_for_knowledge": 500}
        assert config.profile_overrides("easy") == {}

    def test_unknown_override_name(self):
        with pytest.raises(ValidationError):
            GameConfig(difficulty={"nightmare": {"min_year": 2000}})

    def test_unknown_override_field(self):
        with pytest.raises(ValidationError):
            GameConfig(difficulty={"easy": {"max_cast": 2}})


class TestConfigLoader:
    def test_load_game_config_with_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            (config_dir / "game.yaml").write_text("", encoding="utf-8")

            loader = ConfigLoader(config_dir)
            config = loader.load_game_config()

            assert isinstance(config, GameConfig)
            assert config.game.rounds_to_win == 5

    def test_load_game_config_with_values(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            game_yaml = {
                "store": {"backend": "json", "path": "data/graph.json"},
                "game": {"rounds_to_win": 3, "default_difficulty": "easy"},
                "difficulty": {"easy": {"min_year": 1990}},
            }
            (config_dir / "game.yaml").write_text(
                yaml.safe_dump(game_yaml), encoding="utf-8"
            )

            loader = ConfigLoader(config_dir)
            config = loader.load_game_config()

            assert config.store.backend == "json"
            assert config.store.path == "data/graph.json"
            assert config.game.rounds_to_win == 3
            assert config.game.default_difficulty == "easy"
            assert config.profile_overrides("easy") == {"min_year": 1990}

    def test_config_caching(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            (config_dir / "game.yaml").write_text("", encoding="utf-8")

            loader = ConfigLoader(config_dir)
            config1 = loader.load_game_config()
            config2 = loader.load_game_config()

            assert config1 is config2

    def test_config_force_reload(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            (config_dir / "game.yaml").write_text("", encoding="utf-8")

            loader = ConfigLoader(config_dir)
            config1 = loader.load_game_config()
            (config_dir / "game.yaml").write_text(
                yaml.safe_dump({"game": {"rounds_to_win": 2}}), encoding="utf-8"
            )
            config2 = loader.load_game_config(force_reload=True)

            assert config1 is not config2
            assert config2.game.rounds_to_win == 2

    def test_missing_config_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            loader = ConfigLoader(Path(tmpdir))
            config = loader.load_game_config()

            assert isinstance(config, GameConfig)
            assert config.store.backend == "sqlite"

    def test_property_accessors(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            loader = ConfigLoader(config_dir)

            assert loader.config_dir == config_dir
            assert isinstance(loader.game, GameConfig)

    def test_shipped_config_is_valid(self):
        loader = ConfigLoader()
        config = loader.load_game_config()

        assert (loader.config_dir / "game.yaml").exists()
        assert config.game.top_k == 3
        assert config.sessions.id_length == 6
