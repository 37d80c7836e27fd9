"""
Tests for configuration loading.
"""

import os

import pytest
from unittest.mock import patch

from core.entities import Mode
from core.exceptions import ConfigurationError
from infrastructure.config import load_config, split_repositories


BASE_ENV = {
    "GITHUB_TOKEN": "ghp_test",
    "REPOSITORIES": "acme/widgets, acme/tools ,,",
}


class TestLoadConfig:
    """Test load_config."""

    def test_defaults(self):
        config = load_config(env=BASE_ENV)

        assert config.credential == "ghp_test"
        assert config.repositories == ["acme/widgets", "acme/tools"]
        assert config.username is None
        assert config.interval_seconds == 2.0
        assert config.mode is Mode.STAR
        assert config.batching is None

    def test_environment_values(self):
        env = dict(
            BASE_ENV,
            GITHUB_USERNAME="octocat",
            STAR_INTERVAL="0.5",
            MODE="Check",
            BATCHED="true",
            BATCH_SIZE="10",
            BATCH_PAUSE="7",
        )
        config = load_config(env=env)

        assert config.username == "octocat"
        assert config.interval_seconds == 0.5
        assert config.mode is Mode.CHECK
        assert config.batch_size == 10
        assert config.batching.batch_pause_seconds == 7.0

    def test_batching_defaults(self):
        config = load_config(env=dict(BASE_ENV, BATCHED="1"))
        assert config.batch_size == 50
        assert config.batching.batch_pause_seconds == 5.0

    def test_overrides_win(self):
        config = load_config(
            env=dict(BASE_ENV, MODE="star", STAR_INTERVAL="3"),
            mode="unstar",
            interval=1,
            repositories="other/repo",
            batched=True,
            batch_size=5,
        )

        assert config.mode is Mode.UNSTAR
        assert config.interval_seconds == 1
        assert config.repositories == ["other/repo"]
        assert config.batch_size == 5

    def test_none_overrides_ignored(self):
        config = load_config(env=BASE_ENV, mode=None, interval=None)
        assert config.mode is Mode.STAR
        assert config.interval_seconds == 2.0

    def test_missing_values_left_for_controller(self):
        config = load_config(env={})
        assert config.credential == ""
        assert config.repositories == []

    @pytest.mark.parametrize("env,match", [
        ({"STAR_INTERVAL": "soon"}, "STAR_INTERVAL must be a number"),
        ({"STAR_INTERVAL": "-1"}, "cannot be negative"),
        ({"MODE": "fork"}, "Invalid mode"),
        ({"BATCHED": "yes", "BATCH_SIZE": "0"}, "at least 1"),
        ({"BATCHED": "yes", "BATCH_SIZE": "ten"}, "BATCH_SIZE must be a number"),
        ({"STAR_INTERVAL": "nan"}, "STAR_INTERVAL must be a finite number"),
        ({"STAR_INTERVAL": "inf"}, "STAR_INTERVAL must be a finite number"),
        ({"BATCHED": "yes", "BATCH_PAUSE": "inf"}, "BATCH_PAUSE must be a finite number"),
        ({"BATCHED": "yes", "BATCH_PAUSE": "-inf"}, "BATCH_PAUSE must be a finite number"),
    ])
    def test_invalid_values(self, env, match):
        with pytest.raises(ConfigurationError, match=match):
            load_config(env=dict(BASE_ENV, **env))

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "GITHUB_TOKEN=ghp_from_file\nREPOSITORIES=acme/widgets\nMODE=check\n"
        )

        with patch.dict(os.environ, clear=True):
            config = load_config(env_file=str(env_file))

        assert config.credential == "ghp_from_file"
        assert config.repositories == ["acme/widgets"]
        assert config.mode is Mode.CHECK


def test_split_repositories():
    assert split_repositories(" a/b ,c/d") == ["a/b", "c/d"]
    assert split_repositories("") == []
    assert split_repositories(None) == []
