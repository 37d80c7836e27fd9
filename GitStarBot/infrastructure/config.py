"""
Run configuration loaded from environment variables and an optional .env file.
"""

import logging
import math
import os
from typing import Mapping, Optional

from dotenv import load_dotenv

from core.entities import BatchingPolicy, Mode, RunConfig
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 2.0
DEFAULT_MODE = "star"
DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_PAUSE = 5.0

TRUE_VALUES = ("1", "true", "yes", "on")


def split_repositories(value: Optional[str]):
    """Split a comma-separated repository list, dropping blank entries."""
    if not value:
        return []
    return [repo.strip() for repo in value.split(",") if repo.strip()]


def _number(name: str, value, cast=float):
    try:
        number = cast(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
    if number < 0:
        raise ConfigurationError(f"{name} cannot be negative")
    return number


def load_config(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[str] = None,
    **overrides,
) -> RunConfig:
    """
    Build the run configuration.

    Values passed as keyword overrides (CLI arguments) win over the
    environment. ``None`` overrides are ignored.

    Args:
        env: Environment mapping (defaults to os.environ after loading .env)
        env_file: Path of the .env file (defaults to ./.env when present)
        **overrides: repositories, interval, mode, batched, batch_size,
            batch_pause, username, token

    Returns:
        RunConfig

    Raises:
        ConfigurationError: If a value cannot be parsed
    """
    if env is None:
        load_dotenv(dotenv_path=env_file, override=False)
        env = os.environ

    overrides = {key: value for key, value in overrides.items() if value is not None}

    token = overrides.get("token", env.get("GITHUB_TOKEN", ""))
    username = overrides.get("username", env.get("GITHUB_USERNAME")) or None

    repositories = overrides.get("repositories")
    if repositories is None:
        repositories = env.get("REPOSITORIES")
    if isinstance(repositories, str) or repositories is None:
        repositories = split_repositories(repositories)

    interval = _number(
        "STAR_INTERVAL", overrides.get("interval", env.get("STAR_INTERVAL", DEFAULT_INTERVAL))
    )

    try:
        mode = Mode.parse(overrides.get("mode", env.get("MODE", DEFAULT_MODE)))
    except ValueError as e:
        raise ConfigurationError(str(e))

    batched = overrides.get("batched")
    if batched is None:
        batched = str(env.get("BATCHED", "")).strip().lower() in TRUE_VALUES

    batching = None
    if batched:
        batch_size = _number(
            "BATCH_SIZE",
            overrides.get("batch_size", env.get("BATCH_SIZE", DEFAULT_BATCH_SIZE)),
            cast=int,
        )
        batch_pause = _number(
            "BATCH_PAUSE",
            overrides.get("batch_pause", env.get("BATCH_PAUSE", DEFAULT_BATCH_PAUSE)),
        )
        if batch_size < 1:
            raise ConfigurationError("BATCH_SIZE must be at least 1")
        batching = BatchingPolicy(batch_size=batch_size, batch_pause_seconds=batch_pause)

    logger.debug(
        f"Loaded config: {len(repositories)} repositories, mode={mode.value}, "
        f"interval={interval:g}s, batched={batching is not None}"
    )

    return RunConfig(
        credential=token,
        repositories=list(repositories),
        username=username,
        interval_seconds=interval,
        mode=mode,
        batching=batching,
    )
