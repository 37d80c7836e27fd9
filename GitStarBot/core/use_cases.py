"""
Business logic / use cases for starring GitHub repositories.
This layer orchestrates authentication, validation and the star actions.
"""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional

import requests

from core.actions import ExecuteStarAction, process_repositories
from core.batching import BatchScheduler, RateLimitGate
from core.entities import Mode, RepositoryInfo, RunConfig, RunSummary
from core.exceptions import AuthenticationFailed, ConfigurationError
from core.validators import validate_repositories
from infrastructure.github_client import GitHubAPIError, GitHubClient

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Lifecycle of a bot run. COMPLETED and FAILED are terminal."""
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    VALIDATING = "validating"
    DISPATCHING = "dispatching"
    COMPLETED = "completed"
    FAILED = "failed"


class RunStarBot:
    """
    Use case for applying star/unstar/check to the configured repositories.
    Uses the batch scheduler when the config carries a BatchingPolicy.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        log: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the use case.

        Args:
            github_client: GitHub API client
            log: Logger configured by the entry point
            sleep: Sleep function, replaced in tests
        """
        self.github = github_client
        self.log = log or logger
        self.sleep = sleep
        self.state = RunState.IDLE
        self.executor = ExecuteStarAction(github_client, self.log)
        self.gate = RateLimitGate(github_client, self.log)

    def execute(self, config: RunConfig) -> RunSummary:
        """
        Execute the run.

        Args:
            config: Run configuration

        Returns:
            Summary of the processed repositories

        Raises:
            ConfigurationError: Missing token, missing or invalid repositories
            AuthenticationFailed: GitHub rejected the token
        """
        try:
            if not config.credential or not config.credential.strip():
                raise ConfigurationError("GITHUB_TOKEN is not configured")
            if not config.repositories:
                raise ConfigurationError("REPOSITORIES is not configured")

            self.log.info(
                f"Bot configured for {len(config.repositories)} repositories"
            )
            self.log.info(f"Interval between operations: {config.interval_seconds:g}s")
            self.log.info(f"Mode: {config.mode.value}")

            self.state = RunState.AUTHENTICATING
            self._authenticate(config.username)

            self.state = RunState.VALIDATING
            refs = validate_repositories(config.repositories, self.log)
            if not refs:
                raise ConfigurationError("No valid repositories found")

            self.state = RunState.DISPATCHING
            summary = RunSummary()

            if config.batching is None:
                process_repositories(
                    refs,
                    config.mode,
                    self.executor,
                    summary,
                    config.interval_seconds,
                    self.sleep,
                )
            else:
                self._run_batched(config, refs, summary)

        except BaseException:
            self.state = RunState.FAILED
            raise

        self.state = RunState.COMPLETED
        self._log_summary(config.mode, summary)
        return summary

    def _authenticate(self, expected_username: Optional[str]) -> str:
        try:
            user = self.github.authenticate()
        except (GitHubAPIError, requests.RequestException) as e:
            raise AuthenticationFailed(str(e)) from e

        login = user.get("login", "")
        self.log.info(f"Authenticated as: {login}")

        if expected_username and login != expected_username:
            self.log.warning(
                f"Configured user ({expected_username}) differs from "
                f"authenticated user ({login})"
            )
        return login

    def _run_batched(self, config: RunConfig, refs, summary: RunSummary) -> None:
        policy = config.batching

        status = self.gate.check_quota()
        self.log.info(f"Rate limit available: {status.remaining}/{status.limit}")

        if not self.gate.allows(status, policy.min_remaining_to_start):
            self.log.warning(
                f"Rate limit too low to start. "
                f"Resets at {status.reset_at:%Y-%m-%d %H:%M:%S}"
            )
            summary.stopped_early = True
            summary.rate_limit_reset_at = status.reset_at
            return

        scheduler = BatchScheduler(
            self.executor,
            self.gate,
            policy,
            config.interval_seconds,
            self.sleep,
            self.log,
        )
        scheduler.run(refs, config.mode, summary)

        final = self.gate.check_quota()
        self.log.info(f"Final rate limit: {final.remaining}/{final.limit}")

    def _log_summary(self, mode: Mode, summary: RunSummary) -> None:
        self.log.info("=" * 60)
        if mode is Mode.CHECK:
            self.log.info("Star status:")
            self.log.info(f"  Starred: {summary.starred_count}")
            self.log.info(f"  Not starred: {summary.not_starred_count}")
        else:
            self.log.info("Operation summary:")
            self.log.info(f"  Successes: {summary.success_count}")
            self.log.info(f"  Unchanged: {summary.unchanged_count}")
        self.log.info(f"  Errors: {summary.error_count}")
        if summary.stopped_early:
            self.log.warning(
                f"  Stopped early on rate limit after {summary.processed_count} "
                f"repositories"
            )
        self.log.info("=" * 60)


class GetRepositoryInfo:
    """
    Use case for looking up public metadata of repositories.
    """

    def __init__(self, github_client: GitHubClient, log: Optional[logging.Logger] = None):
        """
        Initialize the use case.

        Args:
            github_client: GitHub API client
            log: Logger for lookup failures
        """
        self.github = github_client
        self.log = log or logger

    def execute(self, repositories: List[str]) -> List[RepositoryInfo]:
        """
        Look up every valid repository, skipping failed lookups.

        Args:
            repositories: Raw repository identifiers

        Returns:
            Metadata for the repositories that could be fetched
        """
        results = []
        for ref in validate_repositories(repositories, self.log):
            try:
                results.append(self.github.get_repository(ref.owner, ref.name))
            except (GitHubAPIError, requests.RequestException) as e:
                self.log.error(f"Could not fetch {ref}: {e}")
        return results
