"""
Star, unstar and check actions for a single repository.
"""

import logging
import time
from typing import Callable, Optional, Sequence

import requests

from core.entities import Mode, Outcome, RepositoryRef, RunSummary
from infrastructure.github_client import (
    ForbiddenError,
    GitHubAPIError,
    GitHubClient,
    NotFoundError,
)
from infrastructure.logging_config import SUCCESS

logger = logging.getLogger(__name__)


class ExecuteStarAction:
    """
    Use case applying one mode to one repository.
    Errors are classified into Outcome values and never raised.
    """

    def __init__(self, github_client: GitHubClient, log: Optional[logging.Logger] = None):
        """
        Initialize the use case.

        Args:
            github_client: GitHub API client
            log: Logger for per-repository results
        """
        self.github = github_client
        self.log = log or logger

    def execute(self, ref: RepositoryRef, mode: Mode) -> Outcome:
        """
        Apply the mode to a repository.

        Args:
            ref: Repository to act on
            mode: Star, unstar or check

        Returns:
            Outcome of the action
        """
        try:
            if mode is Mode.STAR:
                return self._star(ref)
            if mode is Mode.UNSTAR:
                return self._unstar(ref)
            return self._check(ref)

        except NotFoundError:
            self.log.warning(f"{ref} - repository not found")
            return Outcome.NOT_FOUND
        except ForbiddenError as e:
            self.log.warning(f"{ref} - no permission or rate limit reached ({e.message})")
            return Outcome.FORBIDDEN
        except (GitHubAPIError, requests.RequestException) as e:
            self.log.error(f"{ref} - error: {e}")
            return Outcome.OTHER_ERROR

    def _star(self, ref: RepositoryRef) -> Outcome:
        if self.github.is_starred(ref.owner, ref.name):
            self.log.info(f"{ref} - already starred")
            return Outcome.ALREADY_IN_STATE

        self.github.star(ref.owner, ref.name)
        self.log.log(SUCCESS, f"{ref} - star added")
        return Outcome.CHANGED

    def _unstar(self, ref: RepositoryRef) -> Outcome:
        if not self.github.is_starred(ref.owner, ref.name):
            self.log.info(f"{ref} - not starred")
            return Outcome.ALREADY_IN_STATE

        self.github.unstar(ref.owner, ref.name)
        self.log.log(SUCCESS, f"{ref} - star removed")
        return Outcome.CHANGED

    def _check(self, ref: RepositoryRef) -> Outcome:
        if self.github.is_starred(ref.owner, ref.name):
            self.log.info(f"{ref} - starred")
            return Outcome.STARRED

        self.log.info(f"{ref} - not starred")
        return Outcome.NOT_STARRED


def process_repositories(
    refs: Sequence[RepositoryRef],
    mode: Mode,
    executor: ExecuteStarAction,
    summary: RunSummary,
    interval_seconds: float,
    sleep: Callable[[float], None] = time.sleep,
    pause_after_last: bool = False,
) -> RunSummary:
    """
    Run the executor over refs in order, pausing after each item.

    The last item of ``refs`` is followed by a pause only when
    ``pause_after_last`` is set, i.e. when more items follow elsewhere.
    """
    for index, ref in enumerate(refs):
        summary.record(executor.execute(ref, mode))

        more_items = index < len(refs) - 1 or pause_after_last
        if more_items and interval_seconds > 0:
            sleep(interval_seconds)

    return summary
