"""
Rate-limit aware batch processing of repositories.
"""

import logging
import time
from typing import Callable, List, Optional, Sequence, TypeVar

import requests

from core.actions import ExecuteStarAction, process_repositories
from core.entities import (
    BatchingPolicy,
    Mode,
    RateLimitStatus,
    RepositoryRef,
    RunSummary,
)
from infrastructure.github_client import GitHubAPIError, GitHubClient

logger = logging.getLogger(__name__)

T = TypeVar('T')

FALLBACK_LIMIT = 5000
FALLBACK_RESET_SECONDS = 3600


def make_batches(items: Sequence[T], size: int) -> List[List[T]]:
    """
    Split items into consecutive chunks of at most ``size`` elements.

    Raises:
        ValueError: If size is smaller than 1
    """
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class RateLimitGate:
    """
    Queries the remaining REST quota.
    Fails open to an exhausted status so callers stop safely.
    """

    def __init__(self, github_client: GitHubClient, log: Optional[logging.Logger] = None):
        self.github = github_client
        self.log = log or logger

    def check_quota(self) -> RateLimitStatus:
        """
        Fetch the current quota.

        Returns:
            Live status, or ``remaining=0`` if the lookup failed
        """
        try:
            status = self.github.get_rate_limit()
        except (GitHubAPIError, requests.RequestException) as e:
            self.log.warning(f"Could not check rate limit: {e}")
            return RateLimitStatus(
                remaining=0,
                limit=FALLBACK_LIMIT,
                reset_epoch_seconds=int(time.time()) + FALLBACK_RESET_SECONDS,
            )

        self.log.debug(f"Rate limit: {status.remaining}/{status.limit}")
        return status

    @staticmethod
    def allows(status: RateLimitStatus, threshold: int) -> bool:
        return status.remaining >= threshold


class BatchScheduler:
    """
    Processes repositories in fixed-size batches, strictly in order.
    Re-checks the quota before every batch after the first.
    """

    def __init__(
        self,
        executor: ExecuteStarAction,
        gate: RateLimitGate,
        policy: BatchingPolicy,
        interval_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            executor: Per-repository action
            gate: Rate-limit gate consulted between batches
            policy: Batch size, pause and thresholds
            interval_seconds: Pause between items inside a batch
            sleep: Sleep function, replaced in tests
            log: Logger for progress messages
        """
        self.executor = executor
        self.gate = gate
        self.policy = policy
        self.interval_seconds = interval_seconds
        self.sleep = sleep
        self.log = log or logger

    def run(
        self,
        refs: Sequence[RepositoryRef],
        mode: Mode,
        summary: Optional[RunSummary] = None,
    ) -> RunSummary:
        """
        Process all batches until done or the quota runs low.

        Args:
            refs: Validated repositories in processing order
            mode: Action to apply
            summary: Counters to update (a new one if omitted)

        Returns:
            Summary covering the batches that actually ran
        """
        summary = summary if summary is not None else RunSummary()
        batches = make_batches(refs, self.policy.batch_size)

        self.log.info(
            f"Processing {len(refs)} repositories in {len(batches)} batches"
        )

        for index, batch in enumerate(batches):
            if index > 0:
                status = self.gate.check_quota()
                if not self.gate.allows(status, self.policy.min_remaining_per_batch):
                    self.log.warning(
                        f"Rate limit low ({status.remaining} remaining), "
                        f"stopping before batch {index + 1}/{len(batches)}. "
                        f"Resets at {status.reset_at:%Y-%m-%d %H:%M:%S}"
                    )
                    summary.stopped_early = True
                    summary.rate_limit_reset_at = status.reset_at
                    break

            self.log.info(f"Batch {index + 1}/{len(batches)} ({len(batch)} repos)")

            successes_before = summary.success_count
            errors_before = summary.error_count
            is_last = index == len(batches) - 1
            process_repositories(
                batch,
                mode,
                self.executor,
                summary,
                self.interval_seconds,
                self.sleep,
                pause_after_last=not is_last,
            )
            self.log.info(
                f"Batch {index + 1} done - successes: "
                f"{summary.success_count - successes_before}, "
                f"errors: {summary.error_count - errors_before}"
            )

            if not is_last and self.policy.batch_pause_seconds > 0:
                self.log.info(
                    f"Pausing {self.policy.batch_pause_seconds:g}s between batches..."
                )
                self.sleep(self.policy.batch_pause_seconds)

        return summary
