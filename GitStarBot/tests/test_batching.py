"""
Tests for batch partitioning, the rate-limit gate and the batch scheduler.
"""

import math
import time

import pytest
from unittest.mock import Mock

from core.actions import ExecuteStarAction
from core.batching import BatchScheduler, RateLimitGate, make_batches
from core.entities import BatchingPolicy, Mode, RateLimitStatus, RepositoryRef
from infrastructure.github_client import TransientAPIError


def refs(count):
    return [RepositoryRef("acme", f"repo-{i}") for i in range(count)]


class TestMakeBatches:
    """Test make_batches."""

    @pytest.mark.parametrize("n,size", [(0, 3), (1, 3), (6, 3), (7, 3), (10, 1), (3, 50)])
    def test_partitioning(self, n, size):
        items = list(range(n))
        batches = make_batches(items, size)

        assert len(batches) == math.ceil(n / size)
        assert all(len(batch) == size for batch in batches[:-1])
        assert [item for batch in batches for item in batch] == items

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            make_batches([1, 2], 0)


class TestRateLimitGate:
    """Test RateLimitGate."""

    def test_returns_live_status(self, make_github):
        gate = RateLimitGate(make_github(rate_limits=[1234]))
        assert gate.check_quota().remaining == 1234

    def test_fails_open_to_exhausted(self):
        github = Mock()
        github.get_rate_limit.side_effect = TransientAPIError(503, "unavailable")

        status = RateLimitGate(github).check_quota()

        assert status.remaining == 0
        assert status.limit == 5000
        assert status.reset_epoch_seconds > time.time()

    def test_allows(self):
        status = RateLimitStatus(remaining=50, limit=5000, reset_epoch_seconds=0)
        assert RateLimitGate.allows(status, 50)
        assert not RateLimitGate.allows(status, 51)


class TestBatchScheduler:
    """Test BatchScheduler."""

    def make_scheduler(self, github, sleeps, batch_size=2, pause=5.0, interval=1.0):
        policy = BatchingPolicy(batch_size=batch_size, batch_pause_seconds=pause)
        return BatchScheduler(
            ExecuteStarAction(github),
            RateLimitGate(github),
            policy,
            interval,
            sleeps.append,
        )

    def test_processes_all_batches_in_order(self, make_github, sleeps):
        github = make_github(rate_limits=[5000])
        scheduler = self.make_scheduler(github, sleeps)

        summary = scheduler.run(refs(5), Mode.STAR)

        assert summary.success_count == 5
        assert not summary.stopped_early
        assert [c[1] for c in github.mutating_calls()] == [r.full_name for r in refs(5)]
        # item interval after every item but the last, batch pause on top
        assert sleeps == [1.0, 1.0, 5.0, 1.0, 1.0, 5.0]

    def test_gate_not_consulted_before_first_batch(self, make_github, sleeps):
        github = make_github()
        self.make_scheduler(github, sleeps, batch_size=10).run(refs(3), Mode.CHECK)
        assert ("get_rate_limit",) not in github.calls

    def test_stops_when_quota_low(self, make_github, sleeps):
        github = make_github(rate_limits=[40])
        scheduler = self.make_scheduler(github, sleeps)

        summary = scheduler.run(refs(6), Mode.STAR)

        assert summary.stopped_early is True
        assert summary.processed_count == 2
        assert summary.success_count == 2
        assert summary.rate_limit_reset_at is not None
        assert len(github.mutating_calls()) == 2

    def test_stops_midway(self, make_github, sleeps):
        github = make_github(rate_limits=[500, 10])
        summary = self.make_scheduler(github, sleeps).run(refs(6), Mode.CHECK)

        assert summary.processed_count == 4
        assert summary.not_starred_count == 4
        assert summary.stopped_early is True

    def test_gate_failure_stops_batches(self, sleeps):
        github = Mock()
        github.is_starred.return_value = True
        github.get_rate_limit.side_effect = TransientAPIError(500, "boom")

        summary = self.make_scheduler(github, sleeps).run(refs(4), Mode.CHECK)

        assert summary.processed_count == 2
        assert summary.stopped_early is True

    def test_no_pause_when_zero(self, make_github, sleeps):
        github = make_github()
        self.make_scheduler(github, sleeps, pause=0, interval=0).run(refs(4), Mode.CHECK)
        assert sleeps == []
