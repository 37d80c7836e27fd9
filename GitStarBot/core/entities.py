"""
Core domain entities for GitStarBot.
These represent the business objects in our system.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List


class Mode(str, Enum):
    """Action applied to every configured repository."""
    STAR = "star"
    UNSTAR = "unstar"
    CHECK = "check"

    @classmethod
    def parse(cls, value: str) -> "Mode":
        """
        Parse a mode name case-insensitively.

        Raises:
            ValueError: If the value is not a known mode
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid mode '{value}'. Valid modes: {valid}")


class Outcome(str, Enum):
    """Result of running the configured action against one repository."""
    ALREADY_IN_STATE = "already_in_state"
    CHANGED = "changed"
    STARRED = "starred"
    NOT_STARRED = "not_starred"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    OTHER_ERROR = "other_error"

    @property
    def is_error(self) -> bool:
        return self in (Outcome.NOT_FOUND, Outcome.FORBIDDEN, Outcome.OTHER_ERROR)


@dataclass(frozen=True)
class RepositoryRef:
    """
    Identifier of a GitHub repository as ``owner/name``.
    Only the validator should build these.
    """
    owner: str
    name: str

    def __post_init__(self):
        """Validate identifier parts."""
        if not self.owner or not self.name:
            raise ValueError("owner and name are required")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class BatchingPolicy:
    """
    Settings for processing repositories in rate-limit aware batches.
    When a run has no policy, repositories are processed in one simple loop.
    """
    batch_size: int = 50
    batch_pause_seconds: float = 5.0
    min_remaining_to_start: int = 100
    min_remaining_per_batch: int = 50

    def __post_init__(self):
        """Validate policy values."""
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.batch_pause_seconds < 0:
            raise ValueError("batch_pause_seconds cannot be negative")


@dataclass(frozen=True)
class RunConfig:
    """
    Configuration of a single bot run.
    Read-only for the lifetime of the run.
    """
    credential: str
    repositories: List[str]
    username: Optional[str] = None
    interval_seconds: float = 2.0
    mode: Mode = Mode.STAR
    batching: Optional[BatchingPolicy] = None

    def __post_init__(self):
        """Validate run settings."""
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds cannot be negative")

    @property
    def batch_size(self) -> Optional[int]:
        return self.batching.batch_size if self.batching else None


@dataclass(frozen=True)
class RateLimitStatus:
    """Snapshot of the REST API quota for the authenticated user."""
    remaining: int
    limit: int
    reset_epoch_seconds: int

    @property
    def reset_at(self) -> datetime:
        return datetime.fromtimestamp(self.reset_epoch_seconds)


@dataclass(frozen=True)
class RepositoryInfo:
    """Public metadata of a repository, used by the info lookup."""
    full_name: str
    description: Optional[str]
    stars: int
    language: Optional[str]
    url: str


@dataclass
class RunSummary:
    """
    Counters accumulated during a run.
    Reported at the end of the run and then discarded.
    """
    success_count: int = 0
    error_count: int = 0
    starred_count: int = 0
    not_starred_count: int = 0
    unchanged_count: int = 0
    processed_count: int = 0
    stopped_early: bool = False
    rate_limit_reset_at: Optional[datetime] = None
    outcomes: List[Outcome] = field(default_factory=list)

    def record(self, outcome: Outcome) -> None:
        """Update the counters for one processed repository."""
        self.processed_count += 1
        self.outcomes.append(outcome)

        if outcome.is_error:
            self.error_count += 1
        elif outcome is Outcome.CHANGED:
            self.success_count += 1
        elif outcome is Outcome.ALREADY_IN_STATE:
            self.unchanged_count += 1
        elif outcome is Outcome.STARRED:
            self.starred_count += 1
        elif outcome is Outcome.NOT_STARRED:
            self.not_starred_count += 1
