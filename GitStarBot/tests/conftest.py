"""
Shared fixtures: an in-memory stand-in for the GitHub client.
"""

import time

import pytest

from core.entities import RateLimitStatus
from infrastructure.github_client import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    TransientAPIError,
)


class FakeGitHubClient:
    """Records calls and keeps starred state in a set."""

    def __init__(
        self,
        starred=(),
        missing=(),
        forbidden=(),
        broken=(),
        login="octocat",
        rate_limits=None,
        auth_error=None,
    ):
        self.starred = set(starred)
        self.missing = set(missing)
        self.forbidden = set(forbidden)
        self.broken = set(broken)
        self.login = login
        self.rate_limits = list(rate_limits or [])
        self.auth_error = auth_error
        self.calls = []

    def authenticate(self):
        self.calls.append(("authenticate",))
        if self.auth_error:
            raise self.auth_error
        return {"login": self.login}

    def _guard(self, full_name):
        if full_name in self.forbidden:
            raise ForbiddenError(403, "Forbidden", full_name)
        if full_name in self.broken:
            raise TransientAPIError(502, "Bad Gateway", full_name)

    def is_starred(self, owner, name):
        full_name = f"{owner}/{name}"
        self.calls.append(("is_starred", full_name))
        self._guard(full_name)
        return full_name in self.starred

    def star(self, owner, name):
        full_name = f"{owner}/{name}"
        self.calls.append(("star", full_name))
        if full_name in self.missing:
            raise NotFoundError(404, "Not Found", full_name)
        self.starred.add(full_name)

    def unstar(self, owner, name):
        full_name = f"{owner}/{name}"
        self.calls.append(("unstar", full_name))
        if full_name in self.missing:
            raise NotFoundError(404, "Not Found", full_name)
        self.starred.discard(full_name)

    def get_rate_limit(self):
        self.calls.append(("get_rate_limit",))
        remaining = 5000
        if self.rate_limits:
            remaining = self.rate_limits.pop(0) if len(self.rate_limits) > 1 else self.rate_limits[0]
        return RateLimitStatus(
            remaining=remaining,
            limit=5000,
            reset_epoch_seconds=int(time.time()) + 3600,
        )

    def mutating_calls(self):
        return [call for call in self.calls if call[0] in ("star", "unstar")]

    def repo_calls(self):
        return [call[1] for call in self.calls if len(call) == 2]


@pytest.fixture
def fake_github():
    return FakeGitHubClient()


@pytest.fixture
def sleeps():
    """Durations passed to ``sleeps.append`` used as the sleep function."""
    return []


@pytest.fixture
def unauthorized():
    return AuthenticationError(401, "Bad credentials", "https://api.github.com/user")


@pytest.fixture
def make_github():
    """Factory for fakes with preset state."""
    return FakeGitHubClient
