"""
GitHub REST API client for starring repositories, with retry support.
"""

import logging
import os
from typing import List, Optional
import requests

from core.entities import RateLimitStatus, RepositoryInfo
from infrastructure.retry_utils import exponential_backoff

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Raised when GitHub answers with an unexpected error status."""
    def __init__(self, status_code: int, message: str, url: str = ""):
        self.status_code = status_code
        self.message = message
        self.url = url
        super().__init__(f"HTTP {status_code} for {url}: {message}")


class AuthenticationError(GitHubAPIError):
    """Raised on 401: the token is missing, expired or revoked."""


class NotFoundError(GitHubAPIError):
    """Raised on 404: the repository does not exist or is not visible."""


class ForbiddenError(GitHubAPIError):
    """Raised on 403/429: missing permission or quota exhausted."""
    def __init__(
        self,
        status_code: int,
        message: str,
        url: str = "",
        rate_limit_remaining: Optional[int] = None,
    ):
        self.rate_limit_remaining = rate_limit_remaining
        super().__init__(status_code, message, url)


class TransientAPIError(GitHubAPIError):
    """Raised on 5xx responses, which are worth retrying."""


TRANSIENT_ERRORS = (
    TransientAPIError,
    requests.ConnectionError,
    requests.Timeout,
)


class GitHubClient:
    """
    Client for the parts of GitHub's REST API the bot needs.
    Handles authentication headers, error mapping and retries.
    """

    API_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"
    USER_AGENT = "git-star-bot/1.0"

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token (or uses GITHUB_TOKEN env var)
            timeout: Per-request timeout in seconds
            session: Optional pre-built session, mainly for tests
        """
        self.token = token or os.environ.get("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token required. Set GITHUB_TOKEN environment variable "
                "or pass token parameter."
            )

        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "X-GitHub-Api-Version": self.API_VERSION,
            "User-Agent": self.USER_AGENT,
        })

    @exponential_backoff(
        max_retries=3, base_delay=1.0, max_delay=30.0, retry_on=TRANSIENT_ERRORS
    )
    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Make a REST request with retry logic for transient failures.

        Args:
            method: HTTP method
            path: API path starting with a slash

        Returns:
            Successful response

        Raises:
            GitHubAPIError: Subclass matching the error status
        """
        url = f"{self.API_URL}{path}"
        logger.debug(f"{method} {url}")

        response = self.session.request(method, url, timeout=self.timeout, **kwargs)

        if response.status_code >= 400:
            raise self._error_for(response, url)
        return response

    @staticmethod
    def _error_for(response: requests.Response, url: str) -> GitHubAPIError:
        """Map an error response to the matching exception."""
        try:
            body = response.json()
            message = body.get("message", "") if isinstance(body, dict) else ""
        except ValueError:
            message = (response.text or "")[:200]

        status = response.status_code
        if status == 401:
            return AuthenticationError(status, message, url)
        if status == 404:
            return NotFoundError(status, message, url)
        if status in (403, 429):
            remaining = response.headers.get("X-RateLimit-Remaining")
            return ForbiddenError(
                status,
                message,
                url,
                rate_limit_remaining=int(remaining) if remaining and remaining.isdigit() else None,
            )
        if status >= 500:
            return TransientAPIError(status, message, url)
        return GitHubAPIError(status, message, url)

    def authenticate(self) -> dict:
        """
        Fetch the authenticated user.

        Returns:
            User payload (contains at least ``login``)
        """
        return self._request("GET", "/user").json()

    def get_token_scopes(self) -> List[str]:
        """
        Get the OAuth scopes granted to a classic token.

        Returns:
            Scope names; empty for fine-grained tokens
        """
        response = self._request("GET", "/user")
        scopes = response.headers.get("X-OAuth-Scopes", "")
        return [scope.strip() for scope in scopes.split(",") if scope.strip()]

    def is_starred(self, owner: str, name: str) -> bool:
        """Check whether the authenticated user has starred a repository."""
        try:
            self._request("GET", f"/user/starred/{owner}/{name}")
        except NotFoundError:
            return False
        return True

    def star(self, owner: str, name: str) -> None:
        """Star a repository for the authenticated user."""
        self._request(
            "PUT",
            f"/user/starred/{owner}/{name}",
            headers={"Content-Length": "0"},
        )

    def unstar(self, owner: str, name: str) -> None:
        """Remove the authenticated user's star from a repository."""
        self._request("DELETE", f"/user/starred/{owner}/{name}")

    def get_rate_limit(self) -> RateLimitStatus:
        """
        Get the core REST quota.
        Querying this endpoint does not count against the quota.
        """
        rate = self._request("GET", "/rate_limit").json()["rate"]
        return RateLimitStatus(
            remaining=int(rate["remaining"]),
            limit=int(rate["limit"]),
            reset_epoch_seconds=int(rate["reset"]),
        )

    def get_repository(self, owner: str, name: str) -> RepositoryInfo:
        """Get public metadata of a repository."""
        data = self._request("GET", f"/repos/{owner}/{name}").json()
        return RepositoryInfo(
            full_name=data["full_name"],
            description=data.get("description"),
            stars=data.get("stargazers_count", 0),
            language=data.get("language"),
            url=data["html_url"],
        )
