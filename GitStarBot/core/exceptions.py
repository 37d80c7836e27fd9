"""
Fatal errors that abort a bot run.
Per-repository failures never raise these; they become Outcome values.
"""


class StarBotError(Exception):
    """Base class for errors that stop the whole run."""


class ConfigurationError(StarBotError):
    """Raised when the run configuration is missing or invalid."""


class AuthenticationFailed(StarBotError):
    """Raised when GitHub rejects the configured token."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Authentication failed: {reason}")
