"""Custom exceptions for review-bot."""


class ReviewBotError(Exception):
    """Base exception for all review-bot errors."""


class ConfigError(ReviewBotError):
    """Configuration and pull request context errors."""


class ParserError(ReviewBotError):
    """Source parsing errors."""


class GitHubError(ReviewBotError):
    """Failed GitHub API calls."""

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


class DiffError(ReviewBotError):
    """Raised when the list of changed files cannot be computed."""
