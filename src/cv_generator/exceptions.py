"""Exceptions raised by CV Generator."""


class CVGeneratorError(Exception):
    """Base class for all CV Generator errors."""


class RenderError(CVGeneratorError):
    """Raised when the PDF layout fails.

    Rendering is all-or-nothing: a partially painted document is never
    returned to the caller.

    Attributes:
        message: Error description
        section: Name of the section being painted when the failure happened
    """

    def __init__(self, message: str, section: str | None = None):
        self.message = message
        self.section = section
        if section:
            message = f"{message} (while rendering section '{section}')"
        super().__init__(message)


class LLMError(CVGeneratorError):
    """Raised when a model backend cannot produce a completion."""


class EnhancementError(CVGeneratorError):
    """Raised when a model completion cannot be turned into CV data."""

    def __init__(self, message: str, raw: str | None = None):
        self.message = message
        self.raw = raw
        super().__init__(message)


class GitHubError(CVGeneratorError):
    """Raised when repository metadata cannot be fetched."""


class GitHubRateLimitError(GitHubError):
    """The GitHub API rate limit is exhausted."""


class GitHubUserNotFoundError(GitHubError):
    """The requested GitHub user does not exist."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"GitHub user not found: {username}")


class GitHubNetworkError(GitHubError):
    """The GitHub API could not be reached."""
