"""Custom exceptions for the PR labeler."""


class LabelerError(Exception):
    """Base exception for all labeler errors."""


class ConfigurationError(LabelerError):
    """The labeler configuration is invalid or unsupported."""


class EventPayloadError(LabelerError):
    """The webhook payload is not a usable pull request event."""


class GitHubAPIError(LabelerError):
    """A GitHub REST API call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
