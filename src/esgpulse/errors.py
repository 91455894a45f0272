"""Exception hierarchy shared across the analysis engine and its collaborators."""

from __future__ import annotations


class EsgPulseError(Exception):
    """Base class for all esgpulse errors."""


class ConfigurationError(EsgPulseError):
    """Provider credentials are missing or rejected.

    Never transient: retrying will not help until the configuration changes.
    """


class RemoteUnavailable(EsgPulseError):
    """A remote inference call timed out, failed, or returned a malformed body."""


class AnalysisFailure(EsgPulseError):
    """Analysis could not produce a result, even after local fallback."""

    def __init__(self, message: str = "Failed to analyze article. Please try again.") -> None:
        super().__init__(message)


class NewsError(EsgPulseError):
    """The news search provider failed to return articles."""


class ValidationError(EsgPulseError):
    """An article failed the ingestion field checks."""
