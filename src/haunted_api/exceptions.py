class HauntedApiError(Exception):
    """Base exception for the Haunted API House project."""


class ConfigurationError(HauntedApiError):
    """Raised when a session cannot start (no endpoints, bad config file, etc.)."""
