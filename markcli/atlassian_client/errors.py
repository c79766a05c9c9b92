"""Typed exception hierarchy for Atlassian-related errors.

This module defines the custom exceptions raised by the Confluence and Jira
clients. All exceptions inherit from MarkcliError so callers can catch any
application-level failure in one place, and each carries the context needed
to produce a helpful message.
"""

from typing import Optional


class MarkcliError(Exception):
    """Base exception for all markcli errors.

    Use this to catch any application-level error from the tool.
    """
    pass


class AtlassianError(MarkcliError):
    """Base exception for all Confluence and Jira API errors."""
    pass


class InvalidCredentialsError(AtlassianError):
    """Raised when API credentials are missing or authentication fails."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"authentication failed: please check your API token and email "
            f"(user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class ResourceNotFoundError(AtlassianError):
    """Raised when a requested page, issue or endpoint does not exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class APIUnreachableError(AtlassianError):
    """Raised when the Atlassian API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(AtlassianError):
    """Raised when an API call is rejected (access denied, bad query, server error)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        if status_code is not None:
            full_message = f"{message} (status code: {status_code})"
        else:
            full_message = message
        super().__init__(full_message)
        self.status_code = status_code
        self.original_message = message


class ConversionError(MarkcliError):
    """Raised when content conversion between formats fails."""

    def __init__(self, message: str):
        super().__init__(message)
