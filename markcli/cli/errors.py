"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError, which in turn inherits from
MarkcliError, so command handlers can map any failure to an exit code.
"""

from typing import List, Optional

from markcli.atlassian_client.errors import MarkcliError


class CLIError(MarkcliError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when the configuration file is invalid or cannot be used."""

    def __init__(self, message: str):
        super().__init__(message)


class ConfigFilesystemError(ConfigError):
    """Raised when the configuration file cannot be read or written."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Config file operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class SiteNotFoundError(ConfigError):
    """Raised when no Atlassian site profile matches the request."""

    def __init__(self, site_name: Optional[str] = None):
        if site_name:
            message = f"no Atlassian configuration found for site: {site_name}"
        else:
            message = "no Atlassian configuration found"
        super().__init__(message)
        self.site_name = site_name


class SearchError(CLIError):
    """Raised when one or more sources of a combined search failed.

    Attributes:
        errors: Every failure, in the order the sources were queried
    """

    def __init__(self, errors: List[Exception]):
        details = "; ".join(str(error) for error in errors)
        super().__init__(f"search errors occurred: {details}")
        self.errors = errors
