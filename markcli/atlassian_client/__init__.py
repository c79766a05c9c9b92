"""Atlassian client library for markcli.

This package wraps the Confluence and Jira Cloud REST APIs, translating
responses into dataclasses and failures into a typed exception hierarchy.
"""

from .errors import (
    MarkcliError,
    AtlassianError,
    InvalidCredentialsError,
    ResourceNotFoundError,
    APIUnreachableError,
    APIAccessError,
    ConversionError,
)

__all__ = [
    "MarkcliError",
    "AtlassianError",
    "InvalidCredentialsError",
    "ResourceNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "ConversionError",
]
