"""Data models for CLI operations.

All models use dataclasses; the config models mirror the JSON layout of
~/.config/markcli/config.json.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, validation, API errors)
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API availability issues
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class SiteConfig:
    """Connection profile for one Atlassian Cloud site.

    Attributes:
        site_name: Short name, the first label of the site hostname
        base_url: Site URL (e.g., https://yoursite.atlassian.net)
        email: Atlassian account email
        token: Atlassian API token
    """
    site_name: str
    base_url: str
    email: str
    token: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "site_name": self.site_name,
            "base_url": self.base_url,
            "email": self.email,
            "token": self.token,
        }


@dataclass
class AppConfig:
    """Whole markcli configuration file.

    Attributes:
        atlassian: Site profiles keyed by site name
        default_atlassian_site: Site used when --site is not given
        extra: Top-level keys markcli does not manage, written back unchanged
    """
    atlassian: Dict[str, SiteConfig] = field(default_factory=dict)
    default_atlassian_site: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def site_names(self) -> List[str]:
        return sorted(self.atlassian)


@dataclass
class GlobalOptions:
    """Options given before the subcommand, shared through the Typer context."""
    debug: bool = False
    no_color: bool = False
    raw: bool = False
