"""Authentication module for resolving Atlassian credentials.

Credentials normally come from a site profile in the markcli config file.
Environment variables (optionally loaded from a .env file with python-dotenv)
take precedence, which lets scripts and CI run without a config file.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

URL_ENV = "MARKCLI_ATLASSIAN_URL"
EMAIL_ENV = "MARKCLI_ATLASSIAN_EMAIL"
TOKEN_ENV = "MARKCLI_ATLASSIAN_TOKEN"


class Credentials(NamedTuple):
    """Atlassian API credentials."""
    url: str
    user: str
    api_token: str


class Authenticator:
    """Resolves and validates Atlassian credentials.

    Credentials are never cached or logged.

    Environment overrides:
        MARKCLI_ATLASSIAN_URL: Site base URL (e.g., https://yoursite.atlassian.net)
        MARKCLI_ATLASSIAN_EMAIL: Atlassian account email address
        MARKCLI_ATLASSIAN_TOKEN: Atlassian API token

    Example:
        >>> auth = Authenticator.from_site(site_config)
        >>> creds = auth.get_credentials()
    """

    def __init__(
        self,
        url: Optional[str] = None,
        user: Optional[str] = None,
        api_token: Optional[str] = None,
    ):
        """Initialize the authenticator and load environment variables from .env.

        Args:
            url: Site base URL from the config profile
            user: Account email from the config profile
            api_token: API token from the config profile
        """
        load_dotenv()
        self._url = url
        self._user = user
        self._api_token = api_token

    @classmethod
    def from_site(cls, site) -> "Authenticator":
        """Create an authenticator from a site profile (or None for env-only)."""
        if site is None:
            return cls()
        return cls(url=site.base_url, user=site.email, api_token=site.token)

    def get_credentials(self) -> Credentials:
        """Get credentials, preferring environment variables over the profile.

        Returns:
            Credentials: A named tuple containing url, user, and api_token

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        url = os.getenv(URL_ENV) or self._url
        user = os.getenv(EMAIL_ENV) or self._user
        api_token = os.getenv(TOKEN_ENV) or self._api_token

        if not url or not user or not api_token:
            raise InvalidCredentialsError(
                user=user if user else "unknown",
                endpoint=url if url else "unknown",
            )

        return Credentials(url=url.rstrip("/"), user=user, api_token=api_token)


def has_env_credentials() -> bool:
    """Check whether a complete set of credentials is available from the environment."""
    load_dotenv()
    return all(os.getenv(name) for name in (URL_ENV, EMAIL_ENV, TOKEN_ENV))
