"""Configuration file loading and saving.

Site profiles live in a JSON file, by default ~/.config/markcli/config.json
(override with MARKCLI_CONFIG):

    {
      "atlassian": {
        "mysite": {"site_name": "mysite", "base_url": "https://mysite.atlassian.net",
                   "email": "me@example.com", "token": "..."}
      },
      "default_atlassian_site": "mysite"
    }

A missing file is treated as an empty configuration.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .errors import ConfigError, ConfigFilesystemError, SiteNotFoundError
from .models import AppConfig, SiteConfig

logger = logging.getLogger(__name__)

CONFIG_ENV = "MARKCLI_CONFIG"


def extract_site_name(site_input: str) -> str:
    """Extract the site name from an Atlassian URL or a bare name.

    Examples:
        >>> extract_site_name("https://acme.atlassian.net/wiki")
        'acme'
        >>> extract_site_name("acme")
        'acme'

    Raises:
        ConfigError: If no site name can be found
    """
    site_input = site_input.strip()
    if not site_input:
        raise ConfigError("invalid input: empty site name")
    if "." not in site_input and "/" not in site_input:
        return site_input

    parsed = urlparse(site_input if "://" in site_input else f"https://{site_input}")
    hostname = parsed.hostname
    if not hostname:
        raise ConfigError("invalid input: empty hostname")
    return hostname.split(".")[0]


def mask_token(token: str) -> str:
    """Mask a token for display, keeping the first and last four characters."""
    if len(token) <= 8:
        return "********"
    return token[:4] + "..." + token[-4:]


class ConfigManager:
    """Handles configuration loading, validation, and saving.

    All methods take an optional path; by default the path comes from
    MARKCLI_CONFIG or ~/.config/markcli/config.json.
    """

    DEFAULT_CONFIG_DIR = Path(".config") / "markcli"
    DEFAULT_CONFIG_FILE = "config.json"

    @classmethod
    def default_path(cls) -> Path:
        """Resolve the config file path."""
        override = os.getenv(CONFIG_ENV)
        if override:
            return Path(override).expanduser()
        return Path.home() / cls.DEFAULT_CONFIG_DIR / cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> AppConfig:
        """Load and parse the config file.

        Args:
            config_path: Path to the JSON config file

        Returns:
            AppConfig; empty when the file does not exist

        Raises:
            ConfigFilesystemError: If the file exists but cannot be read
            ConfigError: If the file is not valid JSON or has the wrong shape
        """
        path = Path(config_path) if config_path else cls.default_path()
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            logger.debug(f"No config file at {path}, using empty configuration")
            return AppConfig()
        except PermissionError:
            raise ConfigFilesystemError(str(path), 'read', 'Permission denied')
        except OSError as e:
            raise ConfigFilesystemError(str(path), 'read', str(e))

        if not content.strip():
            return AppConfig()

        try:
            data = json.loads(content)
        except ValueError as e:
            raise ConfigError(f"failed to parse config file {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(
                f"config must be a JSON object, got {type(data).__name__}"
            )

        return cls._parse_config(data)

    @classmethod
    def _parse_config(cls, data: Dict[str, Any]) -> AppConfig:
        sites_data = data.get("atlassian") or {}
        if not isinstance(sites_data, dict):
            raise ConfigError("'atlassian' must be a JSON object of site profiles")

        sites = {}
        for name, profile in sites_data.items():
            if not isinstance(profile, dict):
                raise ConfigError(f"profile for site '{name}' must be a JSON object")
            sites[name] = SiteConfig(
                site_name=str(profile.get("site_name") or name),
                base_url=str(profile.get("base_url") or ""),
                email=str(profile.get("email") or ""),
                token=str(profile.get("token") or ""),
            )

        extra = {
            key: value for key, value in data.items()
            if key not in ("atlassian", "default_atlassian_site")
        }
        return AppConfig(
            atlassian=sites,
            default_atlassian_site=str(data.get("default_atlassian_site") or ""),
            extra=extra,
        )

    @classmethod
    def save(cls, config: AppConfig, config_path: Optional[Path] = None) -> None:
        """Save the configuration as indented JSON.

        Raises:
            ConfigFilesystemError: If the file cannot be written
        """
        path = Path(config_path) if config_path else cls.default_path()
        data: Dict[str, Any] = dict(config.extra)
        data["atlassian"] = {
            name: site.to_dict() for name, site in config.atlassian.items()
        }
        data["default_atlassian_site"] = config.default_atlassian_site

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
                f.write("\n")
        except PermissionError:
            raise ConfigFilesystemError(str(path), 'write', 'Permission denied')
        except OSError as e:
            raise ConfigFilesystemError(str(path), 'write', str(e))

        logger.debug(f"Saved configuration to {path}")

    @classmethod
    def get_site(cls, site_name: Optional[str] = None,
                 config_path: Optional[Path] = None) -> SiteConfig:
        """Resolve a site profile.

        Without a site name the default site is used, or the first configured
        site (alphabetically) when no default is set.

        Raises:
            SiteNotFoundError: If nothing is configured or the site is unknown
        """
        config = cls.load(config_path)
        if not config.atlassian:
            raise SiteNotFoundError()

        if not site_name:
            site_name = config.default_atlassian_site or config.site_names[0]

        site = config.atlassian.get(site_name)
        if site is None:
            raise SiteNotFoundError(site_name)
        return site

    @classmethod
    def list_sites(cls, config_path: Optional[Path] = None) -> List[str]:
        """List configured site names, sorted."""
        return cls.load(config_path).site_names

    @classmethod
    def add_site(cls, site: SiteConfig, config_path: Optional[Path] = None) -> None:
        """Add or replace a site profile."""
        config = cls.load(config_path)
        config.atlassian[site.site_name] = site
        cls.save(config, config_path)

    @classmethod
    def remove_site(cls, site_name: str, config_path: Optional[Path] = None) -> None:
        """Remove a site profile, clearing the default if it pointed there.

        Raises:
            SiteNotFoundError: If the site is not configured
        """
        config = cls.load(config_path)
        if site_name not in config.atlassian:
            raise SiteNotFoundError(site_name)
        del config.atlassian[site_name]
        if config.default_atlassian_site == site_name:
            config.default_atlassian_site = ""
        cls.save(config, config_path)

    @classmethod
    def set_default_site(cls, site_name: str, config_path: Optional[Path] = None) -> None:
        """Make a configured site the default.

        Raises:
            SiteNotFoundError: If the site is not configured
        """
        config = cls.load(config_path)
        if site_name not in config.atlassian:
            raise SiteNotFoundError(site_name)
        config.default_atlassian_site = site_name
        cls.save(config, config_path)

    @classmethod
    def get_default_site(cls, config_path: Optional[Path] = None) -> str:
        return cls.load(config_path).default_atlassian_site
