"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from markcli.atlassian_client.auth import Authenticator
from markcli.atlassian_client.errors import (
    APIUnreachableError,
    InvalidCredentialsError,
    ResourceNotFoundError,
)
from markcli.atlassian_client.models import (
    ConfluencePage,
    ConfluenceSearchResponse,
    JiraIssue,
    JiraSearchResponse,
)
from markcli.cli.config import ConfigManager
from markcli.cli.errors import SearchError, SiteNotFoundError
from markcli.cli.main import _authenticator, _configure_logging, _exit_code_for, app
from markcli.cli.models import ExitCode, SiteConfig


runner = CliRunner()


@pytest.fixture
def configured_site():
    """Write a site profile to the (temporary) config file."""
    site = SiteConfig(
        site_name="acme",
        base_url="https://acme.atlassian.net",
        email="me@acme.com",
        token="acme-secret-token",
    )
    ConfigManager.add_site(site)
    return site


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    @pytest.mark.parametrize("verbosity,level", [
        (0, logging.WARNING),
        (1, logging.INFO),
        (2, logging.DEBUG),
    ])
    def test_sets_package_logger_level(self, verbosity, level):
        _configure_logging(verbosity)

        app_logger = logging.getLogger("markcli")
        assert app_logger.level == level
        assert len(app_logger.handlers) == 1

    def test_repeated_calls_do_not_stack_handlers(self):
        _configure_logging(0)
        _configure_logging(2)

        assert len(logging.getLogger("markcli").handlers) == 1


class TestExitCodes:
    """Test cases for _exit_code_for."""

    def test_direct_errors(self):
        assert _exit_code_for(InvalidCredentialsError("u", "e")) == ExitCode.AUTH_ERROR
        assert _exit_code_for(APIUnreachableError("e")) == ExitCode.NETWORK_ERROR
        assert _exit_code_for(ResourceNotFoundError("Page", "1")) == ExitCode.GENERAL_ERROR
        assert _exit_code_for(ValueError("bad")) == ExitCode.GENERAL_ERROR

    def test_search_error_uses_most_specific_cause(self):
        error = SearchError([APIUnreachableError("e"), InvalidCredentialsError("u", "e")])
        assert _exit_code_for(error) == ExitCode.AUTH_ERROR


class TestAuthenticatorResolution:
    """Test cases for _authenticator."""

    def test_uses_site_profile(self, configured_site):
        creds = _authenticator(None).get_credentials()
        assert creds.url == "https://acme.atlassian.net"

    @patch('markcli.cli.main.has_env_credentials', return_value=True)
    def test_falls_back_to_environment(self, mock_has_env):
        assert isinstance(_authenticator(None), Authenticator)

    @patch('markcli.cli.main.has_env_credentials', return_value=True)
    def test_named_site_must_exist(self, mock_has_env):
        with pytest.raises(SiteNotFoundError):
            _authenticator("other")

    @patch('markcli.cli.main.has_env_credentials', return_value=False)
    def test_nothing_configured(self, mock_has_env):
        with pytest.raises(SiteNotFoundError):
            _authenticator(None)


class TestConfigCommands:
    """Test cases for the config and sites commands."""

    def test_add_with_options(self):
        result = runner.invoke(app, [
            "config", "add", "atlassian",
            "--site-url", "https://acme.atlassian.net/wiki",
            "--email", "me@acme.com",
            "--token", "tok",
        ])

        assert result.exit_code == 0
        site = ConfigManager.get_site("acme")
        assert site.base_url == "https://acme.atlassian.net"
        assert site.email == "me@acme.com"

    def test_add_prompts_for_missing_values(self):
        result = runner.invoke(app, ["config", "add", "atlassian"],
                               input="acme\nme@acme.com\nsecret\n")

        assert result.exit_code == 0
        assert ConfigManager.get_site("acme").token == "secret"

    def test_add_unsupported_platform(self):
        result = runner.invoke(app, ["config", "add", "notion", "--site-url", "x",
                                     "--email", "e", "--token", "t"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "unsupported platform: notion" in result.output

    def test_list_masks_tokens(self, configured_site):
        result = runner.invoke(app, ["config", "list"])

        assert result.exit_code == 0
        assert "Site: acme" in result.output
        assert "Token: acme...oken" in result.output
        assert "acme-secret-token" not in result.output

    def test_list_empty(self):
        result = runner.invoke(app, ["config", "list"])
        assert "No configurations found." in result.output

    def test_remove(self, configured_site):
        result = runner.invoke(app, ["config", "remove", "atlassian", "acme"])

        assert result.exit_code == 0
        assert ConfigManager.list_sites() == []

    def test_remove_unknown_site(self):
        result = runner.invoke(app, ["config", "remove", "atlassian", "ghost"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "no Atlassian configuration found for site: ghost" in result.output

    def test_sites_list_and_set_default(self, configured_site):
        ConfigManager.add_site(SiteConfig("beta", "https://beta.atlassian.net", "b@b.com", "tok"))

        result = runner.invoke(app, ["atlassian", "sites", "set-default", "beta"])
        assert result.exit_code == 0
        assert "Set beta as the default Atlassian site" in result.output

        result = runner.invoke(app, ["atlassian", "sites", "list"])
        assert "Configured Atlassian sites:" in result.output
        assert "  acme" in result.output
        assert "* beta (default)" in result.output


class TestAtlassianCommands:
    """Test cases for the Confluence, Jira and search commands."""

    @patch('markcli.cli.main.ConfluenceAPI')
    def test_page_get_raw(self, mock_api_cls, configured_site):
        api = mock_api_cls.return_value
        api.get_page.return_value = ConfluencePage(id="123", title="Runbook", status="current")
        api.get_footer_comments.return_value = []

        result = runner.invoke(app, ["--raw", "atlassian", "confluence", "pages", "get", "--id", "123"])

        assert result.exit_code == 0
        assert "# Runbook" in result.output
        assert "- **ID**: 123" in result.output
        api.get_page.assert_called_once_with("123")

    @patch('markcli.cli.main.ConfluenceAPI')
    def test_pages_in_space(self, mock_api_cls, configured_site):
        mock_api_cls.return_value.list_space_pages.return_value = ConfluenceSearchResponse()

        result = runner.invoke(app, ["--raw", "atlassian", "confluence", "pages", "--space", "OPS"])

        assert result.exit_code == 0
        assert "No pages found in space OPS." in result.output

    def test_pages_requires_space_or_subcommand(self, configured_site):
        result = runner.invoke(app, ["atlassian", "confluence", "pages"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "--space is required" in result.output

    @patch('markcli.cli.main.JiraAPI')
    def test_issue_get(self, mock_api_cls, configured_site):
        api = mock_api_cls.return_value
        api.get_issue.return_value = JiraIssue(id="1", key="PROJ-1", summary="Fix login")
        api.get_comments.return_value = []

        result = runner.invoke(app, ["--raw", "atlassian", "jira", "issues", "get", "--id", "PROJ-1"])

        assert result.exit_code == 0
        assert "# Fix login" in result.output

    @patch('markcli.cli.main.JiraAPI')
    def test_issues_search_paging(self, mock_api_cls, configured_site):
        api = mock_api_cls.return_value
        api.search_issues.return_value = JiraSearchResponse()

        result = runner.invoke(app, ["--raw", "atlassian", "jira", "issues", "search",
                                     "-q", "login", "-r", "PROJ", "-l", "5", "-p", "2"])

        assert result.exit_code == 0
        api.search_issues.assert_called_once_with('project = "PROJ" AND text ~ "login"', 5, 5)

    @patch('markcli.cli.main.JiraAPI')
    def test_projects_empty(self, mock_api_cls, configured_site):
        mock_api_cls.return_value.list_projects.return_value = []

        result = runner.invoke(app, ["atlassian", "jira", "projects", "--sort", "key"])

        assert result.exit_code == 0
        assert "No projects found." in result.output

    @patch('markcli.cli.main.ConfluenceAPI')
    def test_invalid_credentials_exit_code(self, mock_api_cls, configured_site):
        mock_api_cls.return_value.get_page.side_effect = InvalidCredentialsError(
            "me@acme.com", "https://acme.atlassian.net"
        )

        result = runner.invoke(app, ["atlassian", "confluence", "pages", "get", "--id", "1"])

        assert result.exit_code == ExitCode.AUTH_ERROR
        assert "authentication failed" in result.output

    @patch('markcli.cli.main.ConfluenceAPI')
    def test_unreachable_exit_code(self, mock_api_cls, configured_site):
        mock_api_cls.return_value.list_spaces.side_effect = APIUnreachableError(
            "https://acme.atlassian.net"
        )

        result = runner.invoke(app, ["atlassian", "confluence", "spaces"])

        assert result.exit_code == ExitCode.NETWORK_ERROR

    @patch('markcli.cli.main.ConfluenceAPI')
    def test_unexpected_error(self, mock_api_cls, configured_site):
        mock_api_cls.return_value.list_spaces.side_effect = RuntimeError("boom")

        result = runner.invoke(app, ["atlassian", "confluence", "spaces"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Unexpected error: boom" in result.output

    def test_missing_configuration(self):
        result = runner.invoke(app, ["atlassian", "confluence", "spaces"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "no Atlassian configuration found" in result.output

    @patch('markcli.cli.main.JiraAPI')
    @patch('markcli.cli.main.ConfluenceAPI')
    def test_combined_search(self, mock_confluence_cls, mock_jira_cls, configured_site):
        mock_confluence_cls.return_value.search_pages.return_value = ConfluenceSearchResponse()
        mock_jira_cls.return_value.search_issues.return_value = JiraSearchResponse(
            issues=[JiraIssue(id="1", key="PROJ-1", summary="Deploy fails")], total=1
        )

        result = runner.invoke(app, ["--raw", "atlassian", "search", "-q", "deploy"])

        assert result.exit_code == 0
        assert "## Jira Issues" in result.output
        assert "Showing results 1-1 of 1 (Jira)" in result.output

    @patch('markcli.cli.main.JiraAPI')
    @patch('markcli.cli.main.ConfluenceAPI')
    def test_combined_search_failure(self, mock_confluence_cls, mock_jira_cls, configured_site):
        mock_confluence_cls.return_value.search_pages.return_value = ConfluenceSearchResponse()
        mock_jira_cls.return_value.search_issues.side_effect = InvalidCredentialsError(
            "me@acme.com", "https://acme.atlassian.net"
        )

        result = runner.invoke(app, ["atlassian", "search", "-q", "deploy"])

        assert result.exit_code == ExitCode.AUTH_ERROR
        assert "search errors occurred" in result.output
