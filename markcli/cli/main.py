"""Main CLI entry point for the markcli command.

This module provides the Typer application behind `markcli`. Commands fetch
Confluence and Jira content, convert it to Markdown, and print it rendered
(or raw with --raw).

    markcli config add atlassian
    markcli atlassian search -q "deployment process"
    markcli atlassian confluence pages get --id 123456
    markcli atlassian jira issues get --id PROJ-123
"""

import logging
import sys
from typing import Callable, Optional

import typer

from markcli.atlassian_client.auth import Authenticator, has_env_credentials
from markcli.atlassian_client.confluence_api import ConfluenceAPI
from markcli.atlassian_client.errors import (
    APIUnreachableError,
    InvalidCredentialsError,
    MarkcliError,
)
from markcli.atlassian_client.jira_api import JiraAPI
from markcli.cli.config import ConfigManager, extract_site_name, mask_token
from markcli.cli.confluence_command import ConfluenceCommand
from markcli.cli.errors import SearchError, SiteNotFoundError
from markcli.cli.jira_command import JiraCommand
from markcli.cli.models import ExitCode, GlobalOptions, SiteConfig
from markcli.cli.output import OutputHandler
from markcli.cli.search_command import SearchCommand

app = typer.Typer(
    name="markcli",
    help="Read Confluence pages and Jira issues as Markdown in the terminal.",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage site configuration.", no_args_is_help=True)
atlassian_app = typer.Typer(
    help="Interact with Atlassian products (Confluence and Jira).",
    no_args_is_help=True,
)
sites_app = typer.Typer(help="List configured sites and choose the default.",
                        no_args_is_help=True)
confluence_app = typer.Typer(help="Browse Confluence spaces and pages.", no_args_is_help=True)
pages_app = typer.Typer(help="List, search and show Confluence pages.",
                        invoke_without_command=True)
jira_app = typer.Typer(help="Browse Jira projects and issues.", no_args_is_help=True)
issues_app = typer.Typer(help="List, search and show Jira issues.",
                         invoke_without_command=True)

app.add_typer(config_app, name="config")
app.add_typer(atlassian_app, name="atlassian")
atlassian_app.add_typer(sites_app, name="sites")
atlassian_app.add_typer(confluence_app, name="confluence")
atlassian_app.add_typer(jira_app, name="jira")
confluence_app.add_typer(pages_app, name="pages")
jira_app.add_typer(issues_app, name="issues")

# Module logger
logger = logging.getLogger(__name__)

SITE_HELP = "Atlassian site to use (defaults to the default site)"


def _configure_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'markcli' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("markcli")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)


def _options(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, GlobalOptions) else GlobalOptions()


def _output(ctx: typer.Context) -> OutputHandler:
    options = _options(ctx)
    return OutputHandler(
        verbosity=2 if options.debug else 0,
        no_color=options.no_color,
        raw=options.raw,
    )


def _authenticator(site: Optional[str]) -> Authenticator:
    """Build an authenticator for a site profile or, failing that, the environment."""
    try:
        profile = ConfigManager.get_site(site)
    except SiteNotFoundError:
        if site is None and has_env_credentials():
            logger.debug("No site profile configured, using environment credentials")
            return Authenticator()
        raise
    logger.debug(f"Using Atlassian site '{profile.site_name}' ({profile.base_url})")
    return Authenticator.from_site(profile)


def _exit_code_for(error: Exception) -> ExitCode:
    """Map an exception to the process exit code."""
    if isinstance(error, SearchError):
        codes = [_exit_code_for(inner) for inner in error.errors]
        for code in (ExitCode.AUTH_ERROR, ExitCode.NETWORK_ERROR):
            if code in codes:
                return code
        return ExitCode.GENERAL_ERROR
    if isinstance(error, InvalidCredentialsError):
        return ExitCode.AUTH_ERROR
    if isinstance(error, APIUnreachableError):
        return ExitCode.NETWORK_ERROR
    return ExitCode.GENERAL_ERROR


def _execute(ctx: typer.Context, message: str, render: Callable[[], str]) -> None:
    """Run a command body, print its Markdown, and turn failures into exit codes.

    Args:
        ctx: Typer context (carries the global options)
        message: Spinner text shown while the command runs
        render: Callable producing the Markdown output
    """
    output = _output(ctx)
    try:
        with output.spinner(message):
            markdown = render()
    except (MarkcliError, ValueError) as e:
        logger.debug(f"Command failed: {e!r}")
        output.error(str(e))
        raise typer.Exit(_exit_code_for(e))
    except Exception as e:
        logger.exception("Unexpected error")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.markdown(markdown)


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    raw: bool = typer.Option(False, "--raw", help="Print Markdown source instead of rendering it"),
) -> None:
    """Read Confluence pages and Jira issues as Markdown in the terminal."""
    _configure_logging(2 if debug else 0)
    ctx.obj = GlobalOptions(debug=debug, no_color=no_color, raw=raw)


# config


@config_app.command("add")
def config_add(
    ctx: typer.Context,
    platform: str = typer.Argument(..., help="Platform to configure (atlassian)"),
    site_url: Optional[str] = typer.Option(
        None, "--site-url", help="Site URL or name (e.g., yoursite or https://yoursite.atlassian.net)"
    ),
    email: Optional[str] = typer.Option(None, "--email", help="Atlassian account email"),
    token: Optional[str] = typer.Option(None, "--token", help="Atlassian API token"),
) -> None:
    """Add or replace a site profile."""
    output = _output(ctx)
    if platform.lower() != "atlassian":
        output.error(f"unsupported platform: {platform}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if site_url is None:
        site_url = typer.prompt(
            "Enter Atlassian site URL or name (e.g., yoursitename or https://yoursitename.atlassian.net)"
        )
    if email is None:
        email = typer.prompt("Enter your Atlassian email")
    if token is None:
        token = typer.prompt("Enter your Atlassian API token", hide_input=True)

    try:
        site_name = extract_site_name(site_url)
        ConfigManager.add_site(SiteConfig(
            site_name=site_name,
            base_url=f"https://{site_name}.atlassian.net",
            email=email.strip(),
            token=token.strip(),
        ))
    except MarkcliError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.success(f"Successfully configured Atlassian site: {site_name}")


@config_app.command("list")
def config_list(ctx: typer.Context) -> None:
    """Show configured sites with masked tokens."""
    output = _output(ctx)
    try:
        config = ConfigManager.load()
    except MarkcliError as e:
        output.error(f"failed to load config: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if not config.atlassian:
        output.print("No configurations found.")
        return

    output.print("Atlassian configurations:")
    for name in config.site_names:
        site = config.atlassian[name]
        output.print(f"  Site: {name}")
        output.print(f"    Base URL: {site.base_url}")
        output.print(f"    Email: {site.email}")
        output.print(f"    Token: {mask_token(site.token)}")


@config_app.command("remove")
def config_remove(
    ctx: typer.Context,
    platform: str = typer.Argument(..., help="Platform (atlassian)"),
    site: str = typer.Argument(..., help="Site name to remove"),
) -> None:
    """Remove a site profile."""
    output = _output(ctx)
    if platform.lower() != "atlassian":
        output.error(f"unsupported platform: {platform}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    try:
        ConfigManager.remove_site(site)
    except MarkcliError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.success(f"Removed configuration for Atlassian site: {site}")


# atlassian sites


@sites_app.command("list")
def sites_list(ctx: typer.Context) -> None:
    """List configured sites, marking the default."""
    output = _output(ctx)
    try:
        config = ConfigManager.load()
    except MarkcliError as e:
        output.error(f"failed to list sites: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if not config.atlassian:
        output.print("No Atlassian sites configured.")
        return

    output.print("Configured Atlassian sites:")
    for name in config.site_names:
        if name == config.default_atlassian_site:
            output.print(f"* {name} (default)")
        else:
            output.print(f"  {name}")


@sites_app.command("set-default")
def sites_set_default(
    ctx: typer.Context,
    site: str = typer.Argument(..., help="Site name to use by default"),
) -> None:
    """Set the default site."""
    output = _output(ctx)
    try:
        ConfigManager.set_default_site(site)
    except MarkcliError as e:
        output.error(f"failed to set default site: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.success(f"Set {site} as the default Atlassian site")


# atlassian search


@atlassian_app.command("search")
def search(
    ctx: typer.Context,
    query: str = typer.Option(..., "--query", "-q", help="Search query"),
    limit: int = typer.Option(10, "--limit", "-l", help="Number of results per page"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """Search Confluence pages and Jira issues at the same time."""
    def render() -> str:
        auth = _authenticator(site)
        command = SearchCommand(ConfluenceAPI(auth), JiraAPI(auth))
        return command.run(query, limit, page)

    _execute(ctx, "Searching Confluence and Jira...", render)


# atlassian confluence


@confluence_app.command("spaces")
def confluence_spaces(
    ctx: typer.Context,
    include_all: bool = typer.Option(False, "--all", help="Include personal and archived spaces"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """List Confluence spaces."""
    _execute(
        ctx,
        "Fetching spaces...",
        lambda: ConfluenceCommand(ConfluenceAPI(_authenticator(site))).spaces(include_all),
    )


@pages_app.callback()
def confluence_pages(
    ctx: typer.Context,
    space: Optional[str] = typer.Option(None, "--space", help="List pages in a space (e.g., IN)"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """List pages in a space, or use a subcommand to search or show pages."""
    if ctx.invoked_subcommand is not None:
        return
    if not space:
        _output(ctx).error("--space is required (or use 'pages search' / 'pages get')")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _execute(
        ctx,
        f"Fetching pages in {space}...",
        lambda: ConfluenceCommand(ConfluenceAPI(_authenticator(site))).pages(space),
    )


@pages_app.command("search")
def confluence_pages_search(
    ctx: typer.Context,
    query: str = typer.Option(..., "--query", "-q", help="Search query"),
    space: Optional[str] = typer.Option(None, "--space", "-s", help="Space key to search in"),
    limit: int = typer.Option(10, "--limit", "-l", help="Number of results per page"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """Search Confluence pages."""
    _execute(
        ctx,
        "Searching Confluence...",
        lambda: ConfluenceCommand(ConfluenceAPI(_authenticator(site))).search(
            query, space, limit, page
        ),
    )


@pages_app.command("get")
def confluence_pages_get(
    ctx: typer.Context,
    page_id: str = typer.Option(..., "--id", help="Page ID to retrieve"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """Show a Confluence page and its comments."""
    _execute(
        ctx,
        f"Fetching page {page_id}...",
        lambda: ConfluenceCommand(ConfluenceAPI(_authenticator(site))).get(page_id),
    )


# atlassian jira


@jira_app.command("projects")
def jira_projects(
    ctx: typer.Context,
    sort: str = typer.Option("key", "--sort", help="Sort projects by: key, name, type, or style"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """List Jira projects."""
    _execute(
        ctx,
        "Fetching projects...",
        lambda: JiraCommand(JiraAPI(_authenticator(site))).projects(sort),
    )


@issues_app.callback()
def jira_issues(
    ctx: typer.Context,
    project: Optional[str] = typer.Option(
        None, "--project", help="List open issues in a project (e.g., CM)"
    ),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """List open issues in a project, or use a subcommand to search or show issues."""
    if ctx.invoked_subcommand is not None:
        return
    if not project:
        _output(ctx).error("--project is required (or use 'issues search' / 'issues get')")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _execute(
        ctx,
        f"Fetching issues in {project}...",
        lambda: JiraCommand(JiraAPI(_authenticator(site))).issues(project),
    )


@issues_app.command("search")
def jira_issues_search(
    ctx: typer.Context,
    query: str = typer.Option(..., "--query", "-q", help="Search query"),
    project: Optional[str] = typer.Option(None, "--project", "-r", help="Project key to filter issues"),
    limit: int = typer.Option(10, "--limit", "-l", help="Number of results per page"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """Search Jira issues."""
    _execute(
        ctx,
        "Searching Jira...",
        lambda: JiraCommand(JiraAPI(_authenticator(site))).search(query, project, limit, page),
    )


@issues_app.command("get")
def jira_issues_get(
    ctx: typer.Context,
    issue_id: str = typer.Option(..., "--id", help="Issue key or ID to retrieve"),
    site: Optional[str] = typer.Option(None, "--site", help=SITE_HELP),
) -> None:
    """Show a Jira issue and its comments."""
    _execute(
        ctx,
        f"Fetching issue {issue_id}...",
        lambda: JiraCommand(JiraAPI(_authenticator(site))).get(issue_id),
    )


def main() -> None:
    """Entry point for the markcli console script."""
    app()


if __name__ == "__main__":
    main()
