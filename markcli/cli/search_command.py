"""Combined Confluence and Jira search.

Both backends are queried in parallel; the command waits for both, fails
with every collected error if either failed, and otherwise renders a single
Markdown report.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from markcli.atlassian_client.confluence_api import ConfluenceAPI
from markcli.atlassian_client.jira_api import JiraAPI, build_text_jql
from markcli.atlassian_client.models import ConfluenceSearchResponse, JiraSearchResponse
from markcli.formatting import confluence_formatter, jira_formatter

from .errors import SearchError

logger = logging.getLogger(__name__)

MAX_WORKERS = 2


@dataclass
class CombinedResults:
    """Results from both sources for one page of a combined search."""
    start: int
    confluence: ConfluenceSearchResponse
    jira: JiraSearchResponse

    @property
    def is_empty(self) -> bool:
        return not self.confluence.results and not self.jira.issues


class SearchCommand:
    """Runs a text search against Confluence and Jira at the same time.

    Example:
        >>> command = SearchCommand(confluence_api, jira_api)
        >>> markdown = command.run("deployment process", limit=5, page=2)
    """

    def __init__(self, confluence_api: ConfluenceAPI, jira_api: JiraAPI):
        self.confluence_api = confluence_api
        self.jira_api = jira_api

    def search(self, query: str, limit: int = 10, page: int = 1) -> CombinedResults:
        """Query both sources in parallel.

        Args:
            query: Free-text search query
            limit: Results per page, per source
            page: One-based page number

        Returns:
            CombinedResults with both result sets

        Raises:
            ValueError: If limit or page is below 1
            SearchError: If either search failed; carries all failures
        """
        if limit < 1 or page < 1:
            raise ValueError("limit and page must be at least 1")

        start = (page - 1) * limit
        jql = build_text_jql(query)

        with ThreadPoolExecutor(max_workers=MAX_WORKERS) as executor:
            confluence_future = executor.submit(
                self.confluence_api.search_pages, query, None, start, limit
            )
            jira_future = executor.submit(self.jira_api.search_issues, jql, start, limit)

            errors: List[Exception] = []
            confluence: Optional[ConfluenceSearchResponse] = None
            jira: Optional[JiraSearchResponse] = None

            try:
                confluence = confluence_future.result()
            except Exception as e:
                logger.debug(f"Confluence search failed: {e}")
                errors.append(e)

            try:
                jira = jira_future.result()
            except Exception as e:
                logger.debug(f"Jira search failed: {e}")
                errors.append(e)

        if errors:
            raise SearchError(errors)

        return CombinedResults(start=start, confluence=confluence, jira=jira)

    def run(self, query: str, limit: int = 10, page: int = 1) -> str:
        """Search both sources and render the combined Markdown report."""
        results = self.search(query, limit, page)
        return format_combined_results(results)


def format_combined_results(results: CombinedResults) -> str:
    """Render combined results with per-source paging summaries."""
    if results.is_empty:
        return "No results found."

    start = results.start
    output = "# Search Results\n\n"

    confluence = results.confluence
    if confluence.results:
        total = confluence.total_size or confluence.size
        output += "## Confluence Pages\n\n"
        output += "Type: Confluence Page\n\n"
        output += confluence_formatter.format_search_results(confluence.results)
        output += (
            f"\nShowing results {start + 1}-{min(start + confluence.size, total)} "
            f"of {total} (Confluence)\n\n"
        )

    jira = results.jira
    if jira.issues:
        output += "## Jira Issues\n\n"
        output += "Type: Jira Issue\n\n"
        output += jira_formatter.format_search_results(jira.issues)
        output += (
            f"\nShowing results {start + 1}-{min(start + len(jira.issues), jira.total)} "
            f"of {jira.total} (Jira)\n"
        )

    return output
