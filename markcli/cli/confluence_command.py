"""Confluence commands: spaces, pages in a space, page search, page details."""

import logging
from typing import Optional

from markcli.atlassian_client.confluence_api import ConfluenceAPI
from markcli.atlassian_client.errors import AtlassianError
from markcli.formatting import confluence_formatter

logger = logging.getLogger(__name__)

SPACE_PAGE_LIMIT = 50


def paging_summary(start: int, shown: int, total: int, page: int, limit: int) -> str:
    """Describe which slice of a paginated result set is displayed."""
    total_pages = (total + limit - 1) // limit if limit else 0
    return (
        f"Showing results {start + 1}-{min(start + shown, total)} of {total} "
        f"(Page {page} of {total_pages})\n"
    )


class ConfluenceCommand:
    """Builds Markdown output for the Confluence subcommands."""

    def __init__(self, api: ConfluenceAPI):
        self.api = api

    def spaces(self, include_all: bool = False) -> str:
        return confluence_formatter.format_spaces(self.api.list_spaces(include_all))

    def pages(self, space_key: str) -> str:
        """List recently modified pages in a space."""
        response = self.api.list_space_pages(space_key, limit=SPACE_PAGE_LIMIT)
        if not response.results:
            return f"No pages found in space {space_key}."

        output = f"# Pages in Space {space_key}\n\n"
        output += confluence_formatter.format_search_results(response.results)
        total = response.total_size or response.size
        output += f"\nShowing {len(response.results)} of {total} pages\n"
        return output

    def search(self, query: str, space_key: Optional[str] = None,
               limit: int = 10, page: int = 1) -> str:
        """Search pages, optionally within one space.

        Raises:
            ValueError: If limit or page is below 1
        """
        if limit < 1 or page < 1:
            raise ValueError("limit and page must be at least 1")

        start = (page - 1) * limit
        response = self.api.search_pages(query, space_key, start, limit)
        output = confluence_formatter.format_search_results(response.results)
        if response.results:
            total = response.total_size or response.size
            output += "\n\n" + paging_summary(start, response.size, total, page, limit)
        return output

    def get(self, page_id: str) -> str:
        """Show a page with its footer comments.

        Comment retrieval failures are logged and the page is shown without them.
        """
        page = self.api.get_page(page_id)
        try:
            page.comments = self.api.get_footer_comments(page_id)
        except AtlassianError as e:
            logger.debug(f"Failed to get footer comments: {e}")
        return confluence_formatter.format_page_details(page)
