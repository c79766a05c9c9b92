"""API wrapper for Confluence Cloud (REST v1 search/spaces, v2 pages)."""

import logging
import re
from typing import List, Optional

from atlassian import Confluence

from .api_wrapper import REQUEST_TIMEOUT, APIWrapper
from .errors import ResourceNotFoundError
from .models import (
    ConfluencePage,
    ConfluenceSearchResponse,
    ConfluenceSpace,
    FooterComment,
)

logger = logging.getLogger(__name__)

SEARCH_EXPAND = "content.space,content.version,content.body.atlas_doc_format"


def _quote_cql(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_search_cql(query: str, space_key: Optional[str] = None) -> str:
    """Build the CQL used for text searches, optionally limited to a space."""
    cql = f'type=page AND text ~ "{_quote_cql(query)}"'
    if space_key:
        cql += f' AND space="{_quote_cql(space_key)}"'
    return cql


class ConfluenceAPI(APIWrapper):
    """Wrapper around the atlassian-python-api Confluence client.

    Example:
        >>> api = ConfluenceAPI(Authenticator.from_site(site))
        >>> page = api.get_page("123456")
    """

    product = "Confluence"

    def _create_client(self, creds) -> Confluence:
        url = creds.url
        if not url.endswith("/wiki"):
            url = url + "/wiki"
        return Confluence(
            url=url,
            username=creds.user,
            password=creds.api_token,
            cloud=True,
            timeout=REQUEST_TIMEOUT,
        )

    def _validate_page_id(self, page_id: str) -> str:
        """Validate that a page ID is numeric.

        Raises:
            ValueError: If page_id is empty or not numeric
        """
        page_id_str = str(page_id).strip() if page_id is not None else ""
        if not page_id_str:
            raise ValueError("page ID is required")
        if not re.match(r'^\d+$', page_id_str):
            raise ValueError(
                f"Invalid page ID format: '{page_id}'. "
                f"Page IDs must contain only numeric characters."
            )
        return page_id_str

    def search_pages(
        self,
        query: str,
        space_key: Optional[str] = None,
        start: int = 0,
        limit: int = 10,
    ) -> ConfluenceSearchResponse:
        """Search pages with a CQL text query.

        Args:
            query: Free-text search query
            space_key: Optional space key to restrict the search
            start: Zero-based index of the first result
            limit: Maximum number of results

        Returns:
            ConfluenceSearchResponse with the matching page of results
        """
        return self._search(build_search_cql(query, space_key), start, limit, "search pages")

    def list_space_pages(self, space_key: str, limit: int = 50) -> ConfluenceSearchResponse:
        """List the most recently modified pages in a space."""
        cql = f'type=page AND space="{_quote_cql(space_key)}" ORDER BY lastmodified DESC'
        return self._search(cql, 0, limit, f"list pages in space {space_key}")

    def _search(self, cql: str, start: int, limit: int, operation: str) -> ConfluenceSearchResponse:
        data = self._get(
            "rest/api/search",
            params={"cql": cql, "start": start, "limit": limit, "expand": SEARCH_EXPAND},
            operation=operation,
            resource="Search endpoint",
        )
        return ConfluenceSearchResponse.from_dict(data or {})

    def list_spaces(self, include_all: bool = False) -> List[ConfluenceSpace]:
        """List spaces.

        Args:
            include_all: Include personal and archived spaces

        Returns:
            List of ConfluenceSpace
        """
        params = {"limit": 100}
        if not include_all:
            params["type"] = "global"
            params["status"] = "current"
        data = self._get("rest/api/space", params=params, operation="list spaces")
        results = (data or {}).get("results") or []
        return [ConfluenceSpace.from_dict(item) for item in results if isinstance(item, dict)]

    def get_page(self, page_id: str) -> ConfluencePage:
        """Fetch a page with its ADF body.

        Raises:
            ValueError: If page_id is not numeric
            ResourceNotFoundError: If the page does not exist
        """
        page_id = self._validate_page_id(page_id)
        data = self._get(
            f"api/v2/pages/{page_id}",
            params={"body-format": "atlas_doc_format"},
            operation=f"get page {page_id}",
            resource="Page",
            identifier=page_id,
        )
        return ConfluencePage.from_dict(data or {})

    def get_footer_comments(self, page_id: str) -> List[FooterComment]:
        """Fetch footer comments for a page; a missing page yields no comments."""
        page_id = self._validate_page_id(page_id)
        try:
            data = self._get(
                f"api/v2/pages/{page_id}/footer-comments",
                params={"body-format": "atlas_doc_format"},
                operation=f"get footer comments for page {page_id}",
                resource="Page",
                identifier=page_id,
            )
        except ResourceNotFoundError:
            logger.debug(f"No footer comments endpoint for page {page_id}")
            return []
        results = (data or {}).get("results") or []
        return [FooterComment.from_dict(item) for item in results if isinstance(item, dict)]
