"""Markdown templates for Confluence spaces, search results and pages."""

import logging
from typing import List

from markcli.atlassian_client.errors import ConversionError
from markcli.atlassian_client.models import (
    ConfluencePage,
    ConfluenceSearchResult,
    ConfluenceSpace,
    FooterComment,
)
from markcli.document_converter import CONFLUENCE, convert_json

from .storage_converter import storage_to_markdown
from .text_utils import clean_content, clean_title, format_date, format_url, truncate_text

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 1000
SHORT_DESCRIPTION_LENGTH = 100
RESULT_SEPARATOR = "\n---\n\n"


def format_spaces(spaces: List[ConfluenceSpace]) -> str:
    """Render spaces as a Markdown table."""
    if not spaces:
        return "No spaces found."

    lines = [
        "| Key | Name | Type | Status |",
        "|-----|------|------|--------|",
    ]
    for space in spaces:
        lines.append(
            f"| {space.key} | {space.name} | "
            f"{space.type.lower().title()} | {space.status.lower().title()} |"
        )
    return f"Found {len(spaces)} spaces:\n\n" + "\n".join(lines) + "\n"


def _describe(result: ConfluenceSearchResult) -> str:
    """Build a one-paragraph description from the body, falling back to the excerpt."""
    excerpt = clean_content(result.excerpt)
    if not result.body_adf:
        description = excerpt
    else:
        try:
            description = clean_content(convert_json(result.body_adf, CONFLUENCE))
        except ConversionError as e:
            logger.debug(f"Falling back to excerpt for {result.content_id}: {e}")
            description = excerpt
        else:
            if len(description) < SHORT_DESCRIPTION_LENGTH and excerpt:
                description = clean_content(f"{description}. {excerpt}") if description else excerpt

    if not description:
        description = "(No description available)"
    return truncate_text(description, MAX_DESCRIPTION_LENGTH)


def format_search_results(results: List[ConfluenceSearchResult]) -> str:
    """Render Confluence search hits, one block per result."""
    if not results:
        return "No results found."

    blocks = []
    for result in results:
        blocks.append(
            f"Title: {clean_title(result.title)}\n"
            f"Space: {result.space_title}\n"
            f"Status: {result.status}\n"
            f"Last Modified: {result.friendly_last_modified}\n"
            f"URL: {format_url(result.url)}\n"
            "\n"
            f"{_describe(result)}\n"
        )
    return RESULT_SEPARATOR.join(blocks)


def _format_comment(comment: FooterComment) -> str:
    output = f"### {comment.title}\n"
    if comment.author_name:
        output += f"**Author**: {comment.author_name}\n"
    if comment.created_at:
        output += f"**Last Modified**: {format_date(comment.created_at)}\n\n"

    if comment.body_adf:
        try:
            output += convert_json(comment.body_adf, CONFLUENCE) + "\n"
        except ConversionError as e:
            logger.debug(f"Comment {comment.id} conversion error: {e}")
            output += f"Error converting comment to markdown: {e}\n"
    elif comment.body_storage:
        output += "Note: This comment is in legacy format:\n\n"
        output += storage_to_markdown(comment.body_storage) + "\n"
    return output + RESULT_SEPARATOR


def format_page_details(page: ConfluencePage) -> str:
    """Render a page with its metadata, body and footer comments."""
    output = f"# {page.title}\n\n"
    output += "**Page Information**\n"
    output += f"- **ID**: {page.id}\n"
    output += f"- **Status**: {page.status}\n"
    output += f"- **Version**: {page.version_number}\n"
    if page.version_created_at:
        output += f"- **Last Modified**: {format_date(page.version_created_at)}\n"
    if page.author_name:
        output += f"- **Author**: {page.author_name}\n"
    if page.space_id:
        output += f"- **Space ID**: {page.space_id}\n"
    if page.web_url:
        output += f"- **Web URL**: {page.web_url}\n"
    output += RESULT_SEPARATOR

    if page.body_adf:
        try:
            output += convert_json(page.body_adf, CONFLUENCE) + "\n"
        except ConversionError as e:
            logger.debug(f"ADF conversion error for page {page.id}: {e}")
            output += f"Error converting to markdown: {e}\n"
    else:
        output += "*No content available*\n"

    if page.comments:
        output += "\n---\n\n## Comments\n\n"
        output += "".join(_format_comment(comment) for comment in page.comments)

    return output
