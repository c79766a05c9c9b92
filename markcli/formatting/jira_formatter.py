"""Markdown templates for Jira projects, search results and issues."""

import logging
from typing import List, Optional

from markcli.atlassian_client.errors import ConversionError
from markcli.atlassian_client.models import JiraComment, JiraIssue, JiraProject
from markcli.document_converter import JIRA, convert_json

from .text_utils import SHORT_DATE, format_date, truncate_text

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 300
RESULT_SEPARATOR = "\n---\n\n"

SORT_KEYS = {
    "key": lambda project: project.key,
    "name": lambda project: project.name.lower(),
    "type": lambda project: project.project_type_key.lower(),
    "style": lambda project: project.style.lower(),
}


def web_url(issue: JiraIssue) -> str:
    """Browser URL for an issue, derived from its REST self link."""
    return issue.self_url.replace("/rest/api/3/issue/", "/browse/", 1)


def _convert(body, what: str) -> Optional[str]:
    if not body:
        return None
    try:
        return convert_json(body, JIRA)
    except ConversionError as e:
        logger.debug(f"Could not convert {what}: {e}")
        return None


def format_projects(projects: List[JiraProject], sort_by: str = "key") -> str:
    """Render projects as a Markdown table sorted by key, name, type or style.

    Raises:
        ValueError: If sort_by is not a known column
    """
    if not projects:
        return "No projects found."

    sort_key = SORT_KEYS.get((sort_by or "key").lower())
    if sort_key is None:
        raise ValueError(
            f"invalid sort field '{sort_by}': use one of {', '.join(SORT_KEYS)}"
        )

    lines = [
        "| Key | Name | Type | Style |",
        "|-----|------|------|-------|",
    ]
    for project in sorted(projects, key=sort_key):
        lines.append(
            f"| {project.key} | {truncate_text(project.name, MAX_NAME_LENGTH)} | "
            f"{project.project_type_key.lower().title()} | {project.style.lower().title()} |"
        )
    return f"Found {len(projects)} projects:\n\n" + "\n".join(lines) + "\n"


def format_search_results(issues: List[JiraIssue]) -> str:
    """Render Jira search hits, one block per issue."""
    if not issues:
        return "No issues found."

    blocks = []
    for issue in issues:
        block = (
            f"Title: {issue.summary}\n"
            f"Key: {issue.key}\n"
            f"Project: {issue.project_name}\n"
            f"Status: {issue.status}\n"
            f"Priority: {issue.priority}\n"
        )
        if issue.assignee is not None:
            block += f"Assignee: {issue.assignee}\n"
        if issue.updated:
            block += f"Last Modified: {format_date(issue.updated, SHORT_DATE)}\n"
        if issue.self_url:
            block += f"URL: {web_url(issue)}\n"

        description = _convert(issue.description, f"description of {issue.key}")
        if description is not None:
            if len(description) > MAX_DESCRIPTION_LENGTH:
                description = description[:MAX_DESCRIPTION_LENGTH] + "..."
            block += "\n" + description + "\n"
        blocks.append(block)

    return RESULT_SEPARATOR.join(blocks)


def _format_comment(comment: JiraComment) -> str:
    output = ""
    if comment.author is not None:
        output += f"**{comment.author}** - {format_date(comment.created)}\n\n"
    content = _convert(comment.body, f"comment {comment.id}")
    if content:
        output += content + "\n\n"
    return output + "---\n\n"


def format_issue_details(issue: JiraIssue, comments: Optional[List[JiraComment]] = None) -> str:
    """Render an issue with its metadata, description and comments."""
    output = f"# {issue.summary}\n\n"
    output += "**Issue Information**\n"
    output += f"- **Key**: {issue.key}\n"
    output += f"- **Type**: {issue.issue_type}\n"
    output += f"- **Status**: {issue.status}\n"
    output += f"- **Priority**: {issue.priority}\n"
    output += f"- **Project**: {issue.project_name} ({issue.project_key})\n"
    output += f"- **Assignee**: {issue.assignee if issue.assignee is not None else 'Unassigned'}\n"
    if issue.reporter is not None:
        output += f"- **Reporter**: {issue.reporter}\n"
    if issue.created:
        output += f"- **Created**: {format_date(issue.created)}\n"
    if issue.updated:
        output += f"- **Last Modified**: {format_date(issue.updated)}\n"
    if issue.resolution:
        output += f"- **Resolution**: {issue.resolution}\n"
    if issue.self_url:
        output += f"- **Web URL**: {web_url(issue)}\n"
    output += RESULT_SEPARATOR

    if issue.description:
        try:
            output += convert_json(issue.description, JIRA) + "\n\n"
        except ConversionError as e:
            logger.debug(f"Description conversion error for {issue.key}: {e}")
            output += f"Error converting description to markdown: {e}\n\n"

    if comments:
        output += "**Comments**\n\n"
        output += "".join(_format_comment(comment) for comment in comments)

    return output
