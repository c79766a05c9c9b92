"""Jira commands: projects, open issues in a project, issue search, issue details."""

import logging
from typing import Optional

from markcli.atlassian_client.jira_api import JiraAPI, build_open_issues_jql, build_text_jql
from markcli.formatting import jira_formatter

from .confluence_command import paging_summary

logger = logging.getLogger(__name__)

PROJECT_ISSUE_LIMIT = 50


class JiraCommand:
    """Builds Markdown output for the Jira subcommands."""

    def __init__(self, api: JiraAPI):
        self.api = api

    def projects(self, sort_by: str = "key") -> str:
        return jira_formatter.format_projects(self.api.list_projects(), sort_by)

    def issues(self, project: str) -> str:
        """List open issues in a project, most recently updated first."""
        response = self.api.search_issues(
            build_open_issues_jql(project), max_results=PROJECT_ISSUE_LIMIT
        )
        if not response.issues:
            return f"No issues found in project {project}."

        output = f"# Issues in Project {project}\n\n"
        output += jira_formatter.format_search_results(response.issues)
        output += f"\nShowing {len(response.issues)} of {response.total} issues\n"
        return output

    def search(self, query: str, project: Optional[str] = None,
               limit: int = 10, page: int = 1) -> str:
        """Full-text issue search, optionally within one project.

        Raises:
            ValueError: If limit or page is below 1
        """
        if limit < 1 or page < 1:
            raise ValueError("limit and page must be at least 1")

        start = (page - 1) * limit
        response = self.api.search_issues(build_text_jql(query, project or ""), start, limit)
        output = jira_formatter.format_search_results(response.issues)
        if response.issues:
            output += "\n" + paging_summary(start, len(response.issues), response.total, page, limit)
        return output

    def get(self, issue_id: str) -> str:
        """Show an issue with its comments."""
        issue = self.api.get_issue(issue_id)
        comments = self.api.get_comments(issue_id)
        return jira_formatter.format_issue_details(issue, comments)
