"""API wrapper for Jira Cloud REST API v3."""

import logging
import re
from typing import List

from atlassian import Jira

from .api_wrapper import REQUEST_TIMEOUT, APIWrapper
from .models import JiraComment, JiraIssue, JiraProject, JiraSearchResponse

logger = logging.getLogger(__name__)

ISSUE_FIELDS = (
    "summary,status,priority,project,assignee,reporter,description,"
    "created,updated,duedate,resolution,issuetype"
)


def _quote_jql(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_text_jql(query: str, project: str = "") -> str:
    """Build a full-text JQL query, optionally limited to one project."""
    jql = f'text ~ "{_quote_jql(query)}"'
    if project:
        jql = f'project = "{_quote_jql(project)}" AND {jql}'
    return jql


def build_open_issues_jql(project: str) -> str:
    """JQL listing a project's open issues, most recently updated first."""
    return (
        f'project = "{_quote_jql(project)}" '
        "AND status NOT IN (Abandoned, Done) ORDER BY updated DESC"
    )


class JiraAPI(APIWrapper):
    """Wrapper around the atlassian-python-api Jira client.

    Example:
        >>> api = JiraAPI(Authenticator.from_site(site))
        >>> issue = api.get_issue("PROJ-123")
    """

    product = "Jira"

    def _create_client(self, creds) -> Jira:
        return Jira(
            url=creds.url,
            username=creds.user,
            password=creds.api_token,
            cloud=True,
            timeout=REQUEST_TIMEOUT,
        )

    def _validate_issue_id(self, issue_id: str) -> str:
        issue_id_str = str(issue_id).strip() if issue_id is not None else ""
        if not issue_id_str:
            raise ValueError("issue ID is required")
        if not re.match(r'^[A-Za-z0-9_-]+$', issue_id_str):
            raise ValueError(
                f"Invalid issue ID format: '{issue_id}'. "
                f"Use an issue key such as PROJ-123 or a numeric ID."
            )
        return issue_id_str

    def list_projects(self) -> List[JiraProject]:
        """List all projects visible to the user."""
        data = self._get("rest/api/3/project", operation="list projects",
                         resource="Jira API endpoint")
        return [JiraProject.from_dict(item) for item in data or [] if isinstance(item, dict)]

    def search_issues(self, jql: str, start_at: int = 0, max_results: int = 10) -> JiraSearchResponse:
        """Search issues with JQL.

        Args:
            jql: JQL query
            start_at: Zero-based index of the first result
            max_results: Maximum number of results

        Returns:
            JiraSearchResponse with the matching page of results
        """
        data = self._get(
            "rest/api/3/search",
            params={
                "jql": jql,
                "startAt": start_at,
                "maxResults": max_results,
                "fields": ISSUE_FIELDS,
            },
            operation="search issues",
            resource="Jira API endpoint",
        )
        return JiraSearchResponse.from_dict(data or {})

    def get_issue(self, issue_id: str) -> JiraIssue:
        """Fetch a single issue by key or ID."""
        issue_id = self._validate_issue_id(issue_id)
        data = self._get(
            f"rest/api/3/issue/{issue_id}",
            params={"fields": ISSUE_FIELDS},
            operation=f"get issue {issue_id}",
            resource="Issue",
            identifier=issue_id,
        )
        return JiraIssue.from_dict(data or {})

    def get_comments(self, issue_id: str) -> List[JiraComment]:
        """Fetch all comments on an issue."""
        issue_id = self._validate_issue_id(issue_id)
        data = self._get(
            f"rest/api/3/issue/{issue_id}/comment",
            operation=f"get comments for issue {issue_id}",
            resource="Issue",
            identifier=issue_id,
        )
        comments = (data or {}).get("comments") or []
        return [JiraComment.from_dict(item) for item in comments if isinstance(item, dict)]
