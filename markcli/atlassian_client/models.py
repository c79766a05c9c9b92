"""Data models for Confluence and Jira API responses.

Each model has a `from_dict` classmethod that reads the raw JSON payload and
tolerates missing or null fields, since the Atlassian APIs omit keys freely.
Rich-text bodies are kept undecoded (ADF JSON string or dict) and converted
by the formatters.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


def _dict(data: Any, key: str) -> Dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _str(data: Any, key: str) -> str:
    value = data.get(key) if isinstance(data, dict) else None
    if value is None:
        return ""
    return str(value)


def _int(data: Any, key: str) -> int:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, int) else 0


def _list(data: Any, key: str) -> List[Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, list) else []


@dataclass
class ConfluenceSpace:
    """Confluence space summary."""
    key: str
    name: str
    type: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfluenceSpace":
        return cls(
            key=_str(data, "key"),
            name=_str(data, "name"),
            type=_str(data, "type"),
            status=_str(data, "status"),
        )


@dataclass
class ConfluenceSearchResult:
    """A single hit from the Confluence CQL search API.

    Attributes:
        content_id: ID of the matched content
        title: Title, possibly containing highlight markers
        excerpt: Matched snippet, possibly containing highlight markers
        url: Relative web URL of the content
        space_title: Title of the containing space
        status: Content status (current, draft, ...)
        friendly_last_modified: Human-readable modification time from the API
        body_adf: ADF body when the search expanded it, else empty
    """
    content_id: str
    title: str
    excerpt: str = ""
    url: str = ""
    space_title: str = ""
    status: str = ""
    friendly_last_modified: str = ""
    body_adf: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfluenceSearchResult":
        content = _dict(data, "content")
        body = _dict(_dict(content, "body"), "atlas_doc_format")
        return cls(
            content_id=_str(content, "id"),
            title=_str(data, "title") or _str(content, "title"),
            excerpt=_str(data, "excerpt"),
            url=_str(data, "url"),
            space_title=_str(_dict(data, "resultGlobalContainer"), "title"),
            status=_str(content, "status"),
            friendly_last_modified=_str(data, "friendlyLastModified"),
            body_adf=_str(body, "value"),
        )


@dataclass
class ConfluenceSearchResponse:
    """One page of Confluence search results."""
    results: List[ConfluenceSearchResult] = field(default_factory=list)
    start: int = 0
    limit: int = 0
    size: int = 0
    total_size: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfluenceSearchResponse":
        results = [
            ConfluenceSearchResult.from_dict(item)
            for item in _list(data, "results")
            if isinstance(item, dict)
        ]
        return cls(
            results=results,
            start=_int(data, "start"),
            limit=_int(data, "limit"),
            size=_int(data, "size") or len(results),
            total_size=_int(data, "totalSize"),
        )


@dataclass
class FooterComment:
    """A footer comment on a Confluence page.

    Comments created in the legacy editor only carry a storage-format body.
    """
    id: str
    title: str = ""
    status: str = ""
    created_at: str = ""
    author_name: str = ""
    body_adf: str = ""
    body_storage: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FooterComment":
        version = _dict(data, "version")
        body = _dict(data, "body")
        return cls(
            id=_str(data, "id"),
            title=_str(data, "title"),
            status=_str(data, "status"),
            created_at=_str(version, "createdAt"),
            author_name=_str(_dict(version, "author"), "displayName"),
            body_adf=_str(_dict(body, "atlas_doc_format"), "value"),
            body_storage=_str(_dict(body, "storage"), "value"),
        )


@dataclass
class ConfluencePage:
    """Confluence page details from the v2 pages API.

    Attributes:
        id: Page ID
        title: Page title
        status: Page status
        space_id: Numeric ID of the containing space
        version_number: Current version number
        version_created_at: ISO timestamp of the current version
        author_name: Display name of the version author, when provided
        web_url: Browser URL of the page
        body_adf: Page body as an ADF JSON string
        comments: Footer comments, attached after fetching
    """
    id: str
    title: str
    status: str = ""
    space_id: str = ""
    version_number: int = 0
    version_created_at: str = ""
    author_name: str = ""
    web_url: str = ""
    body_adf: str = ""
    comments: List[FooterComment] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfluencePage":
        version = _dict(data, "version")
        links = _dict(data, "_links")
        web_url = _str(links, "webui")
        if web_url and _str(links, "base"):
            web_url = _str(links, "base") + web_url
        return cls(
            id=_str(data, "id"),
            title=_str(data, "title"),
            status=_str(data, "status"),
            space_id=_str(data, "spaceId"),
            version_number=_int(version, "number"),
            version_created_at=_str(version, "createdAt"),
            author_name=_str(_dict(version, "author"), "displayName"),
            web_url=web_url,
            body_adf=_str(_dict(_dict(data, "body"), "atlas_doc_format"), "value"),
        )


@dataclass
class JiraProject:
    """Jira project summary."""
    key: str
    name: str
    project_type_key: str = ""
    style: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JiraProject":
        return cls(
            key=_str(data, "key"),
            name=_str(data, "name"),
            project_type_key=_str(data, "projectTypeKey"),
            style=_str(data, "style"),
        )


AdfBody = Optional[Union[Dict[str, Any], str]]


@dataclass
class JiraIssue:
    """Jira issue with the fields markcli requests.

    Attributes:
        key: Issue key (e.g., PROJ-123)
        self_url: REST URL of the issue
        summary: Issue summary
        assignee: Assignee display name, None when unassigned
        reporter: Reporter display name, None when absent
        description: ADF description (API v3), None when empty
    """
    id: str
    key: str
    self_url: str = ""
    summary: str = ""
    status: str = ""
    priority: str = ""
    issue_type: str = ""
    project_key: str = ""
    project_name: str = ""
    assignee: Optional[str] = None
    reporter: Optional[str] = None
    created: str = ""
    updated: str = ""
    resolution: str = ""
    description: AdfBody = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JiraIssue":
        fields = _dict(data, "fields")
        project = _dict(fields, "project")
        assignee = fields.get("assignee")
        reporter = fields.get("reporter")
        return cls(
            id=_str(data, "id"),
            key=_str(data, "key"),
            self_url=_str(data, "self"),
            summary=_str(fields, "summary"),
            status=_str(_dict(fields, "status"), "name"),
            priority=_str(_dict(fields, "priority"), "name"),
            issue_type=_str(_dict(fields, "issuetype"), "name"),
            project_key=_str(project, "key"),
            project_name=_str(project, "name"),
            assignee=_str(assignee, "displayName") if isinstance(assignee, dict) else None,
            reporter=_str(reporter, "displayName") if isinstance(reporter, dict) else None,
            created=_str(fields, "created"),
            updated=_str(fields, "updated"),
            resolution=_str(_dict(fields, "resolution"), "name"),
            description=fields.get("description") or None,
        )


@dataclass
class JiraSearchResponse:
    """One page of Jira search results."""
    issues: List[JiraIssue] = field(default_factory=list)
    start_at: int = 0
    max_results: int = 0
    total: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JiraSearchResponse":
        issues = [
            JiraIssue.from_dict(item)
            for item in _list(data, "issues")
            if isinstance(item, dict)
        ]
        return cls(
            issues=issues,
            start_at=_int(data, "startAt"),
            max_results=_int(data, "maxResults"),
            total=_int(data, "total") or len(issues),
        )


@dataclass
class JiraComment:
    """A comment on a Jira issue."""
    id: str
    author: Optional[str] = None
    created: str = ""
    body: AdfBody = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JiraComment":
        author = data.get("author")
        return cls(
            id=_str(data, "id"),
            author=_str(author, "displayName") if isinstance(author, dict) else None,
            created=_str(data, "created"),
            body=data.get("body") or None,
        )
