"""Unit tests for atlassian_client.jira_api module."""

from unittest.mock import Mock, patch

import pytest

from markcli.atlassian_client.jira_api import (
    ISSUE_FIELDS,
    JiraAPI,
    build_open_issues_jql,
    build_text_jql,
)

SAMPLE_ISSUE = {
    'id': '10001',
    'key': 'PROJ-1',
    'self': 'https://test.atlassian.net/rest/api/3/issue/10001',
    'fields': {
        'summary': 'Fix login',
        'status': {'name': 'In Progress'},
        'priority': {'name': 'High'},
        'issuetype': {'name': 'Bug'},
        'project': {'key': 'PROJ', 'name': 'Project'},
        'assignee': None,
        'reporter': {'displayName': 'Bob'},
        'created': '2024-01-15T10:30:00.000+0000',
        'updated': '2024-01-16T10:30:00.000+0000',
        'resolution': None,
        'description': {'type': 'doc', 'version': 1, 'content': []},
    },
}


@pytest.fixture
def mock_client():
    """Patch the Jira client class and return the instance mock."""
    with patch('markcli.atlassian_client.jira_api.Jira') as mock_jira:
        client = Mock()
        client.url = 'https://test.atlassian.net'
        mock_jira.return_value = client
        yield client


@pytest.fixture
def api(mock_client):
    auth = Mock()
    auth.get_credentials.return_value = Mock(
        url='https://test.atlassian.net', user='test@example.com', api_token='token123'
    )
    return JiraAPI(auth)


class TestJqlBuilders:
    """Test cases for the JQL helpers."""

    def test_text_jql(self):
        assert build_text_jql('login') == 'text ~ "login"'

    def test_text_jql_with_project(self):
        assert build_text_jql('login', 'PROJ') == 'project = "PROJ" AND text ~ "login"'

    def test_text_jql_escapes_quotes(self):
        assert build_text_jql('a "b"') == 'text ~ "a \\"b\\""'

    def test_project_key_cannot_extend_query(self):
        jql = build_text_jql('login', 'PROJ" OR project = "OTHER')
        assert jql == 'project = "PROJ\\" OR project = \\"OTHER" AND text ~ "login"'

    def test_open_issues_jql(self):
        assert build_open_issues_jql('PROJ') == (
            'project = "PROJ" AND status NOT IN (Abandoned, Done) ORDER BY updated DESC'
        )


class TestJiraAPI:
    """Test cases for JiraAPI requests."""

    def test_list_projects(self, api, mock_client):
        mock_client.get.return_value = [
            {'key': 'PROJ', 'name': 'Project', 'projectTypeKey': 'software', 'style': 'next-gen'},
        ]

        projects = api.list_projects()

        mock_client.get.assert_called_once_with('rest/api/3/project', params=None)
        assert projects[0].project_type_key == 'software'

    def test_search_issues(self, api, mock_client):
        mock_client.get.return_value = {
            'issues': [SAMPLE_ISSUE], 'startAt': 10, 'maxResults': 10, 'total': 11,
        }

        response = api.search_issues('text ~ "login"', start_at=10, max_results=10)

        mock_client.get.assert_called_once_with('rest/api/3/search', params={
            'jql': 'text ~ "login"',
            'startAt': 10,
            'maxResults': 10,
            'fields': ISSUE_FIELDS,
        })
        assert response.total == 11
        issue = response.issues[0]
        assert issue.key == 'PROJ-1'
        assert issue.assignee is None
        assert issue.reporter == 'Bob'
        assert issue.resolution == ''

    def test_get_issue(self, api, mock_client):
        mock_client.get.return_value = SAMPLE_ISSUE

        issue = api.get_issue('PROJ-1')

        assert mock_client.get.call_args[0][0] == 'rest/api/3/issue/PROJ-1'
        assert issue.summary == 'Fix login'
        assert issue.description == {'type': 'doc', 'version': 1, 'content': []}

    def test_get_comments(self, api, mock_client):
        mock_client.get.return_value = {'comments': [
            {'id': '1', 'author': {'displayName': 'Ann'}, 'created': '2024-01-15T10:30:00.000+0000',
             'body': {'type': 'doc', 'content': []}},
        ]}

        comments = api.get_comments('PROJ-1')

        assert mock_client.get.call_args[0][0] == 'rest/api/3/issue/PROJ-1/comment'
        assert comments[0].author == 'Ann'

    @pytest.mark.parametrize('issue_id', ['', 'PROJ 1', '../etc', None])
    def test_invalid_issue_id(self, api, mock_client, issue_id):
        with pytest.raises(ValueError):
            api.get_issue(issue_id)
        mock_client.get.assert_not_called()
