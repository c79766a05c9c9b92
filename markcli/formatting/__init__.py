"""Markdown formatting of Confluence and Jira API results."""
