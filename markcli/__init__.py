"""markcli - read Confluence and Jira content as Markdown from the terminal."""

__version__ = "0.3.0"
