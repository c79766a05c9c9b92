"""Text helpers shared by the Confluence and Jira formatters."""

from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup

from markcli.document_converter.markdown_converter import replace_highlight_markers

DATE_LAYOUTS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
)

SHORT_DATE = "%b %d, %Y"
LONG_DATE = "%b %d, %Y %H:%M:%S"


def truncate_text(text: str, max_length: int) -> str:
    """Strip text and cut it to max_length, ending with '...' when cut."""
    text = text.strip()
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def wrap_text(text: str, line_length: int) -> str:
    """Wrap text at word boundaries to the given line length."""
    words = text.split()
    if not words:
        return text

    lines = []
    current = words[0]
    for word in words[1:]:
        if len(current) + 1 + len(word) <= line_length:
            current += " " + word
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return "\n".join(lines)


def clean_title(title: str) -> str:
    """Replace search highlight markers with bold markers."""
    return replace_highlight_markers(title)


def format_url(url: str) -> str:
    """Make a relative Confluence URL more readable."""
    url = url.replace("+", " ")
    for prefix in ("/spaces/", "/wiki/spaces/", "/pages/"):
        if url.startswith(prefix):
            url = url[len(prefix):]
    return url


def strip_html(text: str) -> str:
    """Drop HTML tags and decode entities, keeping the text."""
    if not text or ("<" not in text and "&" not in text):
        return text
    return BeautifulSoup(text, "html.parser").get_text()


def clean_content(content: str) -> str:
    """Flatten Markdown into a single descriptive line.

    Blank lines, rules, headings and list lines are dropped and the rest is
    joined with spaces.
    """
    content = replace_highlight_markers(strip_html(content))

    cleaned = []
    for line in content.split("\n"):
        line = line.strip()
        if not line or line == "---" or line.startswith(("#", "*", "-")):
            continue
        cleaned.append(line)

    result = " ".join(cleaned)
    result = result.replace("  ", " ").replace("..", ".").replace(". .", ".")
    return result.strip()


def parse_date(value: str) -> Optional[datetime]:
    """Parse an Atlassian timestamp, returning None when no layout matches."""
    if not value:
        return None
    for layout in DATE_LAYOUTS:
        try:
            return datetime.strptime(value, layout)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_date(value: str, layout: str = LONG_DATE) -> str:
    """Format an Atlassian timestamp, falling back to the raw value."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return parsed.strftime(layout)
