"""Confluence storage format (XHTML) to Markdown.

Legacy-editor comments only carry a storage-format body. This module renders
such bodies with markdownify, replacing Confluence macros with the same
italic placeholders the ADF converter uses.
"""

from bs4 import BeautifulSoup
from markdownify import MarkdownConverter as BaseMarkdownConverter

from markcli.atlassian_client.errors import ConversionError


class _StorageMarkdownConverter(BaseMarkdownConverter):
    """markdownify converter with settings matching the ADF output."""

    def __init__(self, **options):
        options.setdefault('heading_style', 'atx')
        options.setdefault('bullets', '*')
        options.setdefault('strong_em_symbol', '*')
        # Macro placeholders are inserted as text and must keep their underscores
        options.setdefault('escape_underscores', False)
        super().__init__(**options)

    def convert_em(self, el, text, parent_tags):
        """Render emphasis with underscores, as the ADF converter does."""
        text = text.strip()
        if not text:
            return ''
        return f'_{text}_'

    convert_i = convert_em


def _replace_macros(soup: BeautifulSoup) -> None:
    for macro in soup.find_all(['ac:structured-macro', 'ac:macro']):
        name = macro.get('ac:name') or 'unknown'
        macro.replace_with(soup.new_string(f'_[Confluence macro: {name}]_'))

    for link in soup.find_all('ac:link'):
        page = link.find('ri:page')
        title = page.get('ri:content-title') if page is not None else None
        link.replace_with(soup.new_string(title or link.get_text()))


def storage_to_markdown(xhtml: str) -> str:
    """Convert a storage-format XHTML fragment to Markdown.

    Args:
        xhtml: Confluence storage format XHTML string

    Returns:
        Markdown text, stripped of surrounding blank lines

    Raises:
        ConversionError: If the markup cannot be converted
    """
    if not xhtml:
        return ""

    try:
        soup = BeautifulSoup(xhtml, "html.parser")
        _replace_macros(soup)
        return _StorageMarkdownConverter().convert_soup(soup).strip()
    except Exception as e:
        raise ConversionError(f"Storage format conversion failed: {e}") from e
