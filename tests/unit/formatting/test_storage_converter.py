"""Unit tests for formatting.storage_converter module."""

from markcli.formatting.storage_converter import storage_to_markdown

XHTML_WITH_MACROS = """
<h1>Macro Test</h1>
<ac:structured-macro ac:name="toc"></ac:structured-macro>
<p>See <ac:link><ri:page ri:content-title="Other Page"></ri:page></ac:link> for details.</p>
"""


class TestStorageToMarkdown:
    """Test cases for storage_to_markdown."""

    def test_empty_input(self):
        assert storage_to_markdown("") == ""

    def test_basic_markup(self):
        result = storage_to_markdown("<h2>Title</h2><p><strong>Bold</strong> and <em>soft</em></p>")

        assert "## Title" in result
        assert "**Bold** and _soft_" in result

    def test_lists_use_asterisks(self):
        result = storage_to_markdown("<ul><li>One</li><li>Two</li></ul>")

        assert "* One" in result
        assert "* Two" in result

    def test_macros_become_placeholders(self):
        result = storage_to_markdown(XHTML_WITH_MACROS)

        assert "# Macro Test" in result
        assert "_[Confluence macro: toc]_" in result
        assert "See Other Page for details." in result
