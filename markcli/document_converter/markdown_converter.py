"""ADF to Markdown conversion.

This module renders a parsed ADF Document as Markdown text. Rendering is a
depth-first walk: each node kind is looked up in a registry of render
methods, and any kind without an entry aborts the whole conversion with
UnsupportedNodeKindError. Product differences (panel labels, macro
descriptions, date style) come from the Dialect passed to the converter.

The converter holds no state between calls, performs no I/O, and can be
shared across threads.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Union

from .adf_models import Document, Mark, Node
from .adf_parser import AdfParser
from .dialects import CONFLUENCE, Dialect
from .errors import UnsupportedNodeKindError

HIGHLIGHT_START = "@@@hl@@@"
HIGHLIGHT_END = "@@@endhl@@@"

# (glyph, colors) pairs for textColor marks; unmatched colors are annotated
COLOR_FAMILIES = (
    ("🔴", {"red", "#ff0000", "#ff5630", "#de350b", "#bf2600"}),
    ("🟢", {"green", "#00ff00", "#36b37e", "#00875a", "#006644"}),
    ("⚠️", {"yellow", "orange", "#ffff00", "#ff991f", "#ff8b00", "#ffab00"}),
    ("🔵", {"blue", "#0000ff", "#0052cc", "#0747a6", "#0065ff"}),
)

DELETED_REFERENCE_STATUSES = {"deleted", "trashed"}


def replace_highlight_markers(text: str) -> str:
    """Replace search-match highlight sentinels with bold markers."""
    return text.replace(HIGHLIGHT_START, "**").replace(HIGHLIGHT_END, "**")


class MarkdownConverter:
    """Convert ADF documents to Markdown for a given dialect.

    Example:
        >>> converter = MarkdownConverter(JIRA)
        >>> markdown = converter.convert(document)
    """

    def __init__(self, dialect: Dialect = CONFLUENCE):
        self.dialect = dialect
        self._renderers: Dict[str, Callable[[Node], str]] = {
            "paragraph": self._render_paragraph,
            "text": self._render_text,
            "heading": self._render_heading,
            "bulletList": self._render_bullet_list,
            "orderedList": self._render_ordered_list,
            "listItem": self._render_list_item,
            "table": self._render_table,
            "tableRow": self._render_table_row,
            "tableHeader": self._render_table_cell,
            "tableCell": self._render_table_cell,
            "inlineCard": self._render_inline_card,
            "status": self._render_status,
            "emoji": self._render_emoji,
            "panel": self._render_panel,
            "blockquote": self._render_blockquote,
            "taskList": self._render_children,
            "taskItem": self._render_task_item,
            "rule": self._render_rule,
            "codeBlock": self._render_code_block,
            "hardBreak": self._render_hard_break,
            "extension": self._render_extension,
            "inlineExtension": self._render_inline_extension,
            "bodiedExtension": self._render_bodied_extension,
            "date": self._render_date,
            "mention": self._render_mention,
            "placeholder": self._render_placeholder,
            "layoutSection": self._render_children,
            "layoutColumn": self._render_children,
            "mediaSingle": self._render_media_single,
            "mediaGroup": self._render_media_group,
            "media": self._render_media,
            "expand": self._render_expand,
            "nestedExpand": self._render_expand,
        }
        self._mark_renderers: Dict[str, Callable[[str, Mark], str]] = {
            "strong": self._apply_bold,
            "bold": self._apply_bold,
            "em": self._apply_italic,
            "italic": self._apply_italic,
            "code": self._apply_code,
            "link": self._apply_link,
            "hyperlink": self._apply_link,
            "textColor": self._apply_text_color,
            "text-color": self._apply_text_color,
        }

    @property
    def supported_kinds(self) -> List[str]:
        """Node kinds this converter can render."""
        return sorted(self._renderers)

    def convert(self, document: Document) -> str:
        """Render a document as Markdown.

        Args:
            document: Parsed ADF document

        Returns:
            Markdown text

        Raises:
            UnsupportedNodeKindError: If any node in the tree has an unknown kind
        """
        return "".join(self.render_node(node) for node in document.content)

    def render_node(self, node: Node) -> str:
        """Render a single node and its subtree."""
        renderer = self._renderers.get(node.kind, self._render_unsupported)
        return renderer(node)

    def _render_unsupported(self, node: Node) -> str:
        raise UnsupportedNodeKindError(node.kind)

    def _render_children(self, node: Node) -> str:
        return "".join(self.render_node(child) for child in node.children)

    # Inline content

    def _render_paragraph(self, node: Node) -> str:
        return self._join_inline(node.children) + "\n"

    def _join_inline(self, children: List[Node]) -> str:
        result = ""
        for child in children:
            fragment = self.render_node(child)
            if not fragment:
                continue
            if result and not result[-1].isspace() and not fragment[0].isspace():
                result += " "
            result += fragment
        return result

    def _render_text(self, node: Node) -> str:
        text = replace_highlight_markers(node.text)
        for mark in reversed(node.marks):
            apply_mark = self._mark_renderers.get(mark.kind)
            if apply_mark is not None:
                text = apply_mark(text, mark)
        return text

    def _apply_bold(self, text: str, mark: Mark) -> str:
        return f"**{text}**"

    def _apply_italic(self, text: str, mark: Mark) -> str:
        return f"_{text}_"

    def _apply_code(self, text: str, mark: Mark) -> str:
        return f"`{text}`"

    def _apply_link(self, text: str, mark: Mark) -> str:
        if not mark.url:
            return text
        return f"[{text}]({mark.url})"

    def _apply_text_color(self, text: str, mark: Mark) -> str:
        color = (mark.color or "").strip()
        for glyph, colors in COLOR_FAMILIES:
            if color.lower() in colors:
                return f"{glyph} {text}"
        if not color:
            return text
        return f"{text} _(in {color})_"

    def _render_hard_break(self, node: Node) -> str:
        return "\n"

    def _render_inline_card(self, node: Node) -> str:
        url = node.attr_str("url")
        if url:
            return f"[{url}]({url})"

        page_id = node.attr_str("referencePageId")
        if page_id:
            title = node.attr_str("referencePageTitle") or page_id
            status = node.attr_str("referenceStatus").lower()
            if status in DELETED_REFERENCE_STATUSES:
                return f"[{title}] (referenced page no longer exists)"
            return f"[{title}](pages/{page_id})"
        return ""

    def _render_status(self, node: Node) -> str:
        text = node.attr_str("text")
        if not text:
            return ""
        prefix = self.dialect.status_prefix(node.attr_str("color"))
        if prefix:
            return f"{prefix} {text}"
        return text

    def _render_emoji(self, node: Node) -> str:
        return node.attr_str("text") or node.attr_str("shortName")

    def _render_date(self, node: Node) -> str:
        timestamp = node.attr_str("timestamp")
        try:
            moment = datetime.fromtimestamp(int(timestamp) / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return node.attr_str("text") or node.text
        return moment.strftime(self.dialect.date_format)

    def _render_mention(self, node: Node) -> str:
        text = node.attr_str("text").lstrip("@")
        if not text:
            return ""
        return f"@{text}"

    def _render_placeholder(self, node: Node) -> str:
        text = node.attr_str("text")
        if not text:
            return ""
        return f"_{text}_"

    # Block content

    def _render_heading(self, node: Node) -> str:
        level = min(max(node.attr_int("level", 1), 1), 6)
        return "#" * level + " " + self._render_children(node) + "\n\n"

    def _render_bullet_list(self, node: Node) -> str:
        lines = []
        for child in node.children:
            lines.extend(self._prefix_item(self.render_node(child), "* ", "  "))
        return "\n".join(lines) + "\n\n"

    def _render_ordered_list(self, node: Node) -> str:
        lines = []
        for position, child in enumerate(node.children, 1):
            lines.extend(self._prefix_item(self.render_node(child), f"{position}. ", "   "))
        return "\n".join(lines) + "\n\n"

    def _prefix_item(self, rendered: str, prefix: str, indent: str) -> List[str]:
        item_lines = rendered.strip("\n").split("\n")
        lines = [prefix + item_lines[0]]
        for line in item_lines[1:]:
            lines.append(indent + line if line else "")
        return lines

    def _render_list_item(self, node: Node) -> str:
        return self._render_children(node).rstrip("\n") + "\n"

    def _render_table(self, node: Node) -> str:
        output = ""
        for index, row in enumerate(node.children):
            output += self.render_node(row)
            if index == 0 and row.children:
                output += "|" + "---|" * len(row.children) + "\n"
        return output + "\n"

    def _render_table_row(self, node: Node) -> str:
        cells = [self.render_node(cell) for cell in node.children]
        return "|" + "".join(f" {cell} |" for cell in cells) + "\n"

    def _render_table_cell(self, node: Node) -> str:
        text = self._render_children(node)
        lines = [line.strip() for line in text.split("\n") if line.strip()]
        return " ".join(lines).replace("|", "\\|")

    def _render_panel(self, node: Node) -> str:
        label = self.dialect.panel_label(node.attr_str("panelType"))
        return f"> {label}\n" + self._quote_children(node)

    def _render_blockquote(self, node: Node) -> str:
        return self._quote_children(node)

    def _quote_children(self, node: Node) -> str:
        # Child blocks are separated by a bare ">" line
        blocks = [self.render_node(child).strip("\n") for child in node.children]
        lines: List[str] = []
        for block in blocks:
            if not block.strip():
                continue
            if lines:
                lines.append(">")
            lines.extend("> " + line if line.strip() else ">" for line in block.split("\n"))
        return "".join(line + "\n" for line in lines) + "\n"

    def _render_task_item(self, node: Node) -> str:
        checkbox = "- [x] " if node.attr_str("state") == "DONE" else "- [ ] "
        return checkbox + self._render_children(node).strip() + "\n"

    def _render_rule(self, node: Node) -> str:
        return "---\n\n"

    def _render_code_block(self, node: Node) -> str:
        language = node.attr_str("language")
        code = "".join(
            child.text if child.kind == "text" else self.render_node(child)
            for child in node.children
        ).rstrip()
        return f"```{language}\n{code}\n```\n\n"

    def _render_expand(self, node: Node) -> str:
        title = node.attr_str("title") or "Details"
        return (
            f"<details>\n<summary>{title}</summary>\n\n"
            + self._render_children(node)
            + "</details>\n\n"
        )

    # Media

    def _media_placeholder(self, node: Node) -> str:
        width = node.attr_int("width") or node.attr_int("mediaWidth")
        height = node.attr_int("height") or node.attr_int("mediaHeight")
        if width and height:
            return f"_[Image: {width}x{height}]_"
        return "_[Image]_"

    def _render_media(self, node: Node) -> str:
        return self._media_placeholder(node)

    def _render_media_single(self, node: Node) -> str:
        if node.children:
            return self._render_children(node) + "\n\n"
        return self._media_placeholder(node) + "\n\n"

    def _render_media_group(self, node: Node) -> str:
        return "".join(self.render_node(child) + "\n" for child in node.children) + "\n"

    # Extensions

    def _macro_placeholder(self, node: Node) -> str:
        key = node.attr_str("extensionKey") or "unknown"
        description = self.dialect.macros.get(key)
        if description is None:
            extension_type = node.attr_str("extensionType")
            if extension_type:
                return f"_[{self.dialect.product} macro: {key} ({extension_type})]_"
            return f"_[{self.dialect.product} macro: {key}]_"

        if key == "pagetree":
            root = _macro_param(node, "root")
            if root:
                return f"_[{description} - showing child pages under {root}]_"
        return f"_[{description}]_"

    def _render_extension(self, node: Node) -> str:
        return self._macro_placeholder(node) + "\n\n"

    def _render_inline_extension(self, node: Node) -> str:
        return self._macro_placeholder(node)

    def _render_bodied_extension(self, node: Node) -> str:
        return self._macro_placeholder(node) + "\n\n" + self._render_children(node)


def _macro_param(node: Node, name: str) -> str:
    """Read parameters.macroParams.<name>.value, tolerating any shape."""
    params = node.attr_dict("parameters").get("macroParams")
    if not isinstance(params, dict):
        return ""
    entry = params.get(name)
    if isinstance(entry, dict):
        value = entry.get("value")
        return value if isinstance(value, str) else ""
    return ""


def convert(document: Document, dialect: Dialect = CONFLUENCE) -> str:
    """Convert a parsed document to Markdown with the given dialect."""
    return MarkdownConverter(dialect).convert(document)


def convert_json(raw: Union[str, bytes, Dict[str, Any]], dialect: Dialect = CONFLUENCE) -> str:
    """Parse raw ADF (JSON text or decoded dict) and convert it to Markdown.

    Raises:
        InvalidDocumentError: If the input is not an ADF document
        UnsupportedNodeKindError: If the document contains an unknown node kind
    """
    parser = AdfParser()
    if isinstance(raw, dict):
        document = parser.parse_document(raw)
    else:
        document = parser.parse_from_string(raw)
    return convert(document, dialect)
