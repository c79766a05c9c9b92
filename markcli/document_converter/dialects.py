"""Dialect configuration for the Markdown converter.

Confluence page bodies and Jira descriptions share the ADF node set but differ
in which macros appear, how dates read, and which labels fit the product.
A Dialect captures those differences so a single converter serves both.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


PANEL_LABELS = {
    "info": "ℹ️  **Info**",
    "note": "📝 **Note**",
    "warning": "⚠️  **Warning**",
    "error": "❌ **Error**",
    "success": "✅ **Success**",
}

STATUS_EMOJI = {
    "red": "❌",
    "green": "✅",
    "yellow": "⚠️",
    "blue": "ℹ️",
    "neutral": "⚪",
}

CONFLUENCE_MACROS = {
    "pagetree": "Page tree structure",
    "children": "Child pages list",
    "toc": "Table of contents",
    "jira": "Jira issue/filter",
    "confluence-content": "Included Confluence content",
    "drawio": "draw.io diagram",
    "plantuml": "PlantUML diagram",
}


@dataclass(frozen=True)
class Dialect:
    """Product-specific rendering choices.

    Attributes:
        name: Dialect identifier
        product: Label used in generic macro placeholders
        panel_labels: Marker line per lowercase panel kind
        status_emoji: Prefix per lowercase status color
        macros: Description per known extension key
        date_format: strftime format for date nodes
    """
    name: str
    product: str
    panel_labels: Dict[str, str] = field(default_factory=lambda: dict(PANEL_LABELS))
    status_emoji: Dict[str, str] = field(default_factory=lambda: dict(STATUS_EMOJI))
    macros: Dict[str, str] = field(default_factory=dict)
    date_format: str = "%Y-%m-%d"

    def panel_label(self, panel_kind: str) -> str:
        """Get the marker line for a panel kind (case-insensitive)."""
        label = self.panel_labels.get(panel_kind.lower())
        if label is not None:
            return label
        title = panel_kind.title() if panel_kind else "Note"
        return f"ℹ️  **{title}**"

    def status_prefix(self, color: str) -> Optional[str]:
        """Get the emoji prefix for a status color, or None."""
        return self.status_emoji.get(color.lower())


CONFLUENCE = Dialect(
    name="confluence",
    product="Confluence",
    macros=dict(CONFLUENCE_MACROS),
)

JIRA = Dialect(
    name="jira",
    product="Jira",
    date_format="%b %d, %Y",
)
