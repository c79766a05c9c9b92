"""Data models for ADF (Atlassian Document Format) documents.

ADF is the JSON tree format used by Confluence page bodies, Confluence
comments, Jira issue descriptions and Jira comments. A document is built once
per API response, converted once, and discarded, so the models are plain
dataclasses with no mutation helpers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Mark:
    """Inline formatting annotation on a text node.

    Attributes:
        kind: Mark kind as supplied (e.g. "strong", "em", "link")
        url: Link target for hyperlink marks
        color: Hex or named color for text-color marks
    """
    kind: str
    url: Optional[str] = None
    color: Optional[str] = None


@dataclass
class Node:
    """A single node in an ADF content tree.

    Attributes:
        kind: Node kind string; an open set, unknown kinds fail conversion
        children: Child nodes in document order
        text: Text content (only meaningful for text nodes)
        marks: Marks applied to a text node, outermost first
        attributes: Every attribute from the source JSON, known or not
    """
    kind: str
    children: List["Node"] = field(default_factory=list)
    text: str = ""
    marks: List[Mark] = field(default_factory=list)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def attr_str(self, name: str, default: str = "") -> str:
        """Get a string attribute.

        Integers are converted to their decimal form; any other type
        (missing, null, nested object) yields the default.
        """
        value = self.attributes.get(name)
        if isinstance(value, str):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return default

    def attr_int(self, name: str, default: int = 0) -> int:
        """Get an integer attribute, accepting numeric strings and floats."""
        value = self.attributes.get(name)
        if isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return default
        return default

    def attr_dict(self, name: str) -> Dict[str, Any]:
        """Get a nested object attribute, or an empty dict."""
        value = self.attributes.get(name)
        if isinstance(value, dict):
            return value
        return {}


@dataclass
class Document:
    """Root of an ADF document.

    Attributes:
        version: Schema version, passed through without interpretation
        content: Top-level nodes in document order
    """
    version: int = 1
    content: List[Node] = field(default_factory=list)
    type: str = "doc"
