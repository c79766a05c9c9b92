"""Parser for ADF (Atlassian Document Format) documents.

This module decodes ADF JSON (as returned in page bodies, comments and issue
descriptions) into Document/Node/Mark objects ready for conversion.
"""

import json
import logging
from typing import Any, Dict, List, Union

from .adf_models import Document, Mark, Node
from .errors import InvalidDocumentError

logger = logging.getLogger(__name__)


class AdfParser:
    """Parser for ADF documents.

    Converts ADF JSON to structured Document and Node objects. Unknown node
    kinds and unknown attribute keys are kept as-is; deciding what to do with
    them is the converter's job.
    """

    def parse_document(self, adf_json: Dict[str, Any]) -> Document:
        """Parse an ADF JSON document into a Document object.

        Args:
            adf_json: The ADF document as a dictionary (parsed JSON)

        Returns:
            Document object with parsed content tree

        Raises:
            InvalidDocumentError: If the JSON is not valid ADF format
        """
        if not isinstance(adf_json, dict):
            raise InvalidDocumentError("ADF must be a JSON object")

        doc_type = adf_json.get("type")
        if doc_type != "doc":
            raise InvalidDocumentError(f"expected type 'doc', got '{doc_type}'")

        version = adf_json.get("version", 1)
        if not isinstance(version, int):
            version = 1

        content = self._parse_children(adf_json.get("content"))
        logger.debug(f"Parsed ADF document with {len(content)} top-level nodes")

        return Document(version=version, content=content)

    def parse_from_string(self, adf_string: Union[str, bytes]) -> Document:
        """Parse an ADF JSON string into a Document object.

        Args:
            adf_string: The ADF document as a JSON string

        Returns:
            Document object with parsed content tree

        Raises:
            InvalidDocumentError: If the string is not valid JSON or not ADF
        """
        try:
            adf_json = json.loads(adf_string)
        except (TypeError, ValueError) as e:
            raise InvalidDocumentError(f"malformed JSON: {e}") from e
        return self.parse_document(adf_json)

    def _parse_children(self, content_data: Any) -> List[Node]:
        if not isinstance(content_data, list):
            return []
        return [
            self._parse_node(node_data)
            for node_data in content_data
            if isinstance(node_data, dict)
        ]

    def _parse_node(self, node_data: Dict[str, Any]) -> Node:
        """Parse a single ADF node from JSON.

        Args:
            node_data: Node data as a dictionary

        Returns:
            Parsed Node object
        """
        kind = node_data.get("type")
        if not isinstance(kind, str):
            kind = ""

        text = node_data.get("text")
        if not isinstance(text, str):
            text = ""

        attrs = node_data.get("attrs")
        if not isinstance(attrs, dict):
            attrs = {}

        marks = [
            self._parse_mark(mark_data)
            for mark_data in node_data.get("marks") or []
            if isinstance(mark_data, dict)
        ]

        return Node(
            kind=kind,
            children=self._parse_children(node_data.get("content")),
            text=text,
            marks=marks,
            attributes=dict(attrs),
        )

    def _parse_mark(self, mark_data: Dict[str, Any]) -> Mark:
        attrs = mark_data.get("attrs")
        if not isinstance(attrs, dict):
            attrs = {}
        url = attrs.get("href", attrs.get("url"))
        color = attrs.get("color")
        return Mark(
            kind=str(mark_data.get("type", "")),
            url=url if isinstance(url, str) else None,
            color=color if isinstance(color, str) else None,
        )
