"""ADF document to Markdown conversion.

This package parses Atlassian Document Format JSON into a node tree and
renders it as Markdown, with product-specific choices supplied by a dialect.
"""

from .adf_models import Document, Mark, Node
from .adf_parser import AdfParser
from .dialects import CONFLUENCE, JIRA, Dialect
from .errors import InvalidDocumentError, UnsupportedNodeKindError
from .markdown_converter import MarkdownConverter, convert, convert_json

__all__ = [
    "Document",
    "Mark",
    "Node",
    "AdfParser",
    "CONFLUENCE",
    "JIRA",
    "Dialect",
    "InvalidDocumentError",
    "UnsupportedNodeKindError",
    "MarkdownConverter",
    "convert",
    "convert_json",
]
