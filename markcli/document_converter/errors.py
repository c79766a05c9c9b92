"""Exceptions raised by the document converter."""

from markcli.atlassian_client.errors import ConversionError


class UnsupportedNodeKindError(ConversionError):
    """Raised when a document contains a node kind with no rendering rule.

    The whole conversion is aborted; callers decide how to degrade.
    """

    def __init__(self, kind: str):
        super().__init__(f"unsupported content type: {kind}")
        self.kind = kind


class InvalidDocumentError(ConversionError):
    """Raised when raw input cannot be decoded into a document."""

    def __init__(self, message: str):
        super().__init__(f"invalid document: {message}")
        self.reason = message
