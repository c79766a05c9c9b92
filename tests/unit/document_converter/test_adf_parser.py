"""Unit tests for document_converter.adf_parser module."""

import pytest

from markcli.document_converter.adf_parser import AdfParser
from markcli.document_converter.errors import InvalidDocumentError
from tests.fixtures.adf_fixtures import (
    ADF_WITH_TABLE,
    create_adf_doc,
    create_macro,
    create_mark,
    create_paragraph,
    create_text,
)


@pytest.fixture
def parser():
    """Create AdfParser instance."""
    return AdfParser()


class TestParseDocument:
    """Test cases for parse_document."""

    def test_parses_tree_structure(self, parser):
        document = parser.parse_document(ADF_WITH_TABLE)

        assert document.version == 1
        assert len(document.content) == 1
        table = document.content[0]
        assert table.kind == "table"
        assert [row.kind for row in table.children] == ["tableRow", "tableRow"]
        assert table.children[0].children[0].kind == "tableHeader"

    def test_rejects_non_dict(self, parser):
        with pytest.raises(InvalidDocumentError):
            parser.parse_document(["not", "a", "doc"])

    def test_rejects_wrong_root_type(self, parser):
        with pytest.raises(InvalidDocumentError) as exc_info:
            parser.parse_document({"type": "paragraph", "content": []})

        assert "expected type 'doc'" in str(exc_info.value)

    def test_missing_content_gives_empty_document(self, parser):
        document = parser.parse_document({"type": "doc", "version": 1})
        assert document.content == []

    def test_non_integer_version_defaults_to_one(self, parser):
        document = parser.parse_document({"type": "doc", "version": "x", "content": []})
        assert document.version == 1

    def test_non_object_children_are_skipped(self, parser):
        document = parser.parse_document(
            {"type": "doc", "content": ["stray", create_paragraph("kept"), None]}
        )
        assert [node.kind for node in document.content] == ["paragraph"]

    def test_unknown_kinds_are_kept(self, parser):
        """Deciding what to do with unknown kinds is the converter's job."""
        document = parser.parse_document(create_adf_doc([{"type": "unknownThing"}]))

        node = document.content[0]
        assert node.kind == "unknownThing"


class TestParseNode:
    """Test cases for attributes and marks."""

    def test_unrecognized_attributes_are_preserved(self, parser):
        doc = create_adf_doc([{
            "type": "heading",
            "attrs": {"level": 2, "localId": "abc", "custom": {"nested": [1, 2]}},
            "content": [create_text("Title")],
        }])

        heading = parser.parse_document(doc).content[0]

        assert heading.attributes == {"level": 2, "localId": "abc", "custom": {"nested": [1, 2]}}
        assert heading.attr_int("level") == 2

    def test_marks_are_parsed_in_order(self, parser):
        text = create_text(
            "x",
            create_mark("strong"),
            create_mark("link", href="https://example.com"),
            create_mark("textColor", color="#ff0000"),
        )
        node = parser.parse_document(create_adf_doc([create_paragraph(text)])).content[0].children[0]

        assert [mark.kind for mark in node.marks] == ["strong", "link", "textColor"]
        assert node.marks[1].url == "https://example.com"
        assert node.marks[2].color == "#ff0000"

    def test_macro_attributes(self, parser):
        node = parser.parse_document(create_adf_doc([create_macro("toc")])).content[0]

        assert node.kind == "extension"
        assert node.attr_str("extensionType") == "com.atlassian.confluence.macro.core"
        assert node.attr_str("extensionKey") == "toc"

    def test_attr_helpers_tolerate_wrong_types(self, parser):
        doc = create_adf_doc([{
            "type": "media",
            "attrs": {"width": "640", "height": 480.0, "id": 12, "flag": True},
        }])
        node = parser.parse_document(doc).content[0]

        assert node.attr_int("width") == 640
        assert node.attr_int("height") == 480
        assert node.attr_str("id") == "12"
        assert node.attr_int("flag") == 0
        assert node.attr_str("missing", "fallback") == "fallback"
        assert node.attr_dict("width") == {}


class TestParseFromString:
    """Test cases for parse_from_string."""

    def test_parses_json_text(self, parser):
        document = parser.parse_from_string('{"type": "doc", "version": 1, "content": []}')
        assert document.content == []

    def test_parses_bytes(self, parser):
        document = parser.parse_from_string(b'{"type": "doc", "content": [{"type": "rule"}]}')
        assert document.content[0].kind == "rule"

    def test_malformed_json_raises(self, parser):
        with pytest.raises(InvalidDocumentError) as exc_info:
            parser.parse_from_string("{oops")

        assert "malformed JSON" in str(exc_info.value)
