"""Tests for TreeBuilder and TreeSerializer.

Covers element/attribute/text conversion, whitespace handling, comment and
processing-instruction removal, namespace prefixes, file parsing, and
serializer output that parses back to an equal tree.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from lxml import etree

from xml_patch.errors import XmlPatchError
from xml_patch.tree import Element, Text, TreeBuilder, TreeSerializer

# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class TestBuilder:
    def test_root_name_and_attributes(self, xml: Callable[[str], Element]) -> None:
        root = xml('<r version="1" id="x"/>')
        assert root.name == "r"
        assert {n: a.value for n, a in root.attributes.items()} == {
            "version": "1",
            "id": "x",
        }
        assert root.parent is None

    def test_text_child(self, xml: Callable[[str], Element]) -> None:
        root = xml("<r><c>old</c></r>")
        (child,) = root.element_children()
        assert child.text == "old"
        assert child.parent is root

    def test_indentation_is_dropped(self, xml: Callable[[str], Element]) -> None:
        root = xml("<r>\n  <a/>\n  <b/>\n</r>")
        assert all(isinstance(c, Element) for c in root.children)
        assert len(root.children) == 2

    def test_leaf_whitespace_is_kept(self, xml: Callable[[str], Element]) -> None:
        root = xml("<r>  </r>")
        assert root.text == "  "

    def test_whitespace_kept_when_not_stripping(self) -> None:
        root = TreeBuilder(strip_whitespace=False).from_string("<r>\n  <a/>\n</r>")
        assert isinstance(root.children[0], Text)
        assert isinstance(root.children[2], Text)

    def test_tail_text_becomes_sibling(self, xml: Callable[[str], Element]) -> None:
        root = xml("<r>head<a/>tail</r>")
        assert [type(c).__name__ for c in root.children] == ["Text", "Element", "Text"]
        assert root.children[2].value == "tail"  # type: ignore[union-attr]

    def test_comments_and_pis_are_removed(self, xml: Callable[[str], Element]) -> None:
        root = xml("<r><!-- note --><?pi data?><a/></r>")
        assert [c.name for c in root.element_children()] == ["a"]
        assert len(root.children) == 1

    def test_prefixed_names(self, xml: Callable[[str], Element]) -> None:
        root = xml('<f:r xmlns:f="urn:f" f:kind="x" xml:lang="en"><f:c/></f:r>')
        assert root.name == "f:r"
        assert set(root.attributes) == {"f:kind", "xml:lang"}
        assert root.element_children()[0].name == "f:c"
        assert root.namespaces == {"f": "urn:f"}

    def test_default_namespace_keeps_local_names(
        self, xml: Callable[[str], Element]
    ) -> None:
        root = xml('<r xmlns="urn:d"><c/></r>')
        assert root.name == "r"
        assert root.element_children()[0].name == "c"

    def test_str_and_bytes_are_equivalent(self, builder: TreeBuilder) -> None:
        assert builder.from_string("<r><a/></r>") == builder.from_string(b"<r><a/></r>")

    def test_parse_path(self, builder: TreeBuilder, tmp_path: Path) -> None:
        path = tmp_path / "doc.xml"
        path.write_bytes(b"<r><a>1</a></r>")
        assert builder.parse(path) == builder.from_string("<r><a>1</a></r>")
        assert builder.parse(str(path)) == builder.parse(path)

    def test_malformed_raises(self, builder: TreeBuilder) -> None:
        with pytest.raises(etree.XMLSyntaxError):
            builder.from_string("<r><a></r>")


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------


class TestSerializer:
    @pytest.mark.parametrize(
        "document",
        [
            '<r version="1"><c>old</c><d/></r>',
            "<r>head<a/>tail<b>x</b></r>",
            '<f:r xmlns:f="urn:f" f:kind="x"><f:c xml:lang="en">t</f:c></f:r>',
            '<r xmlns="urn:d"><c id="1"/></r>',
        ],
    )
    def test_output_parses_back_equal(
        self, builder: TreeBuilder, document: str
    ) -> None:
        tree = builder.from_string(document)
        again = builder.from_string(TreeSerializer().to_bytes(tree))
        assert again == tree

    def test_declaration_and_encoding(self, xml: Callable[[str], Element]) -> None:
        data = TreeSerializer().to_bytes(xml("<r/>"))
        assert data.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")

    def test_without_declaration(self, xml: Callable[[str], Element]) -> None:
        data = TreeSerializer(pretty_print=False).to_bytes(
            xml("<r><a/></r>"), xml_declaration=False
        )
        assert data == b"<r><a/></r>"

    def test_default_namespace_survives(self, xml: Callable[[str], Element]) -> None:
        element = TreeSerializer().to_element(xml('<r xmlns="urn:d"><c/></r>'))
        assert element.tag == "{urn:d}r"
        assert element[0].tag == "{urn:d}c"

    def test_undeclared_prefix_raises(self) -> None:
        with pytest.raises(XmlPatchError, match="undeclared namespace prefix"):
            TreeSerializer().to_element(Element("p:r"))
