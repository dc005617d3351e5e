"""TreeBuilder: converts lxml documents into the Element/Attribute/Text model.

Parsing is delegated to ``lxml.etree`` with comments and processing
instructions stripped, since neither takes part in a diff.  The builder then
walks the lxml tree recursively:

- Element names keep their namespace prefix (``fix:message``).
- Attribute names are mapped back from Clark notation (``{uri}local``) to
  ``prefix:local`` using the element's in-scope namespace map.
- ``element.text`` becomes a leading Text child and each ``child.tail``
  becomes a Text sibling after that child.

Whitespace-only text inside element content (i.e. indentation between
child elements) is dropped when ``strip_whitespace`` is true.  Whitespace-only
text in a leaf element is real content and is always kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO

from lxml import etree

from xml_patch.tree.nodes import Element, Text

__all__ = ["XML_NAMESPACE", "TreeBuilder"]

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Source accepted by TreeBuilder.parse: a filesystem path or an open binary file
XmlSource = str | Path | IO[bytes]


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )


@dataclass
class TreeBuilder:
    """Builds the node model from XML text, files or lxml elements.

    Example::

        builder = TreeBuilder()
        root = builder.from_string('<r version="1"><c>old</c></r>')
        # root: Element("r", {"version": "1"}) -> Element("c") -> Text("old")
    """

    strip_whitespace: bool = True

    def parse(self, source: XmlSource) -> Element:
        """Parse a document from a path or binary file object.

        Raises:
            lxml.etree.XMLSyntaxError: If the document is not well-formed.
        """
        if isinstance(source, Path):
            source = str(source)
        document = etree.parse(source, _make_parser())
        return self.from_element(document.getroot())

    def from_string(self, text: str | bytes) -> Element:
        """Parse a document held in memory."""
        if isinstance(text, str):
            text = text.encode("utf-8")
        return self.from_element(etree.fromstring(text, _make_parser()))

    def from_element(self, element: etree._Element) -> Element:
        """Convert an lxml element (and its subtree) into a detached Element."""
        return self._build_element(element)

    def _build_element(self, source: etree._Element) -> Element:
        node = Element(
            _qualified_name(source.tag, source.prefix),
            namespaces=dict(source.nsmap),
        )

        for key, value in source.attrib.items():
            node.set_attribute(self._attribute_name(key, source.nsmap), value)

        children = [child for child in source if isinstance(child.tag, str)]
        keep_blank = not children or not self.strip_whitespace

        if source.text and (keep_blank or source.text.strip()):
            node.append(Text(source.text))

        for child in source:
            if isinstance(child.tag, str):
                node.append(self._build_element(child))
            # comments and PIs are removed by the parser, but entity
            # references and the like may still carry a tail
            if child.tail and (keep_blank or child.tail.strip()):
                node.append(Text(child.tail))

        return node

    @staticmethod
    def _attribute_name(key: str, nsmap: dict[str | None, str]) -> str:
        qname = etree.QName(key)
        if qname.namespace is None:
            return qname.localname
        if qname.namespace == XML_NAMESPACE:
            return f"xml:{qname.localname}"
        for prefix, uri in nsmap.items():
            if prefix is not None and uri == qname.namespace:
                return f"{prefix}:{qname.localname}"
        return qname.localname


def _qualified_name(tag: str, prefix: str | None) -> str:
    local = etree.QName(tag).localname
    return f"{prefix}:{local}" if prefix else local
