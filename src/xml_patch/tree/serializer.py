"""TreeSerializer: writes the node model back out through lxml."""

from __future__ import annotations

from dataclasses import dataclass

from lxml import etree

from xml_patch.errors import XmlPatchError
from xml_patch.tree.builder import XML_NAMESPACE
from xml_patch.tree.nodes import Element, Text

__all__ = ["TreeSerializer"]


@dataclass
class TreeSerializer:
    """Converts Elements to lxml elements and serialized bytes.

    Prefixed names are resolved against each element's ``namespaces`` map;
    an undeclared prefix raises ``XmlPatchError``.
    """

    pretty_print: bool = True
    encoding: str = "UTF-8"

    def to_bytes(self, root: Element, *, xml_declaration: bool = True) -> bytes:
        return etree.tostring(
            self.to_element(root),
            pretty_print=self.pretty_print,
            xml_declaration=xml_declaration,
            encoding=self.encoding,
        )

    def to_element(
        self, node: Element, parent: etree._Element | None = None
    ) -> etree._Element:
        """Convert ``node`` into an lxml element, optionally appended to ``parent``."""
        tag = _clark_name(node.name, node.namespaces, use_default=True)
        nsmap = node.namespaces or None
        if parent is None:
            result = etree.Element(tag, nsmap=nsmap)
        else:
            result = etree.SubElement(parent, tag, nsmap=nsmap)

        for name, attribute in node.attributes.items():
            result.set(
                _clark_name(name, node.namespaces, use_default=False), attribute.value
            )

        last: etree._Element | None = None
        for child in node.children:
            if isinstance(child, Text):
                if last is None:
                    result.text = (result.text or "") + child.value
                else:
                    last.tail = (last.tail or "") + child.value
            else:
                last = self.to_element(child, result)
        return result


def _clark_name(name: str, namespaces: dict[str | None, str], *, use_default: bool) -> str:
    prefix, sep, local = name.partition(":")
    if not sep:
        default = namespaces.get(None) if use_default else None
        return f"{{{default}}}{name}" if default else name
    if prefix == "xml":
        return f"{{{XML_NAMESPACE}}}{local}"
    uri = namespaces.get(prefix)
    if uri is None:
        raise XmlPatchError(f"undeclared namespace prefix {prefix!r} in {name!r}")
    return f"{{{uri}}}{local}"
