"""Selector: XPath 1.0 node selection over the node model.

Selectors are compiled with ``lxml.etree.XPath``.  The node model has no
XPath engine of its own, so evaluation mirrors the tree into a scratch lxml
document, runs the compiled expression there and maps every result back to
the model node it was built from:

- elements map one to one;
- attribute results (smart strings with ``is_attribute``) map to the owner's
  ``Attribute``;
- text results map to the ``Text`` that produced the element's ``text`` or a
  child's ``tail``.

Names in the mirror follow the model's qualified names.  A ``prefix:local``
name lives in the namespace first declared for that prefix anywhere in the
tree, and the same prefix is bound for the expression, so ``/f:r/f:c``
selects what the document spells ``<f:c>``.  An unprefixed name has no
namespace even under a default namespace declaration: ``/r/c`` selects
``<c>`` whatever its default namespace.

Compilation raises ``MalformedSelectorError`` on a syntax error.  Evaluation
raises it when the expression cannot be evaluated (an unbound prefix, an
unknown function) or yields a number, string or boolean instead of nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lxml import etree

from xml_patch.errors import MalformedSelectorError
from xml_patch.tree.builder import XML_NAMESPACE
from xml_patch.tree.nodes import Attribute, Element, Node, Text

__all__ = ["Selector", "compile_selector"]

# namespace for prefixes used in the model but declared nowhere in the tree
_UNDECLARED = "urn:xml-patch:undeclared:"

NamespaceBindings = tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class Selector:
    """A compiled selector.

    Example::

        selector = compile_selector("/r/c[@id='x']/@version")
        attribute = selector.first(root)
    """

    source: str
    _compiled: dict[NamespaceBindings, etree.XPath] = field(
        default_factory=dict, compare=False, repr=False
    )

    def select(self, root: Element) -> list[Node]:
        """All nodes matched by this selector, in document order."""
        mirror = _Mirror(root)
        xpath = self._xpath(mirror.bindings)
        try:
            result = xpath(mirror.root)
        except etree.XPathError as exc:
            raise MalformedSelectorError(self.source, str(exc)) from exc
        if not isinstance(result, list):
            raise MalformedSelectorError(
                self.source, f"expression yields {type(result).__name__}, not nodes"
            )
        nodes: list[Node] = []
        for item in result:
            node = mirror.resolve(item)
            if node is not None:
                nodes.append(node)
        return nodes

    def first(self, root: Element) -> Node | None:
        matched = self.select(root)
        return matched[0] if matched else None

    def _xpath(self, bindings: NamespaceBindings) -> etree.XPath:
        xpath = self._compiled.get(bindings)
        if xpath is None:
            xpath = _compile(self.source, dict(bindings))
            self._compiled[bindings] = xpath
        return xpath


def compile_selector(source: str) -> Selector:
    """Check ``source`` and wrap it in a Selector.

    Raises:
        MalformedSelectorError: If ``source`` is not a valid XPath expression.
    """
    if not source.strip():
        raise MalformedSelectorError(source, "empty selector")
    selector = Selector(source)
    selector._xpath(())
    return selector


def _compile(source: str, namespaces: dict[str, str]) -> etree.XPath:
    try:
        return etree.XPath(source, namespaces=namespaces)
    except etree.XPathError as exc:
        raise MalformedSelectorError(source, str(exc)) from exc


class _Mirror:
    """Scratch lxml copy of a model tree plus the way back to model nodes."""

    def __init__(self, root: Element) -> None:
        self._uris: dict[str, str] = {}
        self._elements: dict[etree._Element, Element] = {}
        self._attributes: dict[tuple[etree._Element, str], Attribute] = {}
        self._texts: dict[tuple[etree._Element, bool], Text] = {}
        self.root = self._build(root, None, {})

    @property
    def bindings(self) -> NamespaceBindings:
        return tuple(sorted(self._uris.items()))

    def resolve(self, item: object) -> Node | None:
        """Model node behind one XPath result item, None for non-nodes."""
        if isinstance(item, etree._Element):
            return self._elements.get(item)
        getparent = getattr(item, "getparent", None)
        if getparent is None:
            return None
        owner = getparent()
        if owner is None:
            return None
        if getattr(item, "is_attribute", False):
            return self._attributes.get((owner, item.attrname))  # type: ignore[attr-defined]
        if getattr(item, "is_text", False) or getattr(item, "is_tail", False):
            return self._texts.get((owner, bool(item.is_tail)))  # type: ignore[attr-defined]
        return None

    def _build(
        self,
        node: Element,
        parent: etree._Element | None,
        in_scope: dict[str | None, str],
    ) -> etree._Element:
        scope = {**in_scope, **node.namespaces}
        tag = self._clark(node.name, scope)
        if parent is None:
            mirrored = etree.Element(tag)
        else:
            mirrored = etree.SubElement(parent, tag)
        self._elements[mirrored] = node

        for name, attribute in node.attributes.items():
            clark = self._clark(name, scope)
            mirrored.set(clark, attribute.value)
            self._attributes[(mirrored, clark)] = attribute

        last: etree._Element | None = None
        for child in node.children:
            if isinstance(child, Element):
                last = self._build(child, mirrored, scope)
            elif last is None:
                mirrored.text = (mirrored.text or "") + child.value
                self._texts.setdefault((mirrored, False), child)
            else:
                last.tail = (last.tail or "") + child.value
                self._texts.setdefault((last, True), child)
        return mirrored

    def _clark(self, name: str, scope: dict[str | None, str]) -> str:
        prefix, sep, local = name.partition(":")
        if not sep:
            return name
        if prefix == "xml":
            return f"{{{XML_NAMESPACE}}}{local}"
        uri = self._uris.get(prefix)
        if uri is None:
            uri = scope.get(prefix) or _UNDECLARED + prefix
            self._uris[prefix] = uri
        return f"{{{uri}}}{local}"
