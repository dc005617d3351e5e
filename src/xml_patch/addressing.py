"""Node addressing: stable, human-readable paths for nodes in a tree.

A path is a sequence of ``/``-separated steps from the document element down
to the node:

- Element step: ``name[@id='x']`` when the element carries a key attribute
  (``id`` first, then ``name``; looked up case-insensitively), otherwise
  ``name[n]`` with a 1-based position among same-named element siblings.
  The position is omitted when the element is the only sibling of that name,
  and the document element never carries a predicate.  A key predicate that
  would also match another sibling falls back to the position, so a path
  always selects exactly one node.
- Attribute: owner path + ``/@name``.
- Text: the owning element's path.  ``text_selector`` appends ``/text()``
  for operations that must target the text node itself.

The same function is applied to either side of a diff and to a baseline
during merging, so structurally corresponding nodes get identical paths.
"""

from __future__ import annotations

from collections.abc import Sequence

from xml_patch.tree.nodes import Attribute, Element, Node, Text

__all__ = [
    "KEY_ATTRIBUTES",
    "address",
    "element_step",
    "key_attribute",
    "text_selector",
]

KEY_ATTRIBUTES: tuple[str, ...] = ("id", "name")


def address(node: Node, key_attributes: Sequence[str] = KEY_ATTRIBUTES) -> str:
    """Return the path of ``node`` within its tree."""
    match node:
        case Element():
            steps: list[str] = []
            current: Element | None = node
            while current is not None:
                steps.append(element_step(current, key_attributes))
                current = current.parent
            return "/" + "/".join(reversed(steps))
        case Attribute(owner=None):
            raise ValueError(f"attribute {node.name!r} has no owner element")
        case Attribute(owner=owner):
            return f"{address(owner, key_attributes)}/@{node.name}"
        case Text(parent=None):
            raise ValueError("text node has no parent element")
        case Text(parent=parent):
            return address(parent, key_attributes)
    raise TypeError(f"Unsupported node type: {type(node)!r}")


def text_selector(text: Text, key_attributes: Sequence[str] = KEY_ATTRIBUTES) -> str:
    """Path selecting the text node itself rather than its element."""
    return f"{address(text, key_attributes)}/text()"


def key_attribute(
    element: Element, key_attributes: Sequence[str] = KEY_ATTRIBUTES
) -> Attribute | None:
    """First non-empty key attribute of ``element`` in priority order."""
    for name in key_attributes:
        attribute = element.get_attribute(name, ignore_case=True)
        if attribute is not None and attribute.value:
            return attribute
    return None


def element_step(element: Element, key_attributes: Sequence[str] = KEY_ATTRIBUTES) -> str:
    """Single path step for ``element`` relative to its parent."""
    if element.parent is None:
        return element.name

    same_named = [
        sibling
        for sibling in element.parent.children
        if isinstance(sibling, Element) and sibling.name == element.name
    ]

    attribute = key_attribute(element, key_attributes)
    if attribute is not None:
        quoted = _quote(attribute.value)
        if quoted is not None and _is_unique_key(same_named, attribute):
            return f"{element.name}[@{attribute.name}={quoted}]"

    if len(same_named) == 1:
        return element.name
    position = next(i for i, sibling in enumerate(same_named, 1) if sibling is element)
    return f"{element.name}[{position}]"


def _is_unique_key(same_named: list[Element], attribute: Attribute) -> bool:
    matches = 0
    for sibling in same_named:
        candidate = sibling.attributes.get(attribute.name)
        if candidate is not None and candidate.value == attribute.value:
            matches += 1
    return matches == 1


def _quote(value: str) -> str | None:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    return None
