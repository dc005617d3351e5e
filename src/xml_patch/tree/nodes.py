"""Element, Attribute and Text dataclasses plus the NodeType StrEnum.

The node model is a small sum type: every node is exactly one of
``Element``, ``Attribute`` or ``Text``, and callers dispatch on the concrete
class with ``match``.  Ownership is explicit:

- An ``Element`` owns its ordered ``children`` (Elements and Texts) and its
  ``attributes`` mapping (name -> Attribute, order-insensitive).
- Every child keeps a ``parent`` back-link and every attribute an ``owner``
  back-link.  Back-links are maintained by the mutation helpers on
  ``Element`` and are excluded from equality and repr, so ``==`` compares
  structure only.
- A detached node has ``parent is None`` (or ``owner is None``).  Clones are
  always detached.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TypeAlias

__all__ = ["Attribute", "Element", "Node", "NodeType", "Text"]


class NodeType(StrEnum):
    """Discriminator for the three node kinds.

    - ELEMENT   -> "element"   : a named node with children and attributes
    - ATTRIBUTE -> "attribute" : a name/value pair owned by an element
    - TEXT      -> "text"      : character content inside an element
    """

    ELEMENT = auto()
    ATTRIBUTE = auto()
    TEXT = auto()


@dataclass(slots=True)
class Attribute:
    """A name/value pair owned by an Element.

    Attributes:
        name:  Qualified attribute name (``prefix:local`` when namespaced).
        value: Attribute value.
        owner: Element carrying this attribute, or None when detached.
    """

    name: str
    value: str
    owner: Element | None = field(default=None, compare=False, repr=False)

    @property
    def node_type(self) -> NodeType:
        return NodeType.ATTRIBUTE

    def clone(self) -> Attribute:
        return Attribute(self.name, self.value)


@dataclass(slots=True)
class Text:
    """Character content inside an Element."""

    value: str
    parent: Element | None = field(default=None, compare=False, repr=False)

    @property
    def node_type(self) -> NodeType:
        return NodeType.TEXT

    def clone(self) -> Text:
        return Text(self.value)


@dataclass(slots=True)
class Element:
    """A named node with ordered children and an unordered attribute set.

    Attributes:
        name:       Qualified element name (``prefix:local`` when namespaced).
        attributes: Attribute name -> Attribute.  Insertion order is kept for
                    serialization but never affects equality.
        children:   Ordered child Elements and Texts.
        namespaces: In-scope namespace declarations (prefix -> URI, None for
                    the default namespace).  Used only by the serializer.
        parent:     Enclosing Element, or None for a root or detached node.
    """

    name: str
    attributes: dict[str, Attribute] = field(default_factory=dict)
    children: list[Element | Text] = field(default_factory=list)
    namespaces: dict[str | None, str] = field(
        default_factory=dict, compare=False, repr=False
    )
    parent: Element | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        for attribute in self.attributes.values():
            attribute.owner = self
        for child in self.children:
            child.parent = self

    @property
    def node_type(self) -> NodeType:
        return NodeType.ELEMENT

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def text_node(self) -> Text | None:
        """The first direct Text child, or None."""
        for child in self.children:
            if isinstance(child, Text):
                return child
        return None

    @property
    def text(self) -> str | None:
        node = self.text_node
        return node.value if node is not None else None

    def element_children(self) -> list[Element]:
        return [child for child in self.children if isinstance(child, Element)]

    def iter(self) -> Iterator[Element]:
        """Yield this element and every descendant element in document order."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def get_attribute(self, name: str, *, ignore_case: bool = False) -> Attribute | None:
        attribute = self.attributes.get(name)
        if attribute is not None or not ignore_case:
            return attribute
        folded = name.casefold()
        for candidate_name, candidate in self.attributes.items():
            if candidate_name.casefold() == folded:
                return candidate
        return None

    def index_of(self, child: Element | Text) -> int:
        """Position of ``child`` in ``children`` by identity (not equality)."""
        for index, candidate in enumerate(self.children):
            if candidate is child:
                return index
        raise ValueError(f"{child!r} is not a child of <{self.name}>")

    def next_sibling(self) -> Element | Text | None:
        if self.parent is None:
            return None
        index = self.parent.index_of(self) + 1
        siblings = self.parent.children
        return siblings[index] if index < len(siblings) else None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_attribute(self, name: str, value: str) -> Attribute:
        """Set ``name`` to ``value``, overwriting any previous value."""
        attribute = self.attributes.get(name)
        if attribute is None:
            attribute = Attribute(name, value, owner=self)
            self.attributes[name] = attribute
        else:
            attribute.value = value
        return attribute

    def remove_attribute(self, name: str) -> Attribute | None:
        attribute = self.attributes.pop(name, None)
        if attribute is not None:
            attribute.owner = None
        return attribute

    def append(self, child: Element | Text) -> None:
        self.insert(len(self.children), child)

    def insert(self, index: int, child: Element | Text) -> None:
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.insert(index, child)

    def remove(self, child: Element | Text) -> None:
        del self.children[self.index_of(child)]
        child.parent = None

    def set_text(self, value: str) -> Text:
        """Update the first direct Text child, creating one if absent."""
        node = self.text_node
        if node is None:
            node = Text(value)
            self.append(node)
        else:
            node.value = value
        return node

    def clone(self) -> Element:
        """Deep copy of this subtree with no link back to the source tree."""
        return Element(
            self.name,
            attributes={name: attr.clone() for name, attr in self.attributes.items()},
            children=[child.clone() for child in self.children],
            namespaces=dict(self.namespaces),
        )


Node: TypeAlias = Element | Attribute | Text
