"""Patch events exchanged between the differencer and its sinks.

``PatchEvent`` is a tagged union of three frozen dataclasses:

- ``Add(address, value, position)``: insert ``value`` relative to the node
  at ``address``.  ``value`` is an Element, a Text or an Attribute.  For
  attributes the position is meaningless and always ``APPEND``.
- ``Replace(address, value, old_value)``: set the text of the element (or the
  value of the attribute) at ``address``.  ``old_value`` is kept for
  traceability and ignored when merging.
- ``Remove(address)``: detach the node at ``address``.

``Difference.EQUAL`` is used only while aligning node sequences and never
becomes an event.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TypeAlias

from xml_patch.tree.nodes import Node

__all__ = ["Add", "Difference", "PatchEvent", "Position", "Remove", "Replace"]


class Difference(StrEnum):
    ADD = auto()
    REPLACE = auto()
    REMOVE = auto()
    EQUAL = auto()


class Position(StrEnum):
    """Where an added Element or Text goes relative to the addressed node.

    - BEFORE  : preceding sibling of the addressed node
    - AFTER   : following sibling of the addressed node
    - APPEND  : last child of the addressed node (default, omitted on the wire)
    - PREPEND : first child of the addressed node
    """

    BEFORE = auto()
    AFTER = auto()
    APPEND = auto()
    PREPEND = auto()


@dataclass(frozen=True, slots=True)
class Add:
    address: str
    value: Node
    position: Position = Position.APPEND

    @property
    def difference(self) -> Difference:
        return Difference.ADD


@dataclass(frozen=True, slots=True)
class Replace:
    address: str
    value: Node
    old_value: Node

    @property
    def difference(self) -> Difference:
        return Difference.REPLACE


@dataclass(frozen=True, slots=True)
class Remove:
    address: str

    @property
    def difference(self) -> Difference:
        return Difference.REMOVE


PatchEvent: TypeAlias = Add | Replace | Remove
