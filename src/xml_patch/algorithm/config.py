"""DiffConfig and ElementOrdering for differencer configuration.

DiffConfig is a frozen (immutable) dataclass holding the differencer
parameters.  ElementOrdering selects how sibling elements are matched:
in document order (ordered) or by comparison key regardless of position
(unordered).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

from xml_patch.addressing import KEY_ATTRIBUTES


class ElementOrdering(StrEnum):
    """How child elements are compared during differencing.

    - ORDERED:   Document order is significant.  Siblings are merge-joined by
                 comparison key in document order; inserts are
                 positioned before the next unconsumed source element.
    - UNORDERED: Siblings are sorted by comparison key and merge-joined.
                 Inserts are always appended.
    """

    ORDERED = auto()
    UNORDERED = auto()


@dataclass(frozen=True, slots=True)
class DiffConfig:
    """Immutable configuration for the Differencer.

    Attributes:
        ordering: How sibling elements are matched.  Default ORDERED.
        key_attributes: Attribute names (looked up case-insensitively, in
            priority order) that identify an element among its siblings.
            Used both for the comparison key and for addressing.
            Default ``("id", "name")``.
        strip_whitespace_text: When True, whitespace-only text between child
            elements is ignored by the tree builder.  Default True.
    """

    ordering: ElementOrdering = ElementOrdering.ORDERED
    key_attributes: tuple[str, ...] = KEY_ATTRIBUTES
    strip_whitespace_text: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.ordering, ElementOrdering):
            msg = f"ordering must be an ElementOrdering, got {self.ordering!r}"
            raise ValueError(msg)
        if isinstance(self.key_attributes, str):
            msg = "key_attributes must be a sequence of names, not a string"
            raise ValueError(msg)
        if any(not name for name in self.key_attributes):
            msg = f"key_attributes must be non-empty names, got {self.key_attributes!r}"
            raise ValueError(msg)

    @property
    def ordered(self) -> bool:
        return self.ordering is ElementOrdering.ORDERED

    @classmethod
    def for_mode(cls, ordered: bool) -> DiffConfig:
        return cls(ordering=ElementOrdering.ORDERED if ordered else ElementOrdering.UNORDERED)
