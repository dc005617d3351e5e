"""Comparison keys and sequence alignment for the differencer.

An element's comparison key is ``(name, key attribute values...)`` where the
key attributes default to ``id`` then ``name``.  Keys compare field by
field, but a key attribute only takes part when it is non-empty on *both*
sides: an empty value means "no constraint", not "smallest".  Two same-named
elements without ``id`` or ``name`` therefore compare equal whatever their
content, leaving the decision to position.

``align_sorted`` merge-joins two sequences into a stream of
``(Difference, index_a, index_b)`` steps: EQUAL advances both cursors, ADD
only B's, REMOVE only A's.  Unordered children are sorted by key first;
ordered children are joined in document order, which assumes the two
sequences already line up.  Indices on ADD steps point at the next
not-yet-consumed item of A (``len(a)`` once A is exhausted).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from functools import cmp_to_key
from typing import TypeVar

from xml_patch.addressing import KEY_ATTRIBUTES
from xml_patch.events import Difference
from xml_patch.tree.nodes import Element

__all__ = [
    "ComparisonKey",
    "align_sorted",
    "compare_keys",
    "comparison_key",
    "sort_by_key",
]

T = TypeVar("T")
Comparator = Callable[[T, T], int]
AlignmentStep = tuple[Difference, int, int]


@dataclass(frozen=True, slots=True)
class ComparisonKey:
    name: str
    values: tuple[str, ...]


def comparison_key(
    element: Element, key_attributes: Sequence[str] = KEY_ATTRIBUTES
) -> ComparisonKey:
    values = []
    for attribute_name in key_attributes:
        attribute = element.get_attribute(attribute_name, ignore_case=True)
        values.append(attribute.value if attribute is not None else "")
    return ComparisonKey(element.name, tuple(values))


def compare_keys(a: ComparisonKey, b: ComparisonKey) -> int:
    """Three-way comparison; empty key values are skipped, not ordered.

    Skipping makes the relation non-transitive: ``x[@id='1']`` and
    ``x[@id='2']`` both equal an unkeyed ``x`` yet differ from each other.
    Siblings that mix keyed and unkeyed elements can therefore pair up
    arbitrarily after sorting, and a mismatched pair shows up as attribute
    churn (``remove @id`` next to ``add @name``) rather than as element
    adds and removes.
    """
    result = _cmp(a.name, b.name)
    if result:
        return result
    for value_a, value_b in zip(a.values, b.values, strict=True):
        if value_a and value_b:
            result = _cmp(value_a, value_b)
            if result:
                return result
    return 0


def sort_by_key(
    elements: Sequence[Element], key_attributes: Sequence[str] = KEY_ATTRIBUTES
) -> list[Element]:
    """Stable sort of ``elements`` by comparison key."""
    keyed = [(comparison_key(e, key_attributes), e) for e in elements]
    keyed.sort(key=cmp_to_key(lambda x, y: compare_keys(x[0], y[0])))
    return [element for _, element in keyed]


def align_sorted(
    a: Sequence[T], b: Sequence[T], compare: Comparator[T]
) -> Iterator[AlignmentStep]:
    index_a = index_b = 0
    while index_a < len(a) or index_b < len(b):
        if index_a == len(a):
            yield Difference.ADD, index_a, index_b
            index_b += 1
        elif index_b == len(b):
            yield Difference.REMOVE, index_a, index_b
            index_a += 1
        else:
            result = compare(a[index_a], b[index_b])
            if result == 0:
                yield Difference.EQUAL, index_a, index_b
                index_a += 1
                index_b += 1
            elif result > 0:
                # B's item sorts first, so it is missing from A
                yield Difference.ADD, index_a, index_b
                index_b += 1
            else:
                yield Difference.REMOVE, index_a, index_b
                index_a += 1


def _cmp(a: str, b: str) -> int:
    return (a > b) - (a < b)
