"""Differencer: structural diff of two element trees into patch events.

Walks two trees in lock-step from their (name-matched) roots.  For each pair
of corresponding elements:

1. Text:       first direct text child of each side, compared after trimming.
2. Attributes: sorted by name and merge-joined.
3. Children:   direct child elements aligned by comparison key; matched
               pairs recurse, the rest become adds and removes.

Architecture:
- Addresses are computed against a scratch copy of the source tree (the
  *working* tree) which receives every edit as soon as its event is emitted.
  An address therefore describes the node as the merger will find it when
  it replays the events in order, even after earlier inserts and removals
  among the same siblings.  The caller's trees are never mutated.
- Every payload handed to the sink is a fresh clone, independent of both
  the caller's trees and the working tree.
- Emission is deterministic: stable sorting and fixed traversal order mean
  identical inputs always give identical event streams.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from xml_patch.addressing import address, text_selector
from xml_patch.algorithm.config import DiffConfig
from xml_patch.algorithm.keys import (
    align_sorted,
    compare_keys,
    comparison_key,
    sort_by_key,
)
from xml_patch.errors import StructureMismatchError
from xml_patch.events import Add, Difference, PatchEvent, Position, Remove, Replace
from xml_patch.selector import compile_selector
from xml_patch.tree.nodes import Attribute, Element, Node

if TYPE_CHECKING:
    from xml_patch.protocols import PatchSink

__all__ = ["Differencer"]

logger = logging.getLogger(__name__)


class Differencer:
    """Emits the add/replace/remove events that turn one tree into another.

    Example::

        from xml_patch.algorithm import Differencer, DiffConfig, ElementOrdering
        from xml_patch.sinks import PatchCollector

        sink = PatchCollector()
        Differencer(DiffConfig(ordering=ElementOrdering.UNORDERED)).diff(a, b, sink)
        for event in sink:
            print(event.difference, event.address)
    """

    def __init__(self, config: DiffConfig | None = None) -> None:
        """Initialise the differencer.

        Args:
            config: Differencer parameters.  Defaults to ``DiffConfig()``
                (ordered children, ``id``/``name`` key attributes).
        """
        self._config = config if config is not None else DiffConfig()

    @property
    def config(self) -> DiffConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def diff(self, source: Element, target: Element, sink: PatchSink) -> None:
        """Emit to ``sink`` the events that transform ``source`` into ``target``.

        Raises:
            StructureMismatchError: If the root element names differ.  No
                events are emitted in that case.
        """
        if source.name != target.name:
            raise StructureMismatchError(
                address(source, self._config.key_attributes),
                address(target, self._config.key_attributes),
            )
        run = _DiffRun(sink, self._config)
        run.diff_elements(source.clone(), target)
        logger.debug("diff of <%s> complete; %d events", source.name, run.emitted)

    def diff_subtrees(
        self,
        source: Element,
        source_selector: str,
        target: Element,
        target_selector: str,
        sink: PatchSink,
    ) -> None:
        """Diff the elements selected in each tree instead of the whole documents.

        Addresses in the emitted events are still absolute paths within
        ``source``, so the patch applies to the full source document.

        Raises:
            MalformedSelectorError: If either selector cannot be parsed.
            ValueError: If either selector does not select an Element.
            StructureMismatchError: If the selected elements' names differ.
        """
        working_root = source.clone()
        subtree_a = compile_selector(source_selector).first(working_root)
        subtree_b = compile_selector(target_selector).first(target)
        if not isinstance(subtree_a, Element) or not isinstance(subtree_b, Element):
            raise ValueError("Nodes to compare are not both Elements")
        if subtree_a.name != subtree_b.name:
            raise StructureMismatchError(source_selector, target_selector)

        run = _DiffRun(sink, self._config)
        run.diff_elements(subtree_a, subtree_b)
        logger.debug(
            "diff of %s against %s complete; %d events",
            source_selector,
            target_selector,
            run.emitted,
        )


class _DiffRun:
    """State of one diff call: the sink, the config and the event count."""

    def __init__(self, sink: PatchSink, config: DiffConfig) -> None:
        self._sink = sink
        self._keys = config.key_attributes
        self._ordered = config.ordered
        self.emitted = 0

    def diff_elements(self, a: Element, b: Element) -> None:
        """Recursively diff ``a`` (working tree) against ``b`` (target tree)."""
        self._diff_text(a, b)
        self._diff_attributes(a, b)
        self._diff_children(a, b)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _diff_text(self, a: Element, b: Element) -> None:
        text_a, text_b = a.text_node, b.text_node
        if text_a is None:
            if text_b is not None:
                self._emit(Add(self._address(a), text_b.clone()))
                a.append(text_b.clone())
        elif text_b is None:
            self._emit(Remove(text_selector(text_a, self._keys)))
            a.remove(text_a)
        elif text_a.value.strip() != text_b.value.strip():
            self._emit(Replace(self._address(a), text_b.clone(), text_a.clone()))
            text_a.value = text_b.value

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _diff_attributes(self, a: Element, b: Element) -> None:
        attributes_a = sorted(a.attributes.values(), key=_attribute_name)
        attributes_b = sorted(b.attributes.values(), key=_attribute_name)

        for difference, index_a, index_b in align_sorted(
            attributes_a, attributes_b, _compare_attribute_names
        ):
            match difference:
                case Difference.ADD:
                    added = attributes_b[index_b]
                    self._emit(Add(self._address(a), added.clone()))
                    a.set_attribute(added.name, added.value)
                case Difference.REMOVE:
                    removed = attributes_a[index_a]
                    self._emit(Remove(self._address(removed)))
                    a.remove_attribute(removed.name)
                case Difference.EQUAL:
                    old, new = attributes_a[index_a], attributes_b[index_b]
                    if old.value != new.value:
                        self._emit(Replace(self._address(old), new.clone(), old.clone()))
                        old.value = new.value

    # ------------------------------------------------------------------
    # Child elements
    # ------------------------------------------------------------------

    def _diff_children(self, a: Element, b: Element) -> None:
        children_a = a.element_children()
        children_b = b.element_children()

        if not self._ordered:
            children_a = sort_by_key(children_a, self._keys)
            children_b = sort_by_key(children_b, self._keys)

        for difference, index_a, index_b in align_sorted(
            children_a, children_b, self._compare_elements
        ):
            match difference:
                case Difference.EQUAL:
                    self.diff_elements(children_a[index_a], children_b[index_b])
                case Difference.ADD:
                    self._insert(a, children_a, index_a, children_b[index_b])
                case Difference.REMOVE:
                    self._remove(children_a[index_a])

    def _insert(
        self,
        parent: Element,
        siblings: Sequence[Element],
        next_index: int,
        element: Element,
    ) -> None:
        if self._ordered and next_index < len(siblings):
            anchor = siblings[next_index]
            self._emit(Add(self._address(anchor), element.clone(), Position.BEFORE))
            parent.insert(parent.index_of(anchor), element.clone())
        else:
            self._emit(Add(self._address(parent), element.clone()))
            parent.append(element.clone())

    def _remove(self, element: Element) -> None:
        self._emit(Remove(self._address(element)))
        if element.parent is not None:
            element.parent.remove(element)

    def _compare_elements(self, a: Element, b: Element) -> int:
        return compare_keys(comparison_key(a, self._keys), comparison_key(b, self._keys))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _address(self, node: Node) -> str:
        return address(node, self._keys)

    def _emit(self, event: PatchEvent) -> None:
        self._sink.accept(event)
        self.emitted += 1


def _attribute_name(attribute: Attribute) -> str:
    return attribute.name


def _compare_attribute_names(a: Attribute, b: Attribute) -> int:
    return (a.name > b.name) - (a.name < b.name)
