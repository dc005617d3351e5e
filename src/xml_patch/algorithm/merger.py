"""Merger: applies a patch document to a baseline tree in place.

The patch document is a ``<diff>`` element (already converted to the node
model) whose child elements are operations, applied strictly in document
order:

- ``<add sel=".." pos=".."? type="@name"?>``: set an attribute (``type``), or
  insert a clone of the element payload relative to the selected node, or
  append a text payload to the selected element.
- ``<replace sel="..">``: set the selected element's text, or the selected
  attribute's (or text node's) value.
- ``<remove sel=".."/>``: detach the selected node.

Failure policy:
- An unresolvable add/replace target, an unusable target or payload, and a
  malformed selector on any operation are *recoverable*: the operation is
  skipped, the error counted and reported to the listener, and merging
  continues.
- A missing remove target is silently ignored.
- An unknown operation tag is *fatal*: ``UnknownOperationError`` propagates
  and the merge is aborted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xml_patch.cache import SelectorCache
from xml_patch.errors import (
    AddressResolutionError,
    MalformedSelectorError,
    UnknownOperationError,
)
from xml_patch.events import Position
from xml_patch.listeners import LoggingListener, Severity
from xml_patch.result import MergeResult
from xml_patch.tree.nodes import Attribute, Element, Node, Text

if TYPE_CHECKING:
    from xml_patch.protocols import EventListener

__all__ = ["Merger"]

logger = logging.getLogger(__name__)


class Merger:
    """Replays patch operations against a baseline tree.

    A single Merger may be reused; each ``merge`` call counts its own errors.
    Compiled selectors are cached per instance.

    Example::

        from xml_patch.algorithm import Merger
        from xml_patch.tree import TreeBuilder

        builder = TreeBuilder()
        baseline = builder.from_string("<r><c>old</c></r>")
        patch = builder.from_string('<diff><replace sel="/r/c">new</replace></diff>')
        result = Merger().merge(baseline, patch)
        assert result.succeeded
        assert baseline.element_children()[0].text == "new"
    """

    def __init__(
        self,
        listener: EventListener | None = None,
        max_cache_size: int = 256,
    ) -> None:
        """Initialise the merger.

        Args:
            listener: Receiver of error and summary notifications.  Defaults
                to a ``LoggingListener`` on this module's logger.
            max_cache_size: Number of compiled selectors kept per instance.
        """
        self._listener: EventListener = (
            listener if listener is not None else LoggingListener(logger)
        )
        self._selectors = SelectorCache(max_size=max_cache_size)

    def merge(self, baseline: Element, patch: Element) -> MergeResult:
        """Apply every operation of ``patch`` to ``baseline``.

        Args:
            baseline: Document element of the tree to mutate.
            patch:    The ``<diff>`` element of a patch document.

        Returns:
            A ``MergeResult`` holding ``baseline`` (mutated in place) and the
            number of operations that failed.

        Raises:
            UnknownOperationError: On a top-level tag other than add, remove
                or replace.  Operations before it have already been applied.
        """
        errors = 0
        for operation in patch.element_children():
            match operation.name:
                case "add":
                    apply = self._add
                case "remove":
                    apply = self._remove
                case "replace":
                    apply = self._replace
                case _:
                    self._listener.event(
                        Severity.ERROR, "Invalid merge operation {0}", operation.name
                    )
                    raise UnknownOperationError(operation.name)

            selector = _attribute_value(operation, "sel")
            try:
                apply(baseline, operation, selector)
            except MalformedSelectorError as exc:
                errors += 1
                self._listener.event(
                    Severity.ERROR,
                    "Invalid selector for {0}; {1} ({2})",
                    operation.name,
                    selector,
                    exc.reason,
                )
            except AddressResolutionError as exc:
                errors += 1
                self._listener.event(
                    Severity.ERROR,
                    "Target not found for {0}; {1} ({2})",
                    operation.name,
                    selector,
                    exc.reason,
                )

        self._listener.event(Severity.INFO, "Merge completed with {0} errors", errors)
        return MergeResult(document=baseline, error_count=errors)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _add(self, baseline: Element, operation: Element, selector: str) -> None:
        target = self._resolve(baseline, selector)
        if target is None:
            raise AddressResolutionError(selector)

        attribute_type = _attribute_value(operation, "type")
        if attribute_type:
            if not isinstance(target, Element):
                raise AddressResolutionError(selector, "attribute target is not an element")
            target.set_attribute(attribute_type.removeprefix("@"), operation.text or "")
            return

        payload = _payload(operation)
        if payload is None:
            raise AddressResolutionError(selector, "add carries no element or text")
        position = _position(operation, selector)

        match target:
            case Element():
                _insert(target, payload, position, selector)
            case Text() if position in (Position.BEFORE, Position.AFTER):
                _insert(target, payload, position, selector)
            case _:
                raise AddressResolutionError(
                    selector, f"cannot add {position} a {target.node_type} node"
                )

    def _remove(self, baseline: Element, operation: Element, selector: str) -> None:
        target = self._resolve(baseline, selector)
        match target:
            case None:
                logger.debug("Target not found for remove; %s", selector)
            case Attribute(owner=Element() as owner):
                owner.remove_attribute(target.name)
            case Element(parent=Element() as parent) | Text(parent=Element() as parent):
                parent.remove(target)
            case _:
                logger.debug("Target of remove has no parent; %s", selector)

    def _replace(self, baseline: Element, operation: Element, selector: str) -> None:
        target = self._resolve(baseline, selector)
        value = operation.text or ""
        match target:
            case None:
                raise AddressResolutionError(selector)
            case Element():
                target.set_text(value)
            case Attribute() | Text():
                target.value = value

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, baseline: Element, selector: str) -> Node | None:
        if not selector:
            raise MalformedSelectorError(selector, "missing sel attribute")
        return self._selectors.compile(selector).first(baseline)


def _insert(
    target: Element | Text,
    payload: Element | Text,
    position: Position,
    selector: str,
) -> None:
    if position in (Position.BEFORE, Position.AFTER):
        parent = target.parent
        if parent is None:
            raise AddressResolutionError(
                selector, f"cannot add {position} the document element"
            )
        index = parent.index_of(target)
        parent.insert(index if position is Position.BEFORE else index + 1, payload)
    elif isinstance(target, Element):
        if position is Position.PREPEND:
            target.insert(0, payload)
        else:
            target.append(payload)


def _position(operation: Element, selector: str) -> Position:
    raw = _attribute_value(operation, "pos")
    if not raw:
        return Position.APPEND
    try:
        return Position(raw)
    except ValueError:
        raise AddressResolutionError(selector, f"unknown position {raw!r}") from None


def _payload(operation: Element) -> Element | Text | None:
    """Detached copy of the first element child, else of the text content."""
    for child in operation.children:
        if isinstance(child, Element):
            return child.clone()
    text = operation.text_node
    return text.clone() if text is not None else None


def _attribute_value(element: Element, name: str) -> str:
    attribute = element.attributes.get(name)
    return attribute.value if attribute is not None else ""
