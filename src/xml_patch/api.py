"""Public API functions for xml-patch.

This module provides the user-facing functions: diff, diff_subtrees,
diff_documents, merge and merge_documents.  Each call creates a fresh
Differencer (or Merger) to guarantee zero global state between calls.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

from xml_patch.algorithm.config import DiffConfig
from xml_patch.algorithm.differ import Differencer
from xml_patch.algorithm.merger import Merger
from xml_patch.sinks import PatchCollector, PatchDocumentWriter
from xml_patch.tree.builder import TreeBuilder, XmlSource
from xml_patch.tree.serializer import TreeSerializer

if TYPE_CHECKING:
    from xml_patch.protocols import EventListener, PatchSink
    from xml_patch.result import MergeResult
    from xml_patch.tree.nodes import Element

__all__ = ["diff", "diff_documents", "diff_subtrees", "merge", "merge_documents"]


def diff(
    source: Element,
    target: Element,
    sink: PatchSink | None = None,
    *,
    ordered: bool = True,
    config: DiffConfig | None = None,
) -> PatchSink:
    """Emit the events that transform ``source`` into ``target``.

    Args:
        source: Document element of the original tree.
        target: Document element of the modified tree.
        sink:   Receiver of the events.  Defaults to a new ``PatchCollector``.
        ordered: Whether sibling order is significant.  Ignored when
                ``config`` is given.
        config: Full differencer configuration.

    Returns:
        The sink that received the events (the new collector when ``sink``
        was None).

    Raises:
        StructureMismatchError: If the root element names differ.
    """
    sink = sink if sink is not None else PatchCollector()
    config = config if config is not None else DiffConfig.for_mode(ordered)
    Differencer(config).diff(source, target, sink)
    return sink


def diff_subtrees(
    source: Element,
    source_selector: str,
    target: Element,
    target_selector: str,
    sink: PatchSink | None = None,
    *,
    ordered: bool = True,
    config: DiffConfig | None = None,
) -> PatchSink:
    """Like ``diff`` but compares the elements chosen by the two selectors.

    Raises:
        ValueError: If either selector does not select an element.
    """
    sink = sink if sink is not None else PatchCollector()
    config = config if config is not None else DiffConfig.for_mode(ordered)
    Differencer(config).diff_subtrees(
        source, source_selector, target, target_selector, sink
    )
    return sink


def diff_documents(
    source: XmlSource,
    target: XmlSource,
    out: IO[bytes] | None = None,
    *,
    ordered: bool = True,
    config: DiffConfig | None = None,
) -> bytes:
    """Diff two XML files and return the serialized patch document.

    Args:
        source: Path or binary file of the original document.
        target: Path or binary file of the modified document.
        out:    Optional binary stream that also receives the patch document.

    Returns:
        The ``<diff>`` patch document as bytes.
    """
    config = config if config is not None else DiffConfig.for_mode(ordered)
    builder = TreeBuilder(strip_whitespace=config.strip_whitespace_text)
    writer = PatchDocumentWriter(out)
    with writer:
        Differencer(config).diff(builder.parse(source), builder.parse(target), writer)
    return writer.to_bytes()


def merge(
    baseline: Element,
    patch: Element,
    listener: EventListener | None = None,
) -> MergeResult:
    """Apply a patch document to ``baseline`` in place.

    Returns:
        A ``MergeResult`` with the mutated baseline and the error count.

    Raises:
        UnknownOperationError: On a top-level tag other than add, remove or
            replace.
    """
    return Merger(listener=listener).merge(baseline, patch)


def merge_documents(
    baseline: XmlSource,
    patch: XmlSource,
    out: IO[bytes] | None = None,
    *,
    listener: EventListener | None = None,
) -> MergeResult:
    """Merge a patch file into a baseline file.

    The merged document is written to ``out`` whatever the error count;
    callers should treat a non-zero ``error_count`` as "output may be
    incomplete".
    """
    builder = TreeBuilder()
    result = merge(builder.parse(baseline), builder.parse(patch), listener=listener)
    if out is not None:
        out.write(TreeSerializer().to_bytes(result.document))
    return result
