"""Exception hierarchy for xml-patch.

Two kinds of failure exist:

- Fatal conditions abort the whole run and propagate to the caller:
  ``StructureMismatchError`` (differencer) and ``UnknownOperationError``
  (merger).
- Per-operation conditions are raised inside the merger, caught at the
  operation boundary, counted and reported to the notification listener:
  ``AddressResolutionError`` and ``MalformedSelectorError``.
"""

from __future__ import annotations

__all__ = [
    "AddressResolutionError",
    "MalformedSelectorError",
    "StructureMismatchError",
    "UnknownOperationError",
    "XmlPatchError",
]


class XmlPatchError(Exception):
    """Base class for every error raised by xml-patch."""


class StructureMismatchError(XmlPatchError):
    """The two documents being compared do not share a root element name."""

    def __init__(self, source_path: str, target_path: str) -> None:
        super().__init__(
            f"not comparing same root nodes; {source_path} {target_path}"
        )
        self.source_path = source_path
        self.target_path = target_path


class UnknownOperationError(XmlPatchError):
    """A patch document contains a top-level operation other than add/remove/replace."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"Invalid merge operation {tag}")
        self.tag = tag


class MalformedSelectorError(XmlPatchError):
    """A selector is not valid XPath, or does not evaluate to a node-set."""

    def __init__(self, selector: str, reason: str) -> None:
        super().__init__(f"malformed selector {selector!r}: {reason}")
        self.selector = selector
        self.reason = reason


class AddressResolutionError(XmlPatchError):
    """A selector parsed correctly but matched no node, or matched the wrong kind."""

    def __init__(self, selector: str, reason: str = "no matching node") -> None:
        super().__init__(f"cannot resolve {selector!r}: {reason}")
        self.selector = selector
        self.reason = reason
