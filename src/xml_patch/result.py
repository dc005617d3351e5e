"""MergeResult dataclass for merge output.

This module provides the result type returned by merge() calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from xml_patch.tree.nodes import Element

__all__ = ["MergeResult"]


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Result of a merge() call.

    Attributes:
        document: The baseline document element, mutated in place.  Always
            present, even when some operations failed.
        error_count: Number of operations that could not be applied.  A
            non-zero count means the document may be incomplete.
    """

    document: Element
    error_count: int

    @property
    def succeeded(self) -> bool:
        return self.error_count == 0
