"""algorithm subpackage: public API for differencing and merging.

Provides the differencer, the merger, their configuration, and the
comparison-key helpers.  Import from this module (not from sub-modules
directly) to stay on the stable public interface.

Example::

    from xml_patch.algorithm import Differencer, Merger
    from xml_patch.sinks import PatchCollector

    sink = PatchCollector()
    Differencer().diff(source, target, sink)
"""

from __future__ import annotations

from xml_patch.algorithm.config import DiffConfig, ElementOrdering
from xml_patch.algorithm.differ import Differencer
from xml_patch.algorithm.keys import ComparisonKey, compare_keys, comparison_key
from xml_patch.algorithm.merger import Merger

__all__ = [
    "ComparisonKey",
    "DiffConfig",
    "Differencer",
    "ElementOrdering",
    "Merger",
    "compare_keys",
    "comparison_key",
]
