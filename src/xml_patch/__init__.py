"""xml-patch - structural diff and merge for XML documents."""

from __future__ import annotations

from xml_patch.algorithm.config import DiffConfig, ElementOrdering
from xml_patch.algorithm.differ import Differencer
from xml_patch.algorithm.merger import Merger
from xml_patch.api import (
    diff,
    diff_documents,
    diff_subtrees,
    merge,
    merge_documents,
)
from xml_patch.errors import (
    AddressResolutionError,
    MalformedSelectorError,
    StructureMismatchError,
    UnknownOperationError,
    XmlPatchError,
)
from xml_patch.events import Add, Difference, PatchEvent, Position, Remove, Replace
from xml_patch.result import MergeResult
from xml_patch.sinks import PatchCollector, PatchDocumentWriter

__version__: str = "0.1.0"
__all__: list[str] = [
    "Add",
    "AddressResolutionError",
    "DiffConfig",
    "Difference",
    "Differencer",
    "ElementOrdering",
    "MalformedSelectorError",
    "MergeResult",
    "Merger",
    "PatchCollector",
    "PatchDocumentWriter",
    "PatchEvent",
    "Position",
    "Remove",
    "Replace",
    "StructureMismatchError",
    "UnknownOperationError",
    "XmlPatchError",
    "diff",
    "diff_documents",
    "diff_subtrees",
    "merge",
    "merge_documents",
]
