"""Tree subpackage for the XML node model.

Re-exports the public API for the tree module:
- Element, Attribute, Text: the three node kinds (a tagged union, see Node)
- NodeType: StrEnum discriminator of the node kinds
- TreeBuilder: converts lxml documents into the node model
- TreeSerializer: writes the node model back out through lxml
"""

from xml_patch.tree.builder import TreeBuilder
from xml_patch.tree.nodes import Attribute, Element, Node, NodeType, Text
from xml_patch.tree.serializer import TreeSerializer

__all__ = [
    "Attribute",
    "Element",
    "Node",
    "NodeType",
    "Text",
    "TreeBuilder",
    "TreeSerializer",
]
