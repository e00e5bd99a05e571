"""Host scene graph: node variants and the canvas collaborator."""

from .canvas import Canvas, CardSpec, MemoryCanvas, TextBlock
from .nodes import (
    MIXED,
    MIXED_MARKER,
    Bounds,
    ContainerNode,
    FontName,
    LeafNode,
    NodeKind,
    TextNode,
    VisualNode,
    find_node,
    iter_nodes,
    node_from_dict,
    node_hierarchy,
)

__all__ = [
    "MIXED",
    "MIXED_MARKER",
    "Bounds",
    "Canvas",
    "CardSpec",
    "ContainerNode",
    "FontName",
    "LeafNode",
    "MemoryCanvas",
    "NodeKind",
    "TextBlock",
    "TextNode",
    "VisualNode",
    "find_node",
    "iter_nodes",
    "node_from_dict",
    "node_hierarchy",
]
