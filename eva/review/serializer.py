"""VisualNode tree → ComponentDocument serializer.

Walks the selected subtree depth-first, pre-order, and emits a canonical
document for the evaluation prompt:

- kind is taken from the node variant (text / container / leaf)
- geometry falls back to 0 and opacity to 1 when the host omits them
- font size / font name are emitted only when resolved (MIXED is omitted)
- auto-layout is emitted only when the mode is not "NONE", always with
  all four padding sides
- paint lists are emitted only when the host exposes them as lists
- hidden nodes are kept; the rubric decides how to treat them

Cyclic parent/child data and runaway depth raise SerializationError.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Dict, List, Optional, Set

from ..errors import SerializationError
from ..scene.nodes import MIXED, ContainerNode, TextNode, VisualNode
from ..settings import SERIALIZER_MAX_DEPTH
from .models import ComponentDocument, FontNameDoc, LayoutDoc, Padding, PaintDoc, TextDoc

logger = logging.getLogger(__name__)

LAYOUT_NONE = "NONE"


def serialize(root: VisualNode, max_depth: int = SERIALIZER_MAX_DEPTH) -> ComponentDocument:
    """Serialize ``root`` and its descendants into a ComponentDocument.

    Raises:
        SerializationError: the subtree contains a cycle, repeats a node,
            or is deeper than ``max_depth``.
    """
    emitted: Set[int] = set()
    doc = _serialize_node(root, depth=0, ancestors=set(), emitted=emitted, max_depth=max_depth)
    logger.info(
        "serialize: root=%s (%s), nodes=%d", root.id, root.name, len(emitted),
    )
    return doc


def _serialize_node(
    node: VisualNode,
    depth: int,
    ancestors: Set[int],
    emitted: Set[int],
    max_depth: int,
) -> ComponentDocument:
    key = id(node)
    if key in ancestors:
        raise SerializationError(
            f"Cycle detected: node '{node.name}' ({node.id}) is its own ancestor"
        )
    if key in emitted:
        raise SerializationError(
            f"Node '{node.name}' ({node.id}) appears more than once in the tree"
        )
    if depth > max_depth:
        raise SerializationError(
            f"Tree deeper than {max_depth} levels at node '{node.name}' ({node.id})"
        )
    emitted.add(key)

    fields: Dict[str, Any] = {
        "id": node.id,
        "name": node.name,
        "kind": node.kind.value,
        "type": node.type,
        "width": _or_default(node.width, 0),
        "height": _or_default(node.height, 0),
        "x": _or_default(node.x, 0),
        "y": _or_default(node.y, 0),
        "visible": node.visible,
        "opacity": _or_default(node.opacity, 1),
        "paint": _paint(node),
        "constraints": dict(node.constraints) if node.constraints else None,
        "layout_align": node.layout_align,
    }

    if isinstance(node, TextNode):
        fields["text"] = _text(node)

    children: List[ComponentDocument] = []
    if isinstance(node, ContainerNode):
        fields["layout"] = _layout(node)
        ancestors.add(key)
        try:
            for child in node.children:
                children.append(
                    _serialize_node(child, depth + 1, ancestors, emitted, max_depth)
                )
        finally:
            ancestors.discard(key)

    return ComponentDocument(**fields, children=children)


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value


def _text(node: TextNode) -> TextDoc:
    font_size = None if node.font_size is MIXED else node.font_size
    font_name = None
    if node.font_name is not None and node.font_name is not MIXED:
        font_name = FontNameDoc(family=node.font_name.family, style=node.font_name.style)
    return TextDoc(characters=node.characters, font_size=font_size, font_name=font_name)


def _layout(node: ContainerNode) -> Optional[LayoutDoc]:
    mode = node.layout_mode
    if not mode or mode == LAYOUT_NONE:
        return None
    return LayoutDoc(
        mode=mode,
        padding=Padding(
            top=_or_default(node.padding_top, 0),
            right=_or_default(node.padding_right, 0),
            bottom=_or_default(node.padding_bottom, 0),
            left=_or_default(node.padding_left, 0),
        ),
        item_spacing=_or_default(node.item_spacing, 0),
    )


def _paint(node: VisualNode) -> Optional[PaintDoc]:
    # MIXED and absent paints are both left out
    fills = deepcopy(node.fills) if isinstance(node.fills, list) else None
    strokes = deepcopy(node.strokes) if isinstance(node.strokes, list) else None
    if fills is None and strokes is None:
        return None
    return PaintDoc(fills=fills, strokes=strokes)
