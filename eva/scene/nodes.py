"""Host scene graph — VisualNode variants and host-JSON loading.

The host (design tool) owns the scene graph; EVA only reads it. Each node's
kind is resolved once, when it is built from host data, into one of three
variants with a statically known field set:

- TextNode:      type TEXT — characters + font attributes
- ContainerNode: any node exposing a child list — children + auto-layout
- LeafNode:      everything else

Host JSON accepts both the plugin-bridge shape (x/y/width/height,
fontSize, fontName) and the REST shape (absoluteBoundingBox, style.*).
A value that differs across a text run or paint stack is written as the
string "__mixed__" and loaded as the MIXED sentinel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

MIXED_MARKER = "__mixed__"


class _Mixed:
    """Sentinel for a value that is not uniform across the node."""

    _instance: Optional["_Mixed"] = None

    def __new__(cls) -> "_Mixed":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MIXED"


MIXED = _Mixed()


class NodeKind(str, Enum):
    CONTAINER = "container"
    TEXT = "text"
    LEAF = "leaf"


@dataclass(frozen=True)
class FontName:
    family: str
    style: str


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width


PaintList = Union[List[Dict[str, Any]], _Mixed, None]


@dataclass(eq=False)
class VisualNode:
    """Common attributes of every scene node.

    Geometry and opacity are Optional: None means the host does not expose
    the attribute for this node type.
    """

    kind: ClassVar[NodeKind] = NodeKind.LEAF

    id: str
    name: str
    type: str
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    visible: bool = True
    opacity: Optional[float] = None
    fills: PaintList = None
    strokes: PaintList = None
    constraints: Optional[Dict[str, str]] = None
    layout_align: Optional[str] = None
    absolute_bounds: Optional[Bounds] = None
    parent: Optional["VisualNode"] = field(default=None, repr=False)

    def bounds(self) -> Bounds:
        """Canvas bounding box; falls back to local geometry."""
        if self.absolute_bounds is not None:
            return self.absolute_bounds
        return Bounds(
            x=self.x or 0,
            y=self.y or 0,
            width=self.width or 0,
            height=self.height or 0,
        )


@dataclass(eq=False)
class LeafNode(VisualNode):
    kind: ClassVar[NodeKind] = NodeKind.LEAF


@dataclass(eq=False)
class TextNode(VisualNode):
    kind: ClassVar[NodeKind] = NodeKind.TEXT

    characters: str = ""
    font_size: Union[float, _Mixed, None] = None
    font_name: Union[FontName, _Mixed, None] = None


@dataclass(eq=False)
class ContainerNode(VisualNode):
    kind: ClassVar[NodeKind] = NodeKind.CONTAINER

    children: List[VisualNode] = field(default_factory=list)
    layout_mode: Optional[str] = None
    padding_top: Optional[float] = None
    padding_right: Optional[float] = None
    padding_bottom: Optional[float] = None
    padding_left: Optional[float] = None
    item_spacing: Optional[float] = None

    def append(self, child: VisualNode) -> VisualNode:
        child.parent = self
        self.children.append(child)
        return child


# ---------------------------------------------------------------------------
# Host JSON → VisualNode
# ---------------------------------------------------------------------------


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _paints(value: Any) -> PaintList:
    if value is None:
        return None
    if isinstance(value, list):
        return value
    # Any non-list paint value is the host's "mixed" sentinel
    return MIXED


def _bbox(raw: Dict[str, Any]) -> Optional[Bounds]:
    bbox = raw.get("absoluteBoundingBox")
    if not isinstance(bbox, dict):
        return None
    return Bounds(
        x=bbox.get("x", 0),
        y=bbox.get("y", 0),
        width=bbox.get("width", 0),
        height=bbox.get("height", 0),
    )


def _font_size(raw: Dict[str, Any]) -> Union[float, _Mixed, None]:
    value = raw.get("fontSize")
    if value is None:
        value = (raw.get("style") or {}).get("fontSize")
    if value == MIXED_MARKER:
        return MIXED
    return _number(value)


def _font_name(raw: Dict[str, Any]) -> Union[FontName, _Mixed, None]:
    value = raw.get("fontName")
    if value == MIXED_MARKER:
        return MIXED
    if isinstance(value, dict) and value.get("family"):
        return FontName(family=value["family"], style=value.get("style", "Regular"))
    style = raw.get("style") or {}
    if style.get("fontFamily"):
        return FontName(
            family=style["fontFamily"],
            style=style.get("fontStyle") or "Regular",
        )
    return None


def node_from_dict(
    raw: Dict[str, Any],
    parent: Optional[VisualNode] = None,
) -> VisualNode:
    """Build a VisualNode tree from host JSON.

    The variant is chosen here, once: TEXT → TextNode, a node with a
    ``children`` list → ContainerNode, anything else → LeafNode.
    When ``x``/``y`` are absent but both this node and its parent carry
    ``absoluteBoundingBox``, local coordinates are derived from them.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a node object, got {type(raw).__name__}")

    node_type = raw.get("type", "")
    bbox = _bbox(raw)

    x = _number(raw.get("x"))
    y = _number(raw.get("y"))
    if bbox is not None and parent is not None and parent.absolute_bounds is not None:
        if x is None:
            x = bbox.x - parent.absolute_bounds.x
        if y is None:
            y = bbox.y - parent.absolute_bounds.y
    width = _number(raw.get("width"))
    height = _number(raw.get("height"))
    if bbox is not None:
        width = bbox.width if width is None else width
        height = bbox.height if height is None else height

    common = dict(
        id=str(raw.get("id", "")),
        name=raw.get("name", ""),
        type=node_type,
        x=x,
        y=y,
        width=width,
        height=height,
        visible=raw.get("visible", True) is not False,
        opacity=_number(raw.get("opacity")),
        fills=_paints(raw.get("fills")),
        strokes=_paints(raw.get("strokes")),
        constraints=raw.get("constraints") if isinstance(raw.get("constraints"), dict) else None,
        layout_align=raw.get("layoutAlign"),
        absolute_bounds=bbox,
        parent=parent,
    )

    if node_type == "TEXT":
        return TextNode(
            **common,
            characters=raw.get("characters", ""),
            font_size=_font_size(raw),
            font_name=_font_name(raw),
        )

    children = raw.get("children")
    if isinstance(children, list):
        node = ContainerNode(
            **common,
            layout_mode=raw.get("layoutMode"),
            padding_top=_number(raw.get("paddingTop")),
            padding_right=_number(raw.get("paddingRight")),
            padding_bottom=_number(raw.get("paddingBottom")),
            padding_left=_number(raw.get("paddingLeft")),
            item_spacing=_number(raw.get("itemSpacing")),
        )
        node.children = [node_from_dict(child, parent=node) for child in children]
        return node

    return LeafNode(**common)


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def iter_nodes(root: VisualNode) -> Iterator[VisualNode]:
    """Pre-order walk; each node object is yielded at most once."""
    seen: set[int] = set()
    stack: List[VisualNode] = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        if isinstance(node, ContainerNode):
            stack.extend(reversed(node.children))


def find_node(root: VisualNode, node_id: str) -> Optional[VisualNode]:
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def node_hierarchy(node: VisualNode) -> str:
    """Breadcrumb path from the page down to ``node``, e.g. 'Screen > Card > Title'."""
    path: List[str] = []
    seen: set[int] = set()
    current: Optional[VisualNode] = node
    while current is not None and current.type != "PAGE" and id(current) not in seen:
        seen.add(id(current))
        path.append(current.name)
        current = current.parent
    return " > ".join(reversed(path))
