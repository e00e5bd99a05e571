"""Data model for component review: documents, requests, findings, annotations.

All models are frozen pydantic values. ComponentDocument serializes with
the camelCase keys the evaluation server and model prompt expect
(``fontSize``, ``itemSpacing``, ...). Optional sections are omitted from
the wire form rather than sent as null.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# --- ComponentDocument ---


class FontNameDoc(_Frozen):
    family: str
    style: str


class TextDoc(_Frozen):
    characters: str
    font_size: Optional[float] = Field(None, alias="fontSize")
    font_name: Optional[FontNameDoc] = Field(None, alias="fontName")


class PaintDoc(_Frozen):
    fills: Optional[List[Dict[str, Any]]] = None
    strokes: Optional[List[Dict[str, Any]]] = None


class Padding(_Frozen):
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class LayoutDoc(_Frozen):
    mode: str
    padding: Padding
    item_spacing: float = Field(0, alias="itemSpacing")


class ComponentDocument(_Frozen):
    """Serialized form of one VisualNode subtree.

    Holds no reference to the originating node; map back through ``id``.
    """

    id: str
    name: str
    kind: Literal["container", "text", "leaf"]
    type: str = ""
    width: float = 0
    height: float = 0
    x: float = 0
    y: float = 0
    visible: bool = True
    opacity: float = 1
    text: Optional[TextDoc] = None
    paint: Optional[PaintDoc] = None
    layout: Optional[LayoutDoc] = None
    constraints: Optional[Dict[str, str]] = None
    layout_align: Optional[str] = Field(None, alias="layoutAlign")
    children: List["ComponentDocument"] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, absent sections omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def iter_nodes(self) -> Iterator["ComponentDocument"]:
        """Pre-order walk over this document and its descendants."""
        stack: List[ComponentDocument] = [self]
        while stack:
            doc = stack.pop()
            yield doc
            stack.extend(reversed(doc.children))

    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def find(self, node_id: str) -> Optional["ComponentDocument"]:
        for doc in self.iter_nodes():
            if doc.id == node_id:
                return doc
        return None


ComponentDocument.model_rebuild()


# --- Evaluation ---


class EvaluationRequest(_Frozen):
    """One analysis invocation: the document plus the rubric it is judged by."""

    document: ComponentDocument
    rubric: str

    def user_message(self) -> str:
        from .prompt import build_user_message

        return build_user_message(self.document.to_dict())

    def render(self) -> str:
        """Rubric first, then the labeled document dump."""
        return f"{self.rubric}\n\n{self.user_message()}"

    def to_payload(self) -> Dict[str, Any]:
        """Request body for the evaluation server."""
        return {"componentData": self.document.to_dict(), "principles": self.rubric}


class Finding(_Frozen):
    """One critique item returned by evaluation."""

    heuristic: str
    issue: str
    suggestion: str

    @field_validator("heuristic", "issue", "suggestion")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value


# --- Annotation ---


class AnnotationBlock(_Frozen):
    text: str
    font_style: str
    height: float


class AnnotationArtifact(_Frozen):
    """A finding card created on the canvas, anchored to an analyzed node."""

    node_id: str
    anchor_id: str
    finding: Finding
    x: float
    y: float
    width: float
    height: float
    blocks: List[AnnotationBlock]
