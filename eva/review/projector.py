"""Finding → annotation card on the canvas.

Card layout (fixed width, auto height):

    ┌──────────── CARD_WIDTH ────────────┐
    │ PADDING                            │
    │ Principle: <heuristic>   (Bold)    │
    │ SPACING                            │
    │ Issue: <issue>           (Regular) │
    │ SPACING                            │
    │ Suggestion: <suggestion> (Regular) │
    │ PADDING                            │
    └────────────────────────────────────┘

Each block wraps to CARD_WIDTH - 2*PADDING. Heights are read back only
after the canvas has resolved text layout (bounded by
ANNOTATION_LAYOUT_TIMEOUT). The card sits ANNOTATION_GAP to the right of
the anchor's bounding box, top-aligned, as a top-level page child so
deleting the analyzed subtree leaves it in place. Overlap with other
cards is not avoided.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .. import settings
from ..errors import RenderError
from ..scene.canvas import Canvas, CardSpec
from ..scene.nodes import FontName, VisualNode
from .models import AnnotationArtifact, AnnotationBlock, Finding

logger = logging.getLogger(__name__)

# (label, finding field, font style)
_BLOCKS = (
    ("Principle", "heuristic", "Bold"),
    ("Issue", "issue", "Regular"),
    ("Suggestion", "suggestion", "Regular"),
)

CARD_NAME_HEURISTIC_CHARS = 20


async def project(
    finding: Finding,
    anchor: VisualNode,
    canvas: Canvas,
    layout_timeout: Optional[float] = None,
) -> AnnotationArtifact:
    """Create an annotation card for ``finding`` next to ``anchor``.

    Raises:
        RenderError: text layout did not resolve in time, or the canvas
            rejected the card.
    """
    if layout_timeout is None:
        layout_timeout = settings.ANNOTATION_LAYOUT_TIMEOUT

    family = settings.ANNOTATION_FONT_FAMILY
    font_size = settings.ANNOTATION_FONT_SIZE
    card_width = settings.ANNOTATION_CARD_WIDTH
    padding = settings.ANNOTATION_PADDING
    spacing = settings.ANNOTATION_SPACING
    inner_width = card_width - 2 * padding

    fonts = {style: FontName(family=family, style=style) for _, _, style in _BLOCKS}
    for font in fonts.values():
        await canvas.load_font(font)

    texts = [f"{label}: {getattr(finding, field)}" for label, field, _ in _BLOCKS]
    handles = [
        canvas.create_text(text, fonts[style], font_size, inner_width)
        for text, (_, _, style) in zip(texts, _BLOCKS)
    ]

    try:
        await asyncio.wait_for(canvas.resolve_layout(), timeout=layout_timeout)
    except asyncio.TimeoutError as e:
        canvas.discard(handles)
        raise RenderError(
            f"Text layout not resolved within {layout_timeout}s"
        ) from e

    heights = [handle.height for handle in handles]
    height = 2 * padding + sum(heights) + spacing * (len(handles) - 1)

    bounds = anchor.bounds()
    x = bounds.right + settings.ANNOTATION_GAP
    y = bounds.y

    card = CardSpec(
        name=f"Feedback: {finding.heuristic[:CARD_NAME_HEURISTIC_CHARS]}",
        x=x,
        y=y,
        width=card_width,
        height=height,
        padding=padding,
        spacing=spacing,
        blocks=handles,
    )
    try:
        node_id = canvas.append_card(card)
    except Exception:
        canvas.discard(handles)
        raise
    if not node_id:
        canvas.discard(handles)
        raise RenderError(f"Canvas did not attach card '{card.name}'")

    logger.info(
        "project: card %s for '%s' anchored to %s at (%.0f, %.0f), height=%.1f",
        node_id, finding.heuristic, anchor.id, x, y, height,
    )

    return AnnotationArtifact(
        node_id=node_id,
        anchor_id=anchor.id,
        finding=finding,
        x=x,
        y=y,
        width=card_width,
        height=height,
        blocks=[
            AnnotationBlock(text=text, font_style=style, height=h)
            for text, (_, _, style), h in zip(texts, _BLOCKS, heights)
        ],
    )
