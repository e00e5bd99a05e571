"""Canvas collaborator — the narrow write surface EVA uses on the host.

The core never mutates the scene graph directly. Annotation cards are
created through this protocol:

1. ``create_text`` builds a detached text block wrapped to a given width
2. ``resolve_layout`` is the explicit synchronization point; block heights
   are only readable after it completes
3. ``append_card`` attaches a finished card at the top level of the page
4. ``discard`` removes detached blocks when a card cannot be finished

MemoryCanvas is a headless implementation used by tests and by hosts
without a renderer. It wraps words with an average-glyph-width model.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import textwrap
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from ..errors import RenderError
from .nodes import FontName

logger = logging.getLogger(__name__)


class TextBlock(Protocol):
    characters: str
    font: FontName
    font_size: float

    @property
    def height(self) -> float:
        """Laid-out height; valid only after Canvas.resolve_layout()."""
        ...


@dataclass
class CardSpec:
    """A fixed-width, auto-height annotation card ready to be attached."""

    name: str
    x: float
    y: float
    width: float
    height: float
    padding: float
    spacing: float
    blocks: List[TextBlock]
    fill: Dict[str, Any] = field(
        default_factory=lambda: {"type": "SOLID", "color": {"r": 1, "g": 0.95, "b": 0.8}}
    )
    stroke: Dict[str, Any] = field(
        default_factory=lambda: {"type": "SOLID", "color": {"r": 0.8, "g": 0.8, "b": 0.8}}
    )
    stroke_weight: float = 1
    corner_radius: float = 4


class Canvas(Protocol):
    async def load_font(self, font: FontName) -> None:
        ...

    def create_text(
        self,
        characters: str,
        font: FontName,
        font_size: float,
        wrap_width: float,
    ) -> TextBlock:
        ...

    async def resolve_layout(self) -> None:
        ...

    def append_card(self, card: CardSpec) -> str:
        """Attach ``card`` at the top level of the current page; return its node id."""
        ...

    def discard(self, blocks: List[TextBlock]) -> None:
        """Remove detached blocks that will never be attached to a card."""
        ...


# ---------------------------------------------------------------------------
# Headless implementation
# ---------------------------------------------------------------------------

# Average advance width as a fraction of font size (Inter)
GLYPH_WIDTH_RATIO = {"Regular": 0.55, "Bold": 0.6}
LINE_HEIGHT_RATIO = 1.21


@dataclass
class MemoryTextBlock:
    characters: str
    font: FontName
    font_size: float
    wrap_width: float
    lines: Optional[List[str]] = None

    @property
    def height(self) -> float:
        if self.lines is None:
            raise RenderError(
                f"Text layout not resolved for block '{self.characters[:20]}'"
            )
        return len(self.lines) * self.font_size * LINE_HEIGHT_RATIO

    def layout(self) -> None:
        glyph = self.font_size * GLYPH_WIDTH_RATIO.get(self.font.style, 0.55)
        per_line = max(1, int(self.wrap_width // glyph)) if glyph > 0 else 1
        self.lines = textwrap.wrap(self.characters, width=per_line) or [""]


@dataclass
class PlacedCard:
    node_id: str
    card: CardSpec


class MemoryCanvas:
    """In-memory canvas: records loaded fonts and placed cards."""

    def __init__(self, layout_delay: float = 0.0, id_prefix: str = "annotation"):
        self.layout_delay = layout_delay
        self.loaded_fonts: List[FontName] = []
        self.cards: List[PlacedCard] = []
        self.layout_passes = 0
        self.discarded: List[MemoryTextBlock] = []
        self._pending: List[MemoryTextBlock] = []
        self._ids = itertools.count(1)
        self._id_prefix = id_prefix

    async def load_font(self, font: FontName) -> None:
        if font not in self.loaded_fonts:
            self.loaded_fonts.append(font)

    def create_text(
        self,
        characters: str,
        font: FontName,
        font_size: float,
        wrap_width: float,
    ) -> MemoryTextBlock:
        if font not in self.loaded_fonts:
            raise RenderError(f"Font not loaded: {font.family} {font.style}")
        block = MemoryTextBlock(
            characters=characters,
            font=font,
            font_size=font_size,
            wrap_width=wrap_width,
        )
        self._pending.append(block)
        return block

    async def resolve_layout(self) -> None:
        if self.layout_delay:
            await asyncio.sleep(self.layout_delay)
        for block in self._pending:
            block.layout()
        self._pending.clear()
        self.layout_passes += 1

    def append_card(self, card: CardSpec) -> str:
        node_id = f"{self._id_prefix}:{next(self._ids)}"
        self.cards.append(PlacedCard(node_id=node_id, card=card))
        logger.info(
            "MemoryCanvas: placed %s '%s' at (%.0f, %.0f) %.0fx%.0f",
            node_id, card.name, card.x, card.y, card.width, card.height,
        )
        return node_id

    def discard(self, blocks: List[MemoryTextBlock]) -> None:
        dropped = {id(block) for block in blocks}
        self._pending = [block for block in self._pending if id(block) not in dropped]
        self.discarded.extend(blocks)
