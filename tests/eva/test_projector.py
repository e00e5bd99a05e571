"""Tests for eva.review.projector — finding → annotation card."""

from __future__ import annotations

import pytest

from eva.errors import RenderError
from eva.review.models import Finding
from eva.review.projector import project
from eva.scene.canvas import LINE_HEIGHT_RATIO, MemoryCanvas
from eva.scene.nodes import Bounds, ContainerNode, FontName, LeafNode

SHORT = Finding(heuristic="Contrast", issue="Too light", suggestion="Darken")
LONG = Finding(
    heuristic="Visual Hierarchy - Text Contrast",
    issue=(
        "The text layer 'Subtitle' uses a light gray (#CCCCCC) on a white "
        "background, which makes it hard to read at 12px"
    ),
    suggestion="Use a darker gray (at least #666666) for 'Subtitle'",
)

LINE = 10 * LINE_HEIGHT_RATIO


@pytest.fixture
def anchor() -> LeafNode:
    return LeafNode(
        id="1:5", name="Card", type="RECTANGLE",
        absolute_bounds=Bounds(x=100, y=50, width=300, height=200),
    )


class TestProject:
    @pytest.mark.asyncio
    async def test_single_line_card_geometry(self, anchor):
        canvas = MemoryCanvas()
        artifact = await project(SHORT, anchor, canvas)

        assert artifact.width == 200
        assert artifact.height == pytest.approx(2 * 10 + 3 * LINE + 2 * 8)
        assert [b.text for b in artifact.blocks] == [
            "Principle: Contrast", "Issue: Too light", "Suggestion: Darken",
        ]
        assert [b.font_style for b in artifact.blocks] == ["Bold", "Regular", "Regular"]

    @pytest.mark.asyncio
    async def test_placed_right_of_anchor_top_aligned(self, anchor):
        artifact = await project(SHORT, anchor, MemoryCanvas())
        assert (artifact.x, artifact.y) == (100 + 300 + 40, 50)
        assert artifact.anchor_id == "1:5"

    @pytest.mark.asyncio
    async def test_wrapped_text_grows_height_not_width(self, anchor):
        short = await project(SHORT, anchor, MemoryCanvas())
        long = await project(LONG, anchor, MemoryCanvas())
        assert long.width == short.width
        assert long.height > short.height
        issue_block = long.blocks[1]
        assert issue_block.height > LINE

    @pytest.mark.asyncio
    async def test_height_is_sum_of_blocks_plus_padding_and_spacing(self, anchor):
        artifact = await project(LONG, anchor, MemoryCanvas())
        blocks = sum(b.height for b in artifact.blocks)
        assert artifact.height == pytest.approx(20 + blocks + 16)

    @pytest.mark.asyncio
    async def test_card_attached_at_top_level(self, anchor):
        canvas = MemoryCanvas()
        artifact = await project(LONG, anchor, canvas)
        assert len(canvas.cards) == 1
        placed = canvas.cards[0]
        assert placed.node_id == artifact.node_id
        assert placed.card.name == "Feedback: Visual Hierarchy - T"
        assert placed.card.width == 200

    @pytest.mark.asyncio
    async def test_fonts_loaded_and_layout_resolved_once(self, anchor):
        canvas = MemoryCanvas()
        await project(SHORT, anchor, canvas)
        assert FontName("Inter", "Bold") in canvas.loaded_fonts
        assert FontName("Inter", "Regular") in canvas.loaded_fonts
        assert canvas.layout_passes == 1

    @pytest.mark.asyncio
    async def test_layout_timeout_raises_render_error(self, anchor):
        canvas = MemoryCanvas(layout_delay=1.0)
        with pytest.raises(RenderError, match="not resolved"):
            await project(SHORT, anchor, canvas, layout_timeout=0.01)
        assert canvas.cards == []
        assert len(canvas.discarded) == 3

        # Abandoned blocks must not be laid out by the next pass
        canvas.layout_delay = 0
        await canvas.resolve_layout()
        assert all(block.lines is None for block in canvas.discarded)

    @pytest.mark.asyncio
    async def test_rejected_card_discards_blocks(self, anchor):
        class _Detached(MemoryCanvas):
            def append_card(self, card):
                return ""

        canvas = _Detached()
        with pytest.raises(RenderError, match="did not attach"):
            await project(SHORT, anchor, canvas)
        assert [block.characters for block in canvas.discarded] == [
            "Principle: Contrast", "Issue: Too light", "Suggestion: Darken",
        ]

    @pytest.mark.asyncio
    async def test_anchor_without_absolute_bounds_uses_geometry(self):
        frame = ContainerNode(id="f", name="F", type="FRAME", x=10, y=20, width=50, height=50)
        artifact = await project(SHORT, frame, MemoryCanvas())
        assert (artifact.x, artifact.y) == (10 + 50 + 40, 20)


class TestMemoryCanvas:
    @pytest.mark.asyncio
    async def test_height_unreadable_before_layout(self):
        canvas = MemoryCanvas()
        font = FontName("Inter", "Regular")
        await canvas.load_font(font)
        block = canvas.create_text("Hello", font, 10, 180)
        with pytest.raises(RenderError):
            _ = block.height
        await canvas.resolve_layout()
        assert block.height == pytest.approx(LINE)

    def test_unloaded_font_rejected(self):
        with pytest.raises(RenderError, match="Font not loaded"):
            MemoryCanvas().create_text("Hi", FontName("Inter", "Bold"), 10, 180)
