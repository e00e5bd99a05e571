"""Selection preview — downscaled PNG as an inline data URL.

Failure is never fatal: any exporter error yields None ("no preview").
"""

from __future__ import annotations

import base64
import logging
from typing import Optional, Protocol

from ..scene.nodes import VisualNode
from ..settings import PREVIEW_MAX_SIZE

logger = logging.getLogger(__name__)


class Exporter(Protocol):
    async def export_png(self, node: VisualNode, scale: float) -> bytes:
        """Render ``node`` at ``scale`` and return PNG bytes."""
        ...


def preview_scale(width: float, height: float, max_size: int = PREVIEW_MAX_SIZE) -> Optional[float]:
    """Scale that bounds the longest edge to ``max_size``; None for empty nodes."""
    if width <= 0 or height <= 0:
        return None
    return min(max_size / width, max_size / height)


async def build_preview(
    node: VisualNode,
    exporter: Optional[Exporter],
    max_size: int = PREVIEW_MAX_SIZE,
) -> Optional[str]:
    if exporter is None:
        return None
    bounds = node.bounds()
    scale = preview_scale(bounds.width, bounds.height, max_size)
    if scale is None:
        logger.info("build_preview: %s has no area, skipping", node.id)
        return None
    try:
        png = await exporter.export_png(node, scale)
    except Exception as e:
        logger.warning("build_preview: export failed for %s: %s", node.id, e)
        return None
    if not png:
        return None
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
