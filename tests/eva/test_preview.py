"""Tests for eva.plugin.preview."""

from __future__ import annotations

import base64

import pytest

from eva.plugin.preview import build_preview, preview_scale
from eva.scene.nodes import Bounds, LeafNode


class _Exporter:
    def __init__(self, data=b"\x89PNG", error=None):
        self.data = data
        self.error = error
        self.calls = []

    async def export_png(self, node, scale):
        self.calls.append((node.id, scale))
        if self.error:
            raise self.error
        return self.data


def _node(width=600, height=150):
    return LeafNode(
        id="1:1", name="Banner", type="RECTANGLE",
        absolute_bounds=Bounds(x=0, y=0, width=width, height=height),
    )


class TestPreviewScale:
    def test_longest_edge_bounded(self):
        assert preview_scale(600, 150, 300) == 0.5
        assert preview_scale(100, 1200, 300) == 0.25

    def test_small_nodes_scaled_up(self):
        assert preview_scale(150, 100, 300) == 2.0

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-1, 10)])
    def test_empty_area(self, width, height):
        assert preview_scale(width, height) is None


class TestBuildPreview:
    @pytest.mark.asyncio
    async def test_data_url(self):
        exporter = _Exporter()
        url = await build_preview(_node(), exporter, max_size=300)

        assert url == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()
        assert exporter.calls == [("1:1", 0.5)]

    @pytest.mark.asyncio
    async def test_no_exporter(self):
        assert await build_preview(_node(), None) is None

    @pytest.mark.asyncio
    async def test_zero_area_not_exported(self):
        exporter = _Exporter()
        assert await build_preview(_node(width=0), exporter) is None
        assert exporter.calls == []

    @pytest.mark.asyncio
    async def test_export_failure_is_no_preview(self):
        exporter = _Exporter(error=RuntimeError("export unsupported"))
        assert await build_preview(_node(), exporter) is None

    @pytest.mark.asyncio
    async def test_empty_bytes_is_no_preview(self):
        assert await build_preview(_node(), _Exporter(data=b"")) is None
