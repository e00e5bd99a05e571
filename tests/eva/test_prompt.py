"""Tests for eva.review.prompt — rubric + document assembly."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from eva.review.models import ComponentDocument
from eva.review.prompt import (
    DEFAULT_RUBRIC,
    DOCUMENT_LABEL,
    assemble,
    build_system_prompt,
    build_user_message,
)


@pytest.fixture
def doc() -> ComponentDocument:
    return ComponentDocument(
        id="1:1",
        name="Button",
        kind="container",
        type="FRAME",
        width=120,
        height=40,
        children=[ComponentDocument(id="1:2", name="Label", kind="text", type="TEXT")],
    )


class TestAssemble:
    def test_request_keeps_document_and_rubric(self, doc):
        request = assemble(doc, "Rubric text")
        assert request.document == doc
        assert request.rubric == "Rubric text"

    def test_request_is_immutable(self, doc):
        request = assemble(doc, "Rubric text")
        with pytest.raises(ValidationError):
            request.rubric = "other"

    def test_render_order_rubric_then_labeled_document(self, doc):
        text = assemble(doc, "Rubric text").render()
        assert text.startswith("Rubric text\n\n" + DOCUMENT_LABEL)
        dumped = text.split(DOCUMENT_LABEL + "\n\n", 1)[1]
        assert json.loads(dumped) == doc.to_dict()

    def test_render_is_deterministic(self, doc):
        assert assemble(doc, "R").render() == assemble(doc, "R").render()

    def test_document_dump_is_pretty_printed(self, doc):
        assert '\n  "name": "Button"' in assemble(doc, "R").user_message()

    def test_payload_shape(self, doc):
        payload = assemble(doc, "R").to_payload()
        assert payload == {"componentData": doc.to_dict(), "principles": "R"}


class TestTemplates:
    def test_default_rubric_states_output_contract(self):
        assert "JSON array" in DEFAULT_RUBRIC
        for key in ("'heuristic'", "'issue'", "'suggestion'"):
            assert key in DEFAULT_RUBRIC

    def test_system_prompt_interpolates_principles(self):
        prompt = build_system_prompt("Use 8pt grid.")
        assert "Based on the principles:\nUse 8pt grid." in prompt
        assert prompt.index("Based on the principles") < prompt.index("Respond ONLY")

    def test_user_message_keeps_unicode(self):
        message = build_user_message({"name": "照片直播"})
        assert "照片直播" in message
