"""Host ↔ panel message contract.

Inbound (panel → host):  analyze, show-on-canvas, get-initial-selection
Outbound (host → panel): selection-info, analysis-result (one per finding),
                         analysis-no-results, analysis-error

Point-to-point channel; payload shapes follow the review models.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from ..review.models import Finding

SELECTION_INFO = "selection-info"
ANALYZE = "analyze"
ANALYSIS_RESULT = "analysis-result"
ANALYSIS_NO_RESULTS = "analysis-no-results"
ANALYSIS_ERROR = "analysis-error"
SHOW_ON_CANVAS = "show-on-canvas"
GET_INITIAL_SELECTION = "get-initial-selection"


# --- Outbound ---


class SelectionInfo(BaseModel):
    name: str
    hierarchy: str
    preview: Optional[str] = None


class SelectionInfoMessage(BaseModel):
    type: Literal["selection-info"] = SELECTION_INFO
    data: SelectionInfo


class AnalysisResultMessage(BaseModel):
    type: Literal["analysis-result"] = ANALYSIS_RESULT
    data: Finding


class AnalysisNoResultsMessage(BaseModel):
    type: Literal["analysis-no-results"] = ANALYSIS_NO_RESULTS


class ErrorInfo(BaseModel):
    message: str


class AnalysisErrorMessage(BaseModel):
    type: Literal["analysis-error"] = ANALYSIS_ERROR
    data: ErrorInfo


# --- Inbound ---


class AnalyzeMessage(BaseModel):
    type: Literal["analyze"]


class ShowOnCanvasMessage(BaseModel):
    type: Literal["show-on-canvas"]
    payload: Finding


class GetInitialSelectionMessage(BaseModel):
    type: Literal["get-initial-selection"]


PanelMessage = Annotated[
    Union[AnalyzeMessage, ShowOnCanvasMessage, GetInitialSelectionMessage],
    Field(discriminator="type"),
]

_panel_message_adapter = TypeAdapter(PanelMessage)


def parse_panel_message(raw: Dict[str, Any]) -> Union[
    AnalyzeMessage, ShowOnCanvasMessage, GetInitialSelectionMessage
]:
    """Validate an inbound panel message.

    Raises:
        pydantic.ValidationError: unknown ``type`` or malformed payload.
    """
    return _panel_message_adapter.validate_python(raw)
