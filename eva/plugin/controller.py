"""Host-side controller — selection state, analyze and show-on-canvas actions.

State lifecycle (single-threaded host event dispatch, no locks):
- current_selection is set by a one-node selection change, cleared by an
  empty or multi-node selection (both disable analysis)
- every selection change bumps the selection epoch; an evaluation reply
  whose epoch is stale is discarded instead of displayed
- analysis_in_progress gates analyze; it is released on every exit path

All failures are caught at the action boundary and turned into one host
notification plus one panel message.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from pydantic import ValidationError

from ..errors import EvaError, ParseError, SelectionError, TransportError
from ..integrations.evaluation_client import EvaluationClient
from ..logging_config import get_plugin_logger
from ..review.models import AnnotationArtifact, Finding
from ..review.projector import project
from ..review.prompt import DEFAULT_RUBRIC, assemble
from ..review.serializer import serialize
from ..scene.canvas import Canvas
from ..scene.nodes import VisualNode, node_hierarchy
from .messages import (
    AnalysisErrorMessage,
    AnalysisNoResultsMessage,
    AnalysisResultMessage,
    AnalyzeMessage,
    ErrorInfo,
    GetInitialSelectionMessage,
    SelectionInfo,
    SelectionInfoMessage,
    ShowOnCanvasMessage,
    parse_panel_message,
)
from .preview import Exporter, build_preview

logger = get_plugin_logger()


class PluginHost(Protocol):
    """What the controller needs from the design tool."""

    canvas: Canvas
    exporter: Optional[Exporter]

    def post_message(self, message: Dict[str, Any]) -> None:
        ...

    def notify(self, text: str, error: bool = False) -> None:
        ...

    def scroll_into_view(self, node_ids: Sequence[str]) -> None:
        ...


class PluginController:
    """Wires selection changes and panel messages to the review pipeline.

    Args:
        host: Design-tool collaborator (messages, notices, canvas, exporter).
        client: Evaluation transport.
        rubric: Rubric sent with every analysis.
    """

    def __init__(
        self,
        host: PluginHost,
        client: EvaluationClient,
        rubric: str = DEFAULT_RUBRIC,
    ):
        self.host = host
        self.client = client
        self.rubric = rubric
        self.current_selection: Optional[VisualNode] = None
        self.selection_epoch = 0
        self.selection_count = 0
        self.analysis_in_progress = False

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    async def on_selection_change(self, selection: Sequence[VisualNode]) -> None:
        self.selection_epoch += 1
        self.selection_count = len(selection)
        self.current_selection = selection[0] if len(selection) == 1 else None
        if len(selection) > 1:
            self.host.notify("Please select only one element.", error=True)
        await self.refresh_selection_info()

    async def refresh_selection_info(self) -> None:
        """Post selection-info for the current selection state."""
        epoch = self.selection_epoch

        if self.current_selection is None:
            name = "Multiple Selected" if self.selection_count > 1 else "None"
            self._post(SelectionInfoMessage(data=SelectionInfo(name=name, hierarchy="N/A")))
            return

        node = self.current_selection
        preview = await build_preview(node, self.host.exporter)

        if epoch != self.selection_epoch:
            logger.info("refresh_selection_info: selection moved on while rendering %s", node.id)
            return
        self._post(SelectionInfoMessage(
            data=SelectionInfo(name=node.name, hierarchy=node_hierarchy(node), preview=preview),
        ))

    def require_selection(self) -> VisualNode:
        if self.current_selection is None:
            raise SelectionError("No element selected for analysis.")
        return self.current_selection

    # ------------------------------------------------------------------
    # Panel messages
    # ------------------------------------------------------------------

    async def handle_message(self, raw: Dict[str, Any]) -> None:
        try:
            msg = parse_panel_message(raw)
        except ValidationError as e:
            logger.warning("handle_message: ignoring malformed message %r: %s", raw.get("type"), e)
            return

        if isinstance(msg, AnalyzeMessage):
            await self.analyze()
        elif isinstance(msg, ShowOnCanvasMessage):
            await self.show_on_canvas(msg.payload)
        elif isinstance(msg, GetInitialSelectionMessage):
            await self.refresh_selection_info()

    async def analyze(self) -> None:
        if self.analysis_in_progress:
            self.host.notify("Analysis already in progress.")
            return

        try:
            node = self.require_selection()
        except SelectionError as e:
            self.host.notify(str(e), error=True)
            self._post(AnalysisErrorMessage(data=ErrorInfo(message=str(e))))
            return

        epoch = self.selection_epoch
        self.analysis_in_progress = True
        try:
            self.host.notify("Starting analysis... This may take a moment.")
            request = assemble(serialize(node), self.rubric)
            findings = await self.client.evaluate(request)
        except TransportError as e:
            if epoch != self.selection_epoch:
                logger.info("analyze: discarding stale failure for %s: %s", node.id, e)
            elif e.reason == ParseError.NO_VALID_FINDINGS:
                self._report_no_results()
            else:
                self._report_error(e)
        except EvaError as e:
            self._report_error(e)
        except Exception as e:
            logger.exception("analyze: unexpected failure for %s: %s", node.id, e)
            self._report_error(e)
        else:
            if epoch != self.selection_epoch:
                logger.info(
                    "analyze: discarding %d stale findings for %s (epoch %d != %d)",
                    len(findings), node.id, epoch, self.selection_epoch,
                )
                return
            if not findings:
                self._report_no_results()
                return
            for finding in findings:
                self._post(AnalysisResultMessage(data=finding))
            self.host.notify(f"Analysis complete. {len(findings)} suggestions found.")
        finally:
            self.analysis_in_progress = False

    async def show_on_canvas(self, finding: Finding) -> Optional[AnnotationArtifact]:
        if self.current_selection is None:
            self.host.notify("Cannot place annotation, no element is selected.", error=True)
            return None

        try:
            artifact = await project(finding, self.current_selection, self.host.canvas)
        except Exception as e:
            logger.exception("show_on_canvas: failed for '%s': %s", finding.heuristic, e)
            self.host.notify("Failed to create annotation on canvas.", error=True)
            return None

        self.host.scroll_into_view([artifact.node_id])
        self.host.notify(f"Annotation added for: {finding.heuristic}")
        return artifact

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _post(self, message) -> None:
        self.host.post_message(message.model_dump(mode="json"))

    def _report_no_results(self) -> None:
        self.host.notify("Analysis complete. No specific suggestions found.")
        self._post(AnalysisNoResultsMessage())

    def _report_error(self, error: Exception) -> None:
        logger.error("analyze: failed: %s", error)
        self.host.notify(f"Error analyzing component: {error}", error=True)
        self._post(AnalysisErrorMessage(data=ErrorInfo(message=str(error))))
