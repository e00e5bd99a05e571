"""Error taxonomy for analysis and annotation actions.

Every failure is caught at the boundary of the user action that triggered
it (analyze / show-on-canvas) and turned into one host notification plus
one panel message. Nothing is retried automatically.
"""

from __future__ import annotations

from typing import Optional


class EvaError(Exception):
    """Base class for all EVA failures."""


class SelectionError(EvaError):
    """No element, or more than one element, is selected."""


class SerializationError(EvaError):
    """The selected subtree is not a tree (cycle) or is runaway deep."""


class TransportError(EvaError):
    """The evaluation call failed at the network or HTTP level.

    Attributes:
        status: HTTP status code, or None for network failures.
        reason: Machine-readable failure reason reported by the server, if any.
        details: Server-supplied detail text, if any.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.details = details


class ParseError(EvaError):
    """No usable findings could be recovered from a model response."""

    NO_ARRAY = "no_array"
    INVALID_JSON = "invalid_json"
    NOT_A_LIST = "not_a_list"
    NO_VALID_FINDINGS = "no_valid_findings"

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class NoValidFindingsError(ParseError):
    """The response held a well-formed array but no valid finding survived."""

    def __init__(self, message: str = "No valid analysis results found"):
        super().__init__(message, ParseError.NO_VALID_FINDINGS)


class RenderError(EvaError):
    """An annotation card could not be built on the canvas."""
