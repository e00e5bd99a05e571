"""Component review core: serialize → assemble → recover → project."""

from .models import (
    AnnotationArtifact,
    AnnotationBlock,
    ComponentDocument,
    EvaluationRequest,
    Finding,
)
from .projector import project
from .prompt import DEFAULT_RUBRIC, assemble, build_system_prompt, build_user_message
from .recovery import extract_array_text, recover, validate_findings
from .serializer import serialize

__all__ = [
    "AnnotationArtifact",
    "AnnotationBlock",
    "ComponentDocument",
    "DEFAULT_RUBRIC",
    "EvaluationRequest",
    "Finding",
    "assemble",
    "build_system_prompt",
    "build_user_message",
    "extract_array_text",
    "project",
    "recover",
    "serialize",
    "validate_findings",
]
