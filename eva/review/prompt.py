"""Evaluation prompt templates and assembly.

DEFAULT_RUBRIC is the fixed rubric the plugin sends with every analysis.
The server wraps whatever rubric it receives into its own system prompt
(build_system_prompt) and sends the document as the user message
(build_user_message).

Output contract for the model: a JSON array of
{"heuristic", "issue", "suggestion"} objects, nothing else.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from .models import ComponentDocument, EvaluationRequest

DOCUMENT_LABEL = "Analyze this component:"

_COMPONENT_DATA_OVERVIEW = """\
The component data you'll receive is a Figma mockup that we need to review. It includes:
- Basic properties: width, height, type, name, kind (container, text or leaf)
- Layout information: layout.mode (HORIZONTAL, VERTICAL, ...), layout.padding, layout.itemSpacing
- Children elements with their properties:
  * Position (x, y)
  * Dimensions (width, height)
  * Text content and styling (for text elements)
  * Visual properties (paint.fills, paint.strokes, opacity)
  * Visibility state
  * Hierarchy and nesting"""

_ANALYSIS_AREAS = """\
When analyzing, consider:
1. Visual Hierarchy:
   - Size relationships between elements
   - Spacing and positioning
   - Text hierarchy (if present)
   - Use of color and contrast

2. Layout Principles:
   - Proximity between related elements
   - Alignment and distribution
   - Use of padding and margins
   - Responsive behavior (based on auto layout)

3. Typography (for text elements):
   - Font size appropriateness
   - Text readability
   - Heading vs body text distinction

4. Interactive Elements:
   - Visibility of clickable areas
   - Spacing for touch targets
   - State indicators

5. Accessibility:
   - Color contrast
   - Text size legibility
   - Element spacing for usability"""

_OUTPUT_CONTRACT = """\
Analyze the component ignoring hidden layers and provide specific, actionable feedback. \
Focus on concrete issues in the provided component, not generic advice.

Respond ONLY with a JSON array of objects, where each object has:
- 'heuristic': The specific principle being violated
- 'issue': The exact problem found in this component and the layer name only.
- 'suggestion': A specific, implementable solution

Example: [
  {
    "heuristic": "Visual Hierarchy - Text Contrast",
    "issue": "The text element at (x: 24, y: 45) uses a light gray (#CCCCCC) on white background, making it hard to read",
    "suggestion": "Increase the contrast by using a darker gray (at least #666666) for this specific text element"
  }
]"""

DEFAULT_RUBRIC = "\n\n".join([
    "You are a UX analysis expert specializing in NNg visual design principles. "
    "You will analyze Figma UI components based on their properties and structure.",
    _COMPONENT_DATA_OVERVIEW,
    _ANALYSIS_AREAS,
    _OUTPUT_CONTRACT,
])


def build_system_prompt(principles: str) -> str:
    """Server-side system prompt with the client's rubric interpolated."""
    return "\n\n".join([
        "You are a UX analysis expert specializing in Nielsen Norman Group's heuristics "
        "and visual design principles. You will analyze Figma UI components based on "
        "their properties and structure.",
        _COMPONENT_DATA_OVERVIEW,
        _ANALYSIS_AREAS,
        f"Based on the principles:\n{principles}",
        _OUTPUT_CONTRACT,
    ])


def render_document(component_data: Dict[str, Any]) -> str:
    return json.dumps(component_data, indent=2, ensure_ascii=False)


def build_user_message(component_data: Dict[str, Any]) -> str:
    """Labeled, pretty-printed document dump."""
    return f"{DOCUMENT_LABEL}\n\n{render_document(component_data)}"


def assemble(doc: ComponentDocument, rubric: str) -> EvaluationRequest:
    """Combine a serialized document with a rubric. Pure; no truncation."""
    return EvaluationRequest(document=doc, rubric=rubric)
