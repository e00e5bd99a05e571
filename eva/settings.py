"""EVA runtime settings — tunable parameters for analysis and annotation.

All values read from environment variables with sensible defaults matching
the plugin's hardcoded values. Import from here instead of hardcoding.

Infrastructure config (API key, model, host/port, server URL) stays
in eva/config.py.
"""

from __future__ import annotations

import os


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _str(key: str, default: str) -> str:
    return os.getenv(key, default)


# =====================================================================
# Model call (server side)
# =====================================================================

# Output-token budget for one evaluation
ANTHROPIC_MAX_TOKENS = _int("ANTHROPIC_MAX_TOKENS", 1024)

# Messages API request timeout (seconds)
ANTHROPIC_HTTP_TIMEOUT = _float("ANTHROPIC_HTTP_TIMEOUT", 120.0)


# =====================================================================
# Evaluation transport (plugin side → server)
# =====================================================================

EVALUATION_HTTP_TIMEOUT = _float("EVALUATION_HTTP_TIMEOUT", 150.0)


# =====================================================================
# Node serializer
# =====================================================================

# Runaway-tree guard; must stay below the ~255-level limit of
# pydantic-core when dumping nested documents
SERIALIZER_MAX_DEPTH = _int("SERIALIZER_MAX_DEPTH", 200)


# =====================================================================
# Annotation cards
# =====================================================================

ANNOTATION_CARD_WIDTH = _float("ANNOTATION_CARD_WIDTH", 200.0)
ANNOTATION_PADDING = _float("ANNOTATION_PADDING", 10.0)
ANNOTATION_SPACING = _float("ANNOTATION_SPACING", 8.0)
ANNOTATION_GAP = _float("ANNOTATION_GAP", 40.0)
ANNOTATION_FONT_FAMILY = _str("ANNOTATION_FONT_FAMILY", "Inter")
ANNOTATION_FONT_SIZE = _float("ANNOTATION_FONT_SIZE", 10.0)

# Max wait for the host to resolve text layout before heights are read (seconds)
ANNOTATION_LAYOUT_TIMEOUT = _float("ANNOTATION_LAYOUT_TIMEOUT", 5.0)


# =====================================================================
# Selection preview
# =====================================================================

# Longest edge of the raster preview (px)
PREVIEW_MAX_SIZE = _int("PREVIEW_MAX_SIZE", 300)
