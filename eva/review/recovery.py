"""Recover a validated Finding list from free-form model text.

Two-stage algorithm, each stage a fallback for the one before:

1. extract — strip code-fence delimiters anywhere in the text, then take
   the span from the first '[' to the last ']' (drops preambles such as
   "Here is the analysis:" and trailing chatter)
2. strict parse — json.loads on that span; no brace balancing or other
   repair. The value must be a list; entries that are not objects with
   non-empty string heuristic/issue/suggestion are dropped.

An empty survivor list raises NoValidFindingsError, distinct from the
other ParseError reasons so callers can report "no findings" separately
from "unreadable response".
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, List

from ..errors import NoValidFindingsError, ParseError
from .models import Finding

logger = logging.getLogger(__name__)

# ``` with an optional language tag (```json, ```JSON, ```jsonc ...) that
# ends the line; backticks glued to other text are left alone
_FENCE_RE = re.compile(r"```[\w.+-]*(?=\s|$)")

FINDING_FIELDS = ("heuristic", "issue", "suggestion")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text)


def extract_array_text(raw: str) -> str:
    """Stage 1: return the '[' … ']' span of ``raw`` with fences removed.

    Raises:
        ParseError (reason ``no_array``): no bracketed span exists.
    """
    text = strip_code_fences(raw or "")
    start = text.find("[")
    end = text.rfind("]")
    if start < 0 or end < start:
        raise ParseError("No valid JSON array found in response", ParseError.NO_ARRAY)
    return text[start:end + 1]


def _is_finding_candidate(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    return all(
        isinstance(item.get(key), str) and item[key].strip()
        for key in FINDING_FIELDS
    )


def validate_findings(items: Iterable[Any]) -> List[Finding]:
    """Keep structurally valid finding candidates; silently drop the rest."""
    findings: List[Finding] = []
    dropped = 0
    for item in items:
        if _is_finding_candidate(item):
            findings.append(Finding(**{key: item[key] for key in FINDING_FIELDS}))
        else:
            dropped += 1
    if dropped:
        logger.warning("validate_findings: dropped %d invalid entries", dropped)
    return findings


def recover(raw: str) -> List[Finding]:
    """Extract, strictly parse and validate findings from a model response.

    Raises:
        ParseError: no array, invalid JSON, or a non-list value.
        NoValidFindingsError: the array held no valid finding.
    """
    array_text = extract_array_text(raw)

    try:
        parsed = json.loads(array_text)
    except json.JSONDecodeError as e:
        logger.error("recover: JSON parse error: %s, span[:500]: %s", e, array_text[:500])
        raise ParseError(f"Invalid JSON in response: {e.msg}", ParseError.INVALID_JSON) from e

    if not isinstance(parsed, list):
        raise ParseError("Response is not an array", ParseError.NOT_A_LIST)

    findings = validate_findings(parsed)
    if not findings:
        raise NoValidFindingsError()
    return findings
