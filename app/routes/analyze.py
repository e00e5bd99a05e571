"""Evaluation endpoint.

POST /analyze — {componentData, principles} → Finding[]

Builds the system prompt from the client's rubric, asks the model for a
JSON array of findings, and recovers that array from the reply text.

Error bodies always carry ``error``:
- 400  componentData absent, or principles missing or empty
- 500  API key not configured
- 500  model call failed            → {error, details}
- 500  reply could not be recovered → {error, details, reason, rawResponse}
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from eva import config, settings
from eva.errors import ParseError
from eva.integrations.anthropic_client import AnthropicClient, ModelClientError
from eva.logging_config import get_api_logger
from eva.review.prompt import build_system_prompt, build_user_message
from eva.review.recovery import recover

logger = get_api_logger()

router = APIRouter(tags=["analyze"])


# --- Schemas ---


class AnalyzeRequest(BaseModel):
    """Request for POST /analyze."""

    model_config = ConfigDict(populate_by_name=True)

    component_data: Optional[Dict[str, Any]] = Field(
        None,
        alias="componentData",
        description="Serialized ComponentDocument of the selected node",
    )
    principles: Optional[str] = Field(
        None, description="Evaluation rubric interpolated into the system prompt",
    )


# --- Dependencies ---


async def get_model_client() -> AsyncGenerator[Optional[AnthropicClient], None]:
    """Per-request model client; None when no API key is configured."""
    if not config.ANTHROPIC_API_KEY:
        yield None
        return
    client = AnthropicClient(timeout=settings.ANTHROPIC_HTTP_TIMEOUT)
    try:
        yield client
    finally:
        await client.close()


# --- Routes ---


@router.post("/analyze")
async def analyze_component(
    body: AnalyzeRequest,
    client: Optional[AnthropicClient] = Depends(get_model_client),
):
    if body.component_data is None or not body.principles:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing componentData or principles in request body"},
        )
    if client is None:
        return JSONResponse(
            status_code=500,
            content={"error": "Anthropic API key not configured on server."},
        )

    system_prompt = build_system_prompt(body.principles)
    user_message = build_user_message(body.component_data)
    logger.info(
        "analyze: component=%s (%s), prompt_chars=%d",
        body.component_data.get("id"), body.component_data.get("name"),
        len(system_prompt) + len(user_message),
    )

    try:
        raw = await client.complete(
            system=system_prompt,
            user_message=user_message,
            max_tokens=settings.ANTHROPIC_MAX_TOKENS,
        )
    except ModelClientError as e:
        logger.error("analyze: model call failed: %s", e)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to get analysis from AI", "details": str(e)},
        )

    logger.info("analyze: raw response: %s", raw)

    try:
        findings = recover(raw)
    except ParseError as e:
        logger.error("analyze: could not recover findings (%s): %s", e.reason, e)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to parse analysis results from AI.",
                "details": str(e),
                "reason": e.reason,
                "rawResponse": raw,
            },
        )

    logger.info("analyze: returning %d findings", len(findings))
    return [finding.model_dump() for finding in findings]
