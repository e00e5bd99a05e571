"""Anthropic Messages API client for the evaluation server.

Sends one system prompt + one user message and returns the reply text.

Environment:
    ANTHROPIC_API_KEY — API key (required)
    ANTHROPIC_MODEL   — model id (default claude-3-haiku-20240307)

Usage:
    client = AnthropicClient()
    text = await client.complete(system=prompt, user_message=msg, max_tokens=1024)
    await client.close()
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .. import config

logger = logging.getLogger("eva.integrations.anthropic")


class ModelClientError(Exception):
    """Raised when a Messages API call fails."""


class AnthropicClient:
    """Async Anthropic Messages API client.

    Args:
        api_key: API key. Falls back to ANTHROPIC_API_KEY env var.
        model: Model id. Falls back to ANTHROPIC_MODEL env var.
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport (tests inject MockTransport).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key or config.ANTHROPIC_API_KEY
        if not self._api_key:
            raise ModelClientError(
                "Anthropic API key not configured. Set ANTHROPIC_API_KEY environment "
                "variable or pass api_key= to AnthropicClient()."
            )
        self.model = model or config.ANTHROPIC_MODEL
        self._client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=config.ANTHROPIC_API_BASE,
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": config.ANTHROPIC_API_VERSION,
                    "content-type": "application/json",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Make a POST request to the Messages API."""
        client = await self._get_client()
        try:
            resp = await client.post(path, json=body)
        except httpx.TimeoutException as e:
            raise ModelClientError(f"Anthropic API timeout: {path}") from e
        except httpx.ConnectError as e:
            raise ModelClientError(f"Anthropic API connection error: {path}") from e
        except httpx.HTTPError as e:
            raise ModelClientError(f"Anthropic API transport error: {e}") from e

        if resp.status_code == 401:
            raise ModelClientError(
                "Anthropic API returned 401 Unauthorized. Check ANTHROPIC_API_KEY."
            )
        if resp.status_code == 429:
            raise ModelClientError("Anthropic API rate limit exceeded. Retry later.")
        if resp.status_code == 529:
            raise ModelClientError("Anthropic API is overloaded. Retry later.")
        if resp.status_code != 200:
            raise ModelClientError(
                f"Anthropic API error {resp.status_code}: {_error_message(resp)}"
            )

        try:
            return resp.json()
        except ValueError as e:
            raise ModelClientError("Anthropic API returned a non-JSON body") from e

    async def complete(
        self,
        system: str,
        user_message: str,
        max_tokens: int = 1024,
    ) -> str:
        """Run one completion and return the concatenated text content.

        POST /v1/messages
        """
        data = await self._post("/v1/messages", {
            "model": self.model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": user_message}],
        })

        blocks: List[Dict[str, Any]] = data.get("content") or []
        text = "".join(
            block.get("text", "") for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )
        usage = data.get("usage") or {}
        logger.info(
            "complete: model=%s, stop_reason=%s, input_tokens=%s, output_tokens=%s",
            data.get("model", self.model), data.get("stop_reason"),
            usage.get("input_tokens"), usage.get("output_tokens"),
        )
        if not text:
            raise ModelClientError("Anthropic API returned no text content")
        return text


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return resp.text[:200]
