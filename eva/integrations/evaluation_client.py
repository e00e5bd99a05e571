"""Evaluation transport — plugin side → EVA server.

POSTs {componentData, principles} to EVA_SERVER_URL and returns the
validated Finding list. Every non-2xx reply becomes one TransportError
whose message prefers the server's ``error`` field over the HTTP status
text; the server's ``reason``/``details`` ride along as attributes.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .. import config, settings
from ..errors import TransportError
from ..review.models import EvaluationRequest, Finding
from ..review.recovery import validate_findings

logger = logging.getLogger("eva.integrations.evaluation")


class EvaluationClient:
    """Async client for the EVA evaluation endpoint.

    Args:
        server_url: Full endpoint URL. Falls back to EVA_SERVER_URL.
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport (tests inject MockTransport).
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.server_url = server_url or config.EVA_SERVER_URL
        self._timeout = timeout if timeout is not None else settings.EVALUATION_HTTP_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def evaluate(self, request: EvaluationRequest) -> List[Finding]:
        """Send one evaluation request and return its findings.

        Returns an empty list when the server answered 200 with no valid
        findings.

        Raises:
            TransportError: network failure, non-2xx reply, or a 2xx body
                that is not a JSON array.
        """
        client = await self._get_client()
        logger.info(
            "evaluate: posting %s (%d nodes) to %s",
            request.document.id, request.document.node_count(), self.server_url,
        )
        try:
            resp = await client.post(self.server_url, json=request.to_payload())
        except httpx.TimeoutException as e:
            raise TransportError(f"Evaluation server timeout: {self.server_url}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Evaluation server unreachable: {e}") from e

        if not resp.is_success:
            body = _json_object(resp)
            message = body.get("error") or resp.reason_phrase or f"HTTP {resp.status_code}"
            logger.error(
                "evaluate: server returned %d: %s", resp.status_code, body or resp.text[:200],
            )
            raise TransportError(
                f"Server error: {message}",
                status=resp.status_code,
                reason=body.get("reason"),
                details=body.get("details"),
            )

        try:
            results = resp.json()
        except ValueError as e:
            raise TransportError(
                "Server error: response body is not valid JSON", status=resp.status_code,
            ) from e
        if not isinstance(results, list):
            raise TransportError(
                "Server error: expected a JSON array of findings", status=resp.status_code,
            )

        findings = validate_findings(results)
        logger.info("evaluate: received %d findings", len(findings))
        return findings


def _json_object(resp: httpx.Response) -> Dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
