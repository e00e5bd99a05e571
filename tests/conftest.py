"""Root conftest for API tests.

Provides:
- FakeModelClient (stands in for AnthropicClient, records calls)
- FastAPI AsyncClient with the model-client dependency overridden
"""

from __future__ import annotations

from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from eva.integrations.anthropic_client import ModelClientError


VALID_REPLY = """Here is my analysis of the component:

```json
[
  {
    "heuristic": "Typography - Legibility",
    "issue": "Text layer 'Caption' uses 9px font size",
    "suggestion": "Increase 'Caption' to at least 12px"
  }
]
```

Let me know if you need more detail."""


class FakeModelClient:
    """Records complete() calls and returns a canned reply (or raises)."""

    def __init__(self, reply: str = VALID_REPLY, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    async def complete(self, system: str, user_message: str, max_tokens: int = 1024) -> str:
        self.calls.append({
            "system": system,
            "user_message": user_message,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def failing_model_client() -> FakeModelClient:
    return FakeModelClient(error=ModelClientError("Anthropic API rate limit exceeded. Retry later."))


async def _client_for(model_client) -> AsyncGenerator[AsyncClient, None]:
    from app.main import app
    from app.routes.analyze import get_model_client

    app.dependency_overrides[get_model_client] = lambda: model_client
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(model_client: FakeModelClient) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI routes against FakeModelClient."""
    async for ac in _client_for(model_client):
        yield ac


@pytest_asyncio.fixture
async def keyless_client() -> AsyncGenerator[AsyncClient, None]:
    """Client whose server has no API key configured."""
    async for ac in _client_for(None):
        yield ac
