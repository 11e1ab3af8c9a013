"""Shared test fixtures.

Routes exercised through `client` must not touch Postgres or Redis: the
ASGI transport does not run the app lifespan, so no connection is made.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client bound to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def actor_headers() -> dict[str, str]:
    """Identity headers as forwarded by the upstream gateway for a BASIC player."""
    return {"X-Actor-Id": "p_42", "X-Actor-Tier": "BASIC", "X-Actor-Role": "PLAYER"}
