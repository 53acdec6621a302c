"""API test fixtures - FastAPI app with an injected chaincode and store.

Invariants:
    - Every test gets a fresh multi-asset chaincode and an empty memory store
    - Lifespan is not run; create_app() sets app.state eagerly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from contractapi.infrastructure.state_store import MemoryStateStore
from contractapi.main import create_app
from contractapi.samples.multi_asset import build_chaincode


@pytest.fixture
def api_store():
    return MemoryStateStore()


@pytest.fixture
def api_app(api_store):
    return create_app(chaincode=build_chaincode(), store=api_store)


@pytest.fixture
async def client(api_app):
    async with AsyncClient(
        transport=ASGITransport(app=api_app), base_url="http://test",
    ) as c:
        yield c
