"""
Pytest configuration and fixtures following kkb_fastapi pattern.
"""
import logging

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.config import ConfigFile, get_config
from pcf_portal.core.security import SessionContext
from pcf_portal.create_app import get_app
from pcf_portal.test.factory.fake_backend import FakeBackend
from pcf_portal.test.factory.session import COMPANY_ID, make_token

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@pytest.fixture(scope="session")
def test_config():
    """
    Get test configuration.

    Points the backend client at the in-memory backend's base URL.
    """
    return get_config(ConfigFile.TEST)


@pytest.fixture(scope="function")
def fake_backend():
    """Empty in-memory backend; tests seed what they need."""
    return FakeBackend()


@pytest_asyncio.fixture(scope="function")
async def backend_client(test_config, fake_backend):
    """BackendClient wired to the in-memory backend."""
    client = BackendClient.from_config(
        test_config, transport=httpx.MockTransport(fake_backend.handler)
    )
    yield client
    await client.aclose()


@pytest.fixture(scope="function")
def session_context():
    return SessionContext(token=make_token(), company_id=COMPANY_ID)


@pytest.fixture(scope="function")
def auth_headers():
    """Headers of a logged-in caller with a selected company."""
    return {"Authorization": f"Bearer {make_token()}", "X-Company-Id": str(COMPANY_ID)}


@pytest_asyncio.fixture(scope="function")
async def test_app(test_config, backend_client):
    """
    Create FastAPI application with test configuration.

    ASGITransport does not run the lifespan, so the backend client is
    attached here.
    """
    app = get_app(ConfigFile.TEST)
    app.state.config = test_config
    app.state.backend_client = backend_client

    yield app


@pytest_asyncio.fixture(scope="function")
async def test_async_client(test_app):
    """
    Create async HTTP client for API testing.

    Uses httpx AsyncClient with ASGITransport for testing FastAPI endpoints.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport, base_url="http://localhost:8000", follow_redirects=True
    ) as ac:
        yield ac
