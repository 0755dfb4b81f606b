"""
Shared pytest fixtures and configuration.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from driftguard.api.app import create_app


@pytest.fixture
def app(tmp_path):
    """A fresh app per test, with its own state file and no background cycles."""
    return create_app(data_dir=tmp_path, run_cycles=False)


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP client wired directly to the ASGI app (no server needed)."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
