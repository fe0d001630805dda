"""API test fixtures: mocked registry and ASGI client.

The registry's repositories are AsyncMocks, so route tests exercise
request parsing, serialization and error mapping without any upstream.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from wikidash.config.dashboard import DashboardConfig
from wikidash.config.settings import Settings


@pytest.fixture
def registry() -> MagicMock:
    """Registry stand-in with AsyncMock repositories."""
    reg = MagicMock()
    reg.settings = Settings(_env_file=None, configured_username="Example")
    reg.users = AsyncMock()
    reg.contributions = AsyncMock()
    reg.stats = AsyncMock()
    reg.impact = AsyncMock()
    reg.dashboard = AsyncMock()
    reg.dashboard.config = DashboardConfig.from_settings(reg.settings)
    reg.dashboard_repository.return_value = reg.dashboard
    return reg


@pytest.fixture
async def api_client(registry: MagicMock):
    """HTTP client against the app with the registry dependency overridden."""
    from wikidash.api.deps import get_registry
    from wikidash.main import app

    app.dependency_overrides[get_registry] = lambda: registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
