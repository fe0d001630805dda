"""Root conftest: shared fixtures for all tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Async tests use asyncio primitives (Event, gather), so pin the backend."""
    return "asyncio"
