"""Shared pytest configuration for the happyrouter test suite."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio; the tests use asyncio primitives."""
    return "asyncio"
