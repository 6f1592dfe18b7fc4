"""Shared pytest fixtures for pageable tests."""

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
