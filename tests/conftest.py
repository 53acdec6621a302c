"""Root conftest - shared test configuration and fixtures."""

import os

import pytest

# Tests never load a chaincode from the environment or touch a real database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("STATE_STORE", "memory")
os.environ.setdefault("LOG_FORMAT", "text")

from contractapi.infrastructure.state_store import MemoryStateStore  # noqa: E402


@pytest.fixture
def store():
    return MemoryStateStore()
