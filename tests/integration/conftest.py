"""Shared fixtures for the sandbox API integration tests."""

from collections.abc import Iterator

import pytest

from projectdesk.infrastructure.dependencies import get_sandbox_backend
from projectdesk.infrastructure.sandbox import InMemoryBackend, seed_demo_data
from projectdesk.main import app


@pytest.fixture
def backend() -> Iterator[InMemoryBackend]:
    """Fresh demo data per test, swapped in for the process-wide backend."""
    backend = seed_demo_data(InMemoryBackend())
    app.dependency_overrides[get_sandbox_backend] = lambda: backend
    yield backend
    app.dependency_overrides.pop(get_sandbox_backend, None)
