from __future__ import annotations

import pytest

from mcp_joplin_notebooks.operations import NotebookService
from tests.fakes import FakeBackend


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def service(backend: FakeBackend) -> NotebookService:
    return NotebookService(backend, page_size=100)
