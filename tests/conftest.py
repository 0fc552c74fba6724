"""Pytest configuration and fixtures for fetch_dataloader tests."""
from typing import Generator
from unittest.mock import AsyncMock

import pytest

from fetch_dataloader import DataLoader, LoaderContext, MemoryResultCache


@pytest.fixture
def echo_loader() -> AsyncMock:
    """Loader spy resolving every key to itself."""
    return AsyncMock(side_effect=lambda key: key)


@pytest.fixture
def dataloader(echo_loader: AsyncMock) -> DataLoader:
    """Create a dataloader backed by the echo loader."""
    return DataLoader(echo_loader)


@pytest.fixture
def memory_result_cache() -> MemoryResultCache:
    """Create an empty result cache for testing."""
    return MemoryResultCache()


@pytest.fixture
def loader_context() -> Generator[LoaderContext, None, None]:
    """Create a request-scoped loader context for testing."""
    yield LoaderContext()
