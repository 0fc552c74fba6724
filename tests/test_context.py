"""
Tests for LoaderContext.
"""
from unittest.mock import AsyncMock

import pytest

from fetch_dataloader import (
    DataLoader,
    DataLoaderConfig,
    InvalidArgumentError,
    LoaderContext,
)


class TestLoaderContext:
    """Tests for LoaderContext."""

    def test_creates_loader_on_first_use(
        self, loader_context: LoaderContext, echo_loader: AsyncMock
    ) -> None:
        """Should create and name a loader."""
        users = loader_context.loader("users", echo_loader)

        assert isinstance(users, DataLoader)
        assert users.name == "users"
        assert users.loader is echo_loader
        assert "users" in loader_context
        assert len(loader_context) == 1

    def test_returns_existing_loader(
        self, loader_context: LoaderContext, echo_loader: AsyncMock
    ) -> None:
        """Should ignore fn for an existing name."""
        first = loader_context.loader("users", echo_loader)
        second = loader_context.loader("users", AsyncMock())

        assert first is second
        assert second.loader is echo_loader

    def test_passes_config(self, loader_context: LoaderContext, echo_loader: AsyncMock) -> None:
        """Should apply config but keep the registered name."""
        users = loader_context.loader(
            "users", echo_loader, DataLoaderConfig(name="ignored", sort_keys=False)
        )

        assert users.name == "users"
        assert users.config.sort_keys is False

    def test_requires_name(self, loader_context: LoaderContext, echo_loader: AsyncMock) -> None:
        """Should reject an empty name."""
        with pytest.raises(InvalidArgumentError):
            loader_context.loader("", echo_loader)

    def test_requires_callable(self, loader_context: LoaderContext) -> None:
        """Should surface loader validation."""
        with pytest.raises(InvalidArgumentError, match=r"loader might be a function\."):
            loader_context.loader("users", "not callable")  # type: ignore[arg-type]

        assert "users" not in loader_context

    def test_attach(self, loader_context: LoaderContext, echo_loader: AsyncMock) -> None:
        """Should register an existing loader once."""
        users = DataLoader(echo_loader)

        assert loader_context.attach("users", users) is users
        assert loader_context.get("users") is users
        with pytest.raises(InvalidArgumentError):
            loader_context.attach("users", DataLoader(echo_loader))

    def test_get_unknown(self, loader_context: LoaderContext) -> None:
        """Should raise KeyError for an unknown name."""
        with pytest.raises(KeyError):
            loader_context.get("missing")

    async def test_stats_by_name(
        self, loader_context: LoaderContext, echo_loader: AsyncMock
    ) -> None:
        """Should collect stats of every loader."""
        users = loader_context.loader("users", echo_loader)
        posts = loader_context.loader("posts", echo_loader)

        await users.load_many([1, 1, 2])
        await posts.load(1)

        stats = loader_context.get_stats()
        assert list(stats) == ["users", "posts"]
        assert stats["users"]["loads"] == 2
        assert stats["posts"]["loads"] == 1
        assert list(loader_context) == ["users", "posts"]
