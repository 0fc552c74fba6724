"""
FastAPI integration for fetch_dataloader.

Provides a request-scoped LoaderContext through dependency injection so
that every dependency and route handler of one request shares loaders.
"""
from typing import Annotated, Any, Awaitable, Callable, Dict, Optional

try:
    from fastapi import Depends, Request
except ImportError:
    raise ImportError("FastAPI is required for this module. Install with: pip install fastapi")

from ..context import LoaderContext
from ..dataloader import DataLoader
from ..types import DataLoaderConfig, LoaderFn

STATE_ATTRIBUTE = "loaders"
"""Attribute of request.state holding the LoaderContext."""


async def get_loader_context(request: Request) -> LoaderContext:
    """
    FastAPI dependency returning the LoaderContext of the current request.

    The context is created on first use and stored on request.state, so
    it lives exactly as long as the request.

    Usage:
        from fetch_dataloader.integrations import LoaderContextDep

        @app.get("/users/{user_id}")
        async def get_user(user_id: int, loaders: LoaderContextDep):
            users = loaders.loader("users", fetch_user)
            return await users.load(user_id)
    """
    context = getattr(request.state, STATE_ATTRIBUTE, None)
    if context is None:
        context = LoaderContext()
        setattr(request.state, STATE_ATTRIBUTE, context)
    return context


LoaderContextDep = Annotated[LoaderContext, Depends(get_loader_context)]


def loader_dependency(
    name: str,
    fn: LoaderFn,
    config: Optional[DataLoaderConfig] = None,
) -> Callable[..., Awaitable[DataLoader]]:
    """
    Build a dependency that yields the named loader of the current request.

    Usage:
        UsersLoader = Annotated[DataLoader, Depends(loader_dependency("users", fetch_user))]

        @app.get("/users/{user_id}/friends")
        async def friends(user_id: int, users: UsersLoader):
            user = await users.load(user_id)
            return await users.load_many(user["friends"])
    """

    async def dependency(context: LoaderContextDep) -> DataLoader:
        return context.loader(name, fn, config)

    return dependency


async def get_loader_stats(context: LoaderContextDep) -> Dict[str, Dict[str, Any]]:
    """
    Dependency returning the stats of every loader used by this request.

    Usage:
        @app.get("/debug/loaders")
        async def loaders(stats: dict = Depends(get_loader_stats)):
            return stats
    """
    return context.get_stats()
