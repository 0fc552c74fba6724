"""
Request-scoped container of named DataLoader instances.
"""
import logging
from typing import Any, Dict, Iterator, List, Optional

from .dataloader import DataLoader
from .errors import InvalidArgumentError
from .types import DataLoaderConfig, LoaderFn

logger = logging.getLogger(__name__)


class LoaderContext:
    """
    Holds the loaders for one logical execution.

    Nested resolution steps share a context so that they share loaders
    (and therefore batches and caches). Create one context per request
    and drop it when the request ends.

    Example:
        context = LoaderContext()

        async def resolve_friends(user, context):
            users = context.loader("users", fetch_user)
            return await users.load_many(user["friends"])
    """

    def __init__(self) -> None:
        self._loaders: Dict[str, DataLoader] = {}

    def loader(
        self,
        name: str,
        fn: LoaderFn,
        config: Optional[DataLoaderConfig] = None,
    ) -> DataLoader:
        """
        Get the loader registered under name, creating it with fn on first use.

        Later calls return the existing loader and ignore fn and config.
        """
        if not name:
            raise InvalidArgumentError("loader name is required.")

        existing = self._loaders.get(name)
        if existing is not None:
            return existing

        merged = DataLoaderConfig(
            name=name,
            sort_keys=config.sort_keys if config else None,
            cache_key_fn=config.cache_key_fn if config else None,
        )
        created = DataLoader(fn, merged)
        self._loaders[name] = created
        logger.debug(f"LoaderContext: registered loader {name!r}")
        return created

    def attach(self, name: str, loader: DataLoader) -> DataLoader:
        """Register an existing loader under name. Raises if name is taken."""
        if name in self._loaders:
            raise InvalidArgumentError(f"loader {name!r} is already registered.")
        self._loaders[name] = loader
        return loader

    def get(self, name: str) -> DataLoader:
        """
        Get a registered loader by name.

        Raises:
            KeyError: If no loader is registered under name
        """
        loader = self._loaders.get(name)
        if loader is None:
            raise KeyError(f"Loader '{name}' not registered")
        return loader

    def names(self) -> List[str]:
        return list(self._loaders)

    def get_stats(self) -> Dict[str, Dict[str, Any]]:
        """Stats of every registered loader, keyed by name."""
        return {name: loader.get_stats() for name, loader in self._loaders.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._loaders

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._loaders))

    def __len__(self) -> int:
        return len(self._loaders)
