"""Named registry of pruneable caches."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from hearth.errors import CacheNotFoundError
from hearth.interfaces.cache import PruneableCache

logger = logging.getLogger(__name__)


class CacheRegistry(Mapping[str, PruneableCache]):
    """Read-only mapping of cache name to cache handle.

    Looking up a name that is not registered raises `CacheNotFoundError`, which
    is also a `KeyError` so the usual mapping helpers (``in``, ``.get()``)
    keep working.
    """

    def __init__(self, caches: Mapping[str, PruneableCache] | None = None) -> None:
        self._caches = dict(caches or {})

    def __getitem__(self, name: str) -> PruneableCache:
        try:
            return self._caches[name]
        except KeyError:
            raise CacheNotFoundError(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._caches)

    def __len__(self) -> int:
        return len(self._caches)

    def get_cache(self, name: str) -> PruneableCache:
        """Return the cache registered under ``name``.

        Raises:
            CacheNotFoundError: If no cache is registered under ``name``.
        """
        return self[name]

    def prune_all(self) -> dict[str, int]:
        """Prune every registered cache.

        Returns:
            dict[str, int]: Number of items removed, per cache name.
        """
        return {name: cache.prune() for name, cache in self._caches.items()}

    def close(self) -> None:
        """Close every registered cache."""
        for name, cache in self._caches.items():
            cache.close()
            logger.debug("Closed cache %r", name)
