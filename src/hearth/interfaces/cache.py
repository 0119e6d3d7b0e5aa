"""Cache interface definitions."""

from __future__ import annotations

import abc
from collections.abc import Iterable
from typing import Any


class PruneableCache(abc.ABC):
    """Abstract base class for a namespaced cache whose expired items can be pruned."""

    namespace: str

    # --- Core Operations ---

    @abc.abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``.

        Args:
            key: The item key.
            default: Value returned on a miss.

        Returns:
            The cached value, or ``default`` when the item is missing, expired
            or invalidated.
        """

    @abc.abstractmethod
    def set(self, key: str, value: Any, lifespan: int | None = None) -> None:
        """Store ``value`` under ``key``.

        Args:
            key: The item key.
            value: Any picklable value.
            lifespan: Seconds until the item expires. ``None`` uses the default
                lifespan of the cache; ``0`` stores the item without expiry.

        Raises:
            ValueError: If ``lifespan`` is negative.
        """

    @abc.abstractmethod
    def delete(self, key: str) -> bool:
        """Remove an item.

        Returns:
            bool: True if an item was removed, False if there was none.
        """

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove every item of the cache."""

    @abc.abstractmethod
    def prune(self) -> int:
        """Remove expired items.

        Returns:
            int: The number of items removed.
        """

    # --- Convenience Methods ---

    def has(self, key: str) -> bool:
        """Return True if a live item is stored under ``key``."""
        missing = object()
        return self.get(key, missing) is not missing

    def close(self) -> None:
        """Release any handle held by the cache. The default does nothing."""


class TagAwareCache(PruneableCache):
    """A cache whose items can be invalidated in bulk through tags."""

    @abc.abstractmethod
    def set(
        self,
        key: str,
        value: Any,
        lifespan: int | None = None,
        tags: Iterable[str] = (),
    ) -> None:
        """Store ``value`` under ``key``, attached to ``tags``.

        See `PruneableCache.set` for ``lifespan``.
        """

    @abc.abstractmethod
    def invalidate_tags(self, tags: Iterable[str]) -> None:
        """Invalidate every item attached to any of ``tags``.

        Items stored after the invalidation are not affected.
        """
