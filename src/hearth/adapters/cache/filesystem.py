"""Tag-aware filesystem cache backed by diskcache.

Items live in a `diskcache.Cache` stored under ``<directory>/<namespace>``.
Tags are versioned: each item records the version of its tags when it was
written, and invalidating a tag bumps its version, so older items read as
misses from then on. Stale items are removed lazily on read.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import diskcache

from hearth.interfaces.cache import TagAwareCache

logger = logging.getLogger(__name__)

ITEM = "item"
TAG = "tag"

_MISSING = object()


class TagAwareFilesystemCache(TagAwareCache):
    """TagAwareCache implementation that stores items on the local filesystem."""

    def __init__(
        self, namespace: str, default_lifespan: int, directory: str | Path
    ) -> None:
        if default_lifespan < 0:
            raise ValueError("default_lifespan must not be negative")
        self.namespace = namespace
        self.default_lifespan = default_lifespan
        self.directory = Path(directory) / namespace
        self._cache = diskcache.Cache(str(self.directory))

    # --- Core Operations ---

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._cache.get((ITEM, key), default=_MISSING)
        if entry is _MISSING:
            return default

        value, tag_versions = entry
        if any(self._tag_version(tag) != seen for tag, seen in tag_versions.items()):
            self._cache.delete((ITEM, key))
            return default
        return value

    def set(
        self,
        key: str,
        value: Any,
        lifespan: int | None = None,
        tags: Iterable[str] = (),
    ) -> None:
        expire = self._expire_for(lifespan)
        tag_versions = {tag: self._tag_version(tag) for tag in tags}
        self._cache.set((ITEM, key), (value, tag_versions), expire=expire)

    def delete(self, key: str) -> bool:
        return bool(self._cache.delete((ITEM, key)))

    def clear(self) -> None:
        removed = self._cache.clear()
        logger.debug("Cleared %d item(s) from cache %r", removed, self.namespace)

    def prune(self) -> int:
        removed = self._cache.expire()
        logger.debug("Pruned %d expired item(s) from cache %r", removed, self.namespace)
        return removed

    def invalidate_tags(self, tags: Iterable[str]) -> None:
        for tag in set(tags):
            self._cache.incr((TAG, tag), delta=1, default=0)
            logger.debug("Invalidated tag %r in cache %r", tag, self.namespace)

    def close(self) -> None:
        self._cache.close()

    # --- Internal Helpers ---

    def _tag_version(self, tag: str) -> int:
        return self._cache.get((TAG, tag), default=0)

    def _expire_for(self, lifespan: int | None) -> float | None:
        """Translate a lifespan into diskcache's ``expire`` argument.

        ``None`` selects the default lifespan; ``0`` means no expiry.
        """
        seconds = self.default_lifespan if lifespan is None else lifespan
        if seconds < 0:
            raise ValueError("lifespan must not be negative")
        return seconds or None
