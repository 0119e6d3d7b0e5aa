"""Cache adapters."""

from .filesystem import TagAwareFilesystemCache
from .registry import CacheRegistry

__all__ = ["CacheRegistry", "TagAwareFilesystemCache"]
