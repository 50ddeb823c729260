"""
Dockbuilder Cache Module

The pull cache system consists of three components:
- ImagePullCache: the set of images pulled in this run and its string form
- PullCacheService: run-scoped, locked access to the cache in a property store
- InMemoryPropertyStore: the default shared property store
"""

from .pull_cache import ImagePullCache
from .service import PullCacheService
from .store import InMemoryPropertyStore

__all__ = [
    'ImagePullCache',
    'PullCacheService',
    'InMemoryPropertyStore',
]
