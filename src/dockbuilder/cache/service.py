"""
Run-scoped access to the pull cache.

Every image workflow of a run receives the same PullCacheService. The service
owns the only lock guarding the serialized cache in the shared property store,
so read-deserialize-add-serialize-write always happens as one critical section.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .. import constants
from ..protocols import PropertyStore
from .pull_cache import ImagePullCache

logger = logging.getLogger(__name__)


class PullCacheService:

    def __init__(self, store: PropertyStore, key: str = constants.PULL_CACHE_KEY):
        self.store = store
        self.key = key
        # Reentrant so a caller holding `locked()` can still use load()/add()
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator["PullCacheService"]:
        """Hold the run-wide cache lock for a multi-step decision (check, pull, record)."""
        with self._lock:
            yield self

    def load(self) -> ImagePullCache:
        """Read the current cache, creating an empty entry in the store on first access."""
        with self._lock:
            text = self.store.get(self.key)
            cache = ImagePullCache.deserialize(text)
            if text is None:
                self.store.set(self.key, cache.serialize())
                logger.debug(f"[PullCache] Initialized empty pull cache under '{self.key}'")
            return cache

    def contains(self, image: str) -> bool:
        return self.load().contains(image)

    def add(self, image: str) -> None:
        """Record `image` as pulled and write the cache back immediately."""
        with self._lock:
            cache = self.load()
            cache.add(image)
            self.store.set(self.key, cache.serialize())
            logger.debug(f"[PullCache] Recorded '{image}' ({len(cache)} image(s) pulled this run)")
