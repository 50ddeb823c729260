import json
import logging
from typing import Iterable, Iterator, List, Optional, Set

from ..exceptions import PullCacheCorruptedError

logger = logging.getLogger(__name__)


class ImagePullCache:
    """
    Set of image references already pulled during the current run.

    The cache travels between builds as a single JSON string, e.g.
    ``{"images": ["alpine", "busybox:1.36"]}``. It is not thread-safe on
    its own; see PullCacheService for the locked variant.
    """

    def __init__(self, images: Optional[Iterable[str]] = None):
        self._images: Set[str] = set(images or ())

    def contains(self, image: str) -> bool:
        return image in self._images

    def add(self, image: str) -> None:
        self._images.add(image)

    def serialize(self) -> str:
        return json.dumps({"images": sorted(self._images)})

    @classmethod
    def parse(cls, text: Optional[str]) -> "ImagePullCache":
        """Strict variant of `deserialize`: raises PullCacheCorruptedError on malformed input."""
        if not text:
            return cls()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PullCacheCorruptedError(f"Pull cache is not valid JSON: {e}") from e
        images = data.get("images") if isinstance(data, dict) else None
        if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
            raise PullCacheCorruptedError(f"Pull cache has an unexpected shape: {text!r}")
        return cls(images)

    @classmethod
    def deserialize(cls, text: Optional[str]) -> "ImagePullCache":
        try:
            return cls.parse(text)
        except PullCacheCorruptedError as e:
            logger.warning(f"[PullCache] {e}. Starting from an empty cache.")
            return cls()

    def images(self) -> List[str]:
        return sorted(self._images)

    def __contains__(self, image: object) -> bool:
        return image in self._images

    def __iter__(self) -> Iterator[str]:
        return iter(self.images())

    def __len__(self) -> int:
        return len(self._images)

    def __repr__(self) -> str:
        return f"ImagePullCache({self.images()!r})"
