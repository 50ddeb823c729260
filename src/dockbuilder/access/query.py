import logging
from enum import Enum
from typing import Optional

from ..cache import ImagePullCache
from ..exceptions import ConfigValidationError
from .daemon import WhalesDaemon

logger = logging.getLogger(__name__)


class AutoPullMode(str, Enum):
    ON = "on"
    ONCE = "once"
    ALWAYS = "always"
    OFF = "off"

    @classmethod
    def parse(cls, value: Optional[str]) -> "AutoPullMode":
        if value is None or value == "":
            return cls.ON
        norm = value.strip().lower()
        if norm == "true":
            return cls.ON
        if norm == "false":
            return cls.OFF
        for mode in cls:
            if mode.value == norm:
                return mode
        raise ConfigValidationError(
            f"Invalid auto-pull mode '{value}', must be one of {[m.value for m in cls]} (or true/false)."
        )

    def is_unconditional(self) -> bool:
        return self in (AutoPullMode.ONCE, AutoPullMode.ALWAYS)


class DaemonQuery:
    """
    Image queries backed by the daemon.

    Auto-pull policies:
        on      pull when the image is missing locally and was not pulled in this run
        once    pull unconditionally (when allowed), but only once per run
        always  pull unconditionally whenever allowed
        off     never pull
    An unconditional mode used where unconditional pulls are not allowed behaves like `on`.
    """

    def __init__(self, daemon: WhalesDaemon):
        self.daemon = daemon

    def image_requires_auto_pull(self, policy: Optional[str], image: str,
                                 always_allowed: bool, cache: ImagePullCache) -> bool:
        mode = AutoPullMode.parse(policy)
        if mode is AutoPullMode.OFF:
            return False

        if mode.is_unconditional() and always_allowed:
            if mode is AutoPullMode.ONCE and cache.contains(image):
                logger.debug(f"[Query] '{image}' already pulled in this run")
                return False
            return True

        if cache.contains(image):
            return False
        return not self.daemon.has_image(image)

    def resolve_image_id(self, name: str) -> Optional[str]:
        return self.daemon.image_id(name)
