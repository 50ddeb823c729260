import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class InMemoryPropertyStore:
    """Dict-backed property store shared by every image build of one run."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._props: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._props.get(key)

    def set(self, key: str, value: str) -> None:
        logger.debug(f"[PropertyStore] {key} = {value}")
        self._props[key] = value

    def as_dict(self) -> Dict[str, str]:
        return dict(self._props)
