"""
Value types passed between the build executor and its collaborators.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import BuildImageConfiguration


# --- Build source ---

@dataclass(frozen=True)
class ArchiveSource:
    """A pre-built image tarball that is loaded verbatim."""
    path: Path


@dataclass(frozen=True)
class GenerativeSource:
    """Build inputs (Dockerfile or assembly) that are packed into a context archive."""
    config: "BuildImageConfiguration"


BuildSource = Union[ArchiveSource, GenerativeSource]


# --- Backend options ---

@dataclass(frozen=True)
class BuildOptions:
    dockerfile: Optional[str] = None
    force_remove: bool = False
    nocache: bool = False
    build_args: Dict[str, str] = field(default_factory=dict)
    # backend-specific passthrough
    options: Dict[str, str] = field(default_factory=dict)


# --- Cleanup of superseded images ---

class RemovalStatus(str, Enum):
    SKIPPED = "skipped"
    REMOVED = "removed"
    WARNED = "warned"
    FAILED = "failed"


@dataclass(frozen=True)
class RemovalOutcome:
    """Result of trying to retire an image that a rebuild left dangling."""
    status: RemovalStatus
    image_id: Optional[str] = None
    cause: Optional[BaseException] = None

    @classmethod
    def skipped(cls, image_id: Optional[str] = None) -> "RemovalOutcome":
        return cls(RemovalStatus.SKIPPED, image_id)

    @classmethod
    def removed(cls, image_id: str) -> "RemovalOutcome":
        return cls(RemovalStatus.REMOVED, image_id)

    @classmethod
    def warned(cls, image_id: str, cause: BaseException) -> "RemovalOutcome":
        return cls(RemovalStatus.WARNED, image_id, cause)

    @classmethod
    def failed(cls, image_id: str, cause: BaseException) -> "RemovalOutcome":
        return cls(RemovalStatus.FAILED, image_id, cause)

    @property
    def is_fatal(self) -> bool:
        return self.status is RemovalStatus.FAILED
