"""
Dockbuilder Build Context

This module contains the BuildContext data class, which holds the settings of a
build run shared by every image workflow of that run.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .. import constants
from ..cache import PullCacheService
from .auth import AuthParameters


class BuildContext(BaseModel):
    """
    Holds the shared, immutable settings for a build run.

    The only mutable state reachable from here is `pull_cache`, which is
    guarded by its own lock and shared by reference between workflows.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    pull_cache: PullCacheService

    base_dir: Path = Field(default_factory=Path.cwd)
    output_dir: Path = Path(constants.DEFAULT_OUTPUT_DIR)

    build_args: Dict[str, str] = Field(default_factory=dict)
    project_properties: Dict[str, str] = Field(default_factory=dict)
    global_properties: Dict[str, str] = Field(default_factory=dict)

    pull_registry: Optional[str] = None
    registry: Optional[str] = None
    auto_pull: Optional[str] = None
    auth: AuthParameters = Field(default_factory=AuthParameters)

    def resolve_path(self, path: str) -> Path:
        """Resolve a configured path against the run's base directory."""
        p = Path(path)
        return p if p.is_absolute() else (self.base_dir / p).absolute()

    @property
    def absolute_output_dir(self) -> Path:
        return self.resolve_path(str(self.output_dir))
