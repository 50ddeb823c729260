import logging
from typing import Dict, Mapping, Optional

from .. import constants

logger = logging.getLogger(__name__)


class BuildArgResolver:
    """
    Merges build arguments from four sources into one mapping.

    Later sources overwrite earlier ones on the same key:

    1. arguments supplied by the caller of the run
    2. project properties carrying the build-arg prefix
    3. global (process-wide) properties carrying the build-arg prefix
    4. the image's own `args`, which nothing else can override
    """

    def __init__(self, prefix: str = constants.BUILD_ARG_PREFIX):
        self.prefix = prefix

    def resolve(self,
                context_args: Optional[Mapping[str, str]],
                project_properties: Optional[Mapping[str, str]],
                global_properties: Optional[Mapping[str, str]],
                image_args: Optional[Mapping[str, str]]) -> Dict[str, str]:
        merged: Dict[str, str] = {}
        merged.update(context_args or {})
        merged.update(self.from_properties(project_properties))
        merged.update(self.from_properties(global_properties))
        merged.update(image_args or {})
        logger.debug(f"[BuildArgs] Resolved build args: {merged}")
        return merged

    def from_properties(self, properties: Optional[Mapping[str, str]]) -> Dict[str, str]:
        """Extract `<prefix>NAME=value` entries as `NAME=value`, dropping empty values."""
        build_args: Dict[str, str] = {}
        for key, value in (properties or {}).items():
            if not key.startswith(self.prefix):
                continue
            arg = key[len(self.prefix):]
            if arg and value:
                build_args[arg] = value
        return build_args
