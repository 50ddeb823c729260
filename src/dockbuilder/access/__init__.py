"""
Default collaborators of the build workflow.

- daemon: image daemon primitives through python-on-whales
- query: auto-pull decisions and image id lookups
- auth: registry credential resolution
- archive: tar build contexts
- dockerfile: base image extraction
"""

from .archive import ArchiveService
from .auth import AuthService
from .daemon import WhalesDaemon
from .dockerfile import DockerfileExtractor
from .query import AutoPullMode, DaemonQuery

__all__ = [
    'ArchiveService',
    'AuthService',
    'WhalesDaemon',
    'DockerfileExtractor',
    'AutoPullMode',
    'DaemonQuery',
]
