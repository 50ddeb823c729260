"""
Dockbuilder Framework

Builds container images from declarative per-image configuration: pulls base
images when needed, packs or loads the build context, drives the image builder
and retires images that a rebuild superseded.

Main modules:
- config: Image and run configuration models and YAML loading
- images: Image reference parsing and validation
- cache: Run-scoped cache of already pulled images
- builder: Build argument resolution, auto-pull, build execution and workflow
- access: Default daemon, query, auth, archive and Dockerfile collaborators
- datacls: Build context and value types
- utils: Logging setup and timing helpers

Quick start example:
```python
from dockbuilder import Config, create_build_service, create_pull_cache

config = Config("images.yml")
context = config.build_context(create_pull_cache())
service = create_build_service()
service.build_all(config.images, context)
```
"""

from .protocols import (
    DaemonAccess,
    ImageQuery,
    ArchiveProducer,
    AuthResolver,
    BaseImageExtractor,
    PropertyStore,
)
from .config import (
    Config,
    RunConfigModel,
    ImageConfiguration,
    BuildImageConfiguration,
    AssemblyConfiguration,
    CleanupMode,
)
from .images import ImageName
from .cache import ImagePullCache, PullCacheService, InMemoryPropertyStore
from .datacls import BuildContext, AuthParameters
from .builder import BuildService, BuildExecutor, AutoPuller, BuildArgResolver
from .factories import create_build_service, create_pull_cache
from .exceptions import (
    DockBuilderError,
    ConfigurationError,
    ConfigValidationError,
    InvalidImageNameError,
    BuildError,
    DaemonOperationError,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    '__version__',
    # Protocols
    'DaemonAccess',
    'ImageQuery',
    'ArchiveProducer',
    'AuthResolver',
    'BaseImageExtractor',
    'PropertyStore',
    # Config
    'Config',
    'RunConfigModel',
    'ImageConfiguration',
    'BuildImageConfiguration',
    'AssemblyConfiguration',
    'CleanupMode',
    # Images
    'ImageName',
    # Cache
    'ImagePullCache',
    'PullCacheService',
    'InMemoryPropertyStore',
    # Data classes
    'BuildContext',
    'AuthParameters',
    # Builder
    'BuildService',
    'BuildExecutor',
    'AutoPuller',
    'BuildArgResolver',
    'create_build_service',
    'create_pull_cache',
    # Exceptions
    'DockBuilderError',
    'ConfigurationError',
    'ConfigValidationError',
    'InvalidImageNameError',
    'BuildError',
    'DaemonOperationError',
]
