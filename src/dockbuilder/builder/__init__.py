"""
Dockbuilder Builder Module

- args: merges build arguments from the run, properties and the image config
- pull: resolves base images and auto-pulls them through the shared pull cache
- executor: builds or loads an image and cleans up the image it superseded
- workflow: sequences the steps above for one image or a set of images
"""

from .args import BuildArgResolver
from .pull import AutoPuller
from .executor import BuildExecutor, resolve_nocache
from .workflow import BuildService

__all__ = [
    'BuildArgResolver',
    'AutoPuller',
    'BuildExecutor',
    'resolve_nocache',
    'BuildService',
]
