import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from .. import constants
from ..config import ImageConfiguration
from ..datacls import BuildContext
from ..images import ImageName
from .args import BuildArgResolver
from .executor import BuildExecutor
from .pull import AutoPuller

logger = logging.getLogger(__name__)


class BuildService:
    """
    Runs the build workflow of an image: auto-pull of the base image,
    build-argument resolution, build (or load) and cleanup of the old image.

    Any failure aborts the workflow of that image and propagates unchanged.
    """

    def __init__(self, auto_puller: AutoPuller, executor: BuildExecutor,
                 arg_resolver: Optional[BuildArgResolver] = None):
        self.auto_puller = auto_puller
        self.executor = executor
        self.arg_resolver = arg_resolver or BuildArgResolver()

    def execute_build_workflow(self, image_config: ImageConfiguration, context: BuildContext,
                               nocache: Optional[str] = None) -> Optional[str]:
        """
        Build one image.

        Args:
            image_config: The image to build
            context: Settings of the run, shared with other workflows
            nocache: Explicit no-cache override; None falls back to the `docker.nocache`
                property and then to the image's own setting

        Returns:
            Id of the built image, None for archive loads

        Raises:
            InvalidImageNameError: before any pull when the image name is malformed
        """
        ImageName.validate(image_config.name)
        logger.info(f"[BuildService] Starting build workflow for {image_config.description}")

        if not image_config.build.is_archive_mode():
            self.auto_puller.auto_pull_base_image(image_config, context)

        if nocache is None:
            nocache = self.nocache_override(context)
        build_args = self.resolve_build_args(image_config, context)
        image_id = self.executor.build(image_config, context, nocache, build_args)

        logger.info(f"[BuildService] Finished build workflow for {image_config.description}")
        return image_id

    @staticmethod
    def nocache_override(context: BuildContext) -> Optional[str]:
        """`docker.nocache` from the global properties, then from the project properties."""
        value = context.global_properties.get(constants.NOCACHE_PROPERTY)
        if value is None:
            value = context.project_properties.get(constants.NOCACHE_PROPERTY)
        return value

    def resolve_build_args(self, image_config: ImageConfiguration, context: BuildContext) -> Dict[str, str]:
        return self.arg_resolver.resolve(
            context.build_args,
            context.project_properties,
            context.global_properties,
            image_config.build.args,
        )

    def check_image_with_auto_pull(self, image: str, registry: Optional[str], context: BuildContext,
                                   always_allowed: bool = False) -> None:
        """Pull an image outside of a build (e.g. before running it), following the run's policy."""
        self.auto_puller.check_image_with_auto_pull(image, registry, always_allowed, context)

    def build_all(self, images: Sequence[ImageConfiguration], context: BuildContext,
                  nocache: Optional[str] = None, max_workers: Optional[int] = None) -> Dict[str, Optional[str]]:
        """
        Build several images in parallel worker threads sharing one pull cache.

        Every workflow runs to completion; the first failure (in the order of
        `images`) is re-raised afterwards.

        Returns:
            Mapping of image name to the id returned by its workflow
        """
        if not images:
            return {}

        logger.info(f"[BuildService] Building {len(images)} image(s) with up to {max_workers or 'default'} workers")
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [
                pool.submit(self.execute_build_workflow, image, context, nocache)
                for image in images
            ]

        results: Dict[str, Optional[str]] = {}
        failures: List[BaseException] = []
        for image, future in zip(images, futures):
            error = future.exception()
            if error is not None:
                logger.error(f"[BuildService] {image.description} failed: {error}")
                failures.append(error)
                continue
            results[image.name] = future.result()

        if failures:
            raise failures[0]
        return results
