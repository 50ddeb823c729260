import logging
from typing import Optional

from .. import constants
from ..config import BuildImageConfiguration, ImageConfiguration
from ..datacls import BuildContext
from ..exceptions import BaseImageResolutionError
from ..images import ImageName, find_registry
from ..protocols import AuthResolver, BaseImageExtractor, DaemonAccess, ImageQuery
from ..utils import now_ms, format_duration_till

logger = logging.getLogger(__name__)


class AutoPuller:
    """
    Makes sure the base image of a build is present before building.

    Whether an image has to be pulled is decided by the ImageQuery collaborator
    from the run's (opaque) auto-pull policy and the images already pulled in
    this run. The decision, the pull and the pull-cache update run under the
    run-wide cache lock, so concurrent workflows never pull the same image twice.
    """

    def __init__(self, daemon: DaemonAccess, query: ImageQuery,
                 auth_service: AuthResolver, extractor: BaseImageExtractor):
        self.daemon = daemon
        self.query = query
        self.auth_service = auth_service
        self.extractor = extractor

    def auto_pull_base_image(self, image_config: ImageConfiguration, context: BuildContext) -> None:
        base_image = self.resolve_base_image(image_config.build, context)
        if base_image is None:
            logger.debug(f"[AutoPull] {image_config.description}: no base image known, skipping auto-pull")
            return
        if base_image == constants.SCRATCH_IMAGE:
            logger.debug(f"[AutoPull] {image_config.description}: '{base_image}' needs no pull")
            return
        self.check_image_with_auto_pull(base_image, None, True, context)

    def resolve_base_image(self, build_config: BuildImageConfiguration,
                           context: BuildContext) -> Optional[str]:
        """
        Effective base image of a build, or None when it is not known up front.

        Archive loads have no base image. In Dockerfile mode the first FROM is
        used; an unreadable Dockerfile yields None since the build step reports
        the real problem later.
        """
        if build_config.is_archive_mode():
            return None
        if build_config.is_dockerfile_mode():
            return self._base_from_dockerfile(build_config, context)
        return self._base_from_configuration(build_config)

    def _base_from_configuration(self, build_config: BuildImageConfiguration) -> Optional[str]:
        if build_config.from_image:
            return build_config.from_image
        if build_config.assembly is None:
            return constants.DEFAULT_DATA_BASE_IMAGE
        return None

    def _base_from_dockerfile(self, build_config: BuildImageConfiguration,
                              context: BuildContext) -> Optional[str]:
        dockerfile = build_config.absolute_dockerfile_path(context.base_dir)
        try:
            return self.extractor.extract_base_image(dockerfile)
        except (BaseImageResolutionError, OSError) as e:
            logger.debug(f"[AutoPull] Cannot extract base image from '{dockerfile}': {e}")
            return None

    def check_image_with_auto_pull(self, image: str, registry: Optional[str],
                                   always_allowed: bool, context: BuildContext) -> None:
        """
        Pull `image` if the query collaborator says so.

        Args:
            image: Image reference as configured
            registry: Registry to prefer when the reference carries none
            always_allowed: Whether the auto-pull policy may force an unconditional pull
            context: Build context of the run

        Raises:
            DaemonOperationError: when pulling or re-tagging fails
        """
        image_name = ImageName(image)
        pull_cache = context.pull_cache

        with pull_cache.locked():
            if not self.query.image_requires_auto_pull(context.auto_pull, image, always_allowed,
                                                       pull_cache.load()):
                logger.debug(f"[AutoPull] '{image}' does not need to be pulled")
                return

            pull_registry = find_registry(image_name.registry, registry,
                                          context.pull_registry, context.registry)
            pull_ref = image_name.with_latest_if_no_tag()

            start = now_ms()
            auth = self.auth_service.resolve_auth(image_name, pull_registry, False, context.auth)
            self.daemon.pull(pull_ref, auth, pull_registry)
            logger.info(f"[AutoPull] Pulled {image_name.full_name(pull_registry)} in {format_duration_till(start)}")

            pull_cache.add(image)

            if pull_registry and not image_name.has_registry():
                # Alias the registry-qualified name to the short one used by the build
                qualified = ImageName(pull_ref).full_name(pull_registry)
                self.daemon.tag(qualified, image, False)
                logger.debug(f"[AutoPull] Tagged '{qualified}' as '{image}'")
