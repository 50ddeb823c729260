import logging
from typing import Mapping, Optional

from ..config import CleanupMode, ImageConfiguration
from ..datacls import ArchiveSource, BuildContext, BuildOptions, GenerativeSource, RemovalOutcome
from ..exceptions import DaemonOperationError
from ..images import ImageName
from ..protocols import ArchiveProducer, DaemonAccess, ImageQuery
from ..utils import now_ms, format_duration_till

logger = logging.getLogger(__name__)


def resolve_nocache(override: Optional[str], configured: bool) -> bool:
    """
    Effective no-cache flag.

    An override that is present at all wins: the empty string means true,
    anything else is true only when it reads "true" (case-insensitive).
    """
    if override is not None:
        return override == "" or override.strip().lower() == "true"
    return configured


class BuildExecutor:
    """Builds or loads one image and retires the image it superseded."""

    def __init__(self, daemon: DaemonAccess, query: ImageQuery, archive_service: ArchiveProducer):
        self.daemon = daemon
        self.query = query
        self.archive_service = archive_service

    def build(self, image_config: ImageConfiguration, context: BuildContext,
              nocache_override: Optional[str], build_args: Mapping[str, str]) -> Optional[str]:
        """
        Build (or load) `image_config` and return the id of the new image.

        Archive loads return None: no id lookup and no cleanup happens for them.

        Raises:
            InvalidImageNameError: before any daemon call when the name is malformed
            DaemonOperationError: when the daemon fails, including a failed removal
                of the old image under CleanupMode.REMOVE
        """
        image = image_config.name
        ImageName.validate(image)

        build_config = image_config.build
        cleanup_mode = build_config.cleanup_mode
        source = build_config.source(context.base_dir)

        old_image_id = None
        if cleanup_mode.is_removal_requested():
            old_image_id = self.query.resolve_image_id(image)

        if isinstance(source, ArchiveSource):
            self._load(image_config, source)
            return None

        new_image_id = self._build(image_config, source, context, nocache_override, build_args)

        if old_image_id is not None and old_image_id != new_image_id:
            outcome = self.attempt_removal(cleanup_mode, old_image_id, image_config.description)
            if outcome.is_fatal:
                raise outcome.cause
        return new_image_id

    def _load(self, image_config: ImageConfiguration, source: ArchiveSource) -> None:
        start = now_ms()
        self.daemon.load(image_config.name, source.path)
        logger.info(f"{image_config.description}: Loaded tarball {source.path} in {format_duration_till(start)}")

    def _build(self, image_config: ImageConfiguration, source: GenerativeSource, context: BuildContext,
               nocache_override: Optional[str], build_args: Mapping[str, str]) -> Optional[str]:
        image = image_config.name
        build_config = source.config

        start = now_ms()
        archive = self.archive_service.create_archive(image, build_config, context)
        logger.info(f"{image_config.description}: Created {archive.name} in {format_duration_till(start)}")

        options = BuildOptions(
            dockerfile=build_config.dockerfile_name if build_config.is_dockerfile_mode() else None,
            force_remove=build_config.cleanup_mode.is_removal_requested(),
            nocache=resolve_nocache(nocache_override, build_config.nocache),
            build_args=dict(build_args),
            options=dict(build_config.build_options),
        )
        self.daemon.build(image, archive, options)
        new_image_id = self.query.resolve_image_id(image)
        logger.info(f"{image_config.description}: Built image {new_image_id}")
        return new_image_id

    def attempt_removal(self, mode: CleanupMode, image_id: str, description: str) -> RemovalOutcome:
        """
        Remove a dangling image according to `mode`.

        A failure is only reported as fatal under CleanupMode.REMOVE; under
        TRY_TO_REMOVE it becomes a warning.
        """
        if not mode.is_removal_requested():
            return RemovalOutcome.skipped(image_id)
        try:
            self.daemon.remove(image_id, True)
        except DaemonOperationError as e:
            if mode is CleanupMode.TRY_TO_REMOVE:
                cause = f" [{e.cause}]" if e.cause is not None else ""
                logger.warning(f"{description}: {e} (old image){cause}")
                return RemovalOutcome.warned(image_id, e)
            return RemovalOutcome.failed(image_id, e)
        logger.info(f"{description}: Removed old image {image_id}")
        return RemovalOutcome.removed(image_id)

