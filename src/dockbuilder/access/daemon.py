import logging
import os
import tarfile
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from python_on_whales import DockerClient
from python_on_whales.exceptions import DockerException, NoSuchImage

from ..datacls import AuthConfig, BuildOptions
from ..exceptions import DaemonOperationError
from ..images import ImageName

logger = logging.getLogger(__name__)

# BuildOptions.options keys understood by `legacy_build`
_PASSTHROUGH_OPTIONS = {"network", "target"}


class WhalesDaemon:
    """
    Daemon access through the docker CLI (python-on-whales).

    Every CLI failure is re-raised as DaemonOperationError with the original
    exception as cause.
    """

    def __init__(self, client: Optional[DockerClient] = None):
        self.client = client or DockerClient()

    def pull(self, image: str, auth: Optional[AuthConfig], registry: Optional[str]) -> None:
        full_name = ImageName(image).full_name(registry)
        if auth is not None:
            server = auth.registry or registry
            try:
                self.client.login(server=server, username=auth.username, password=auth.password)
            except DockerException as e:
                raise DaemonOperationError(f"Unable to log in to {server or 'the default registry'}", cause=e) from e
        logger.debug(f"[Daemon] Pulling {full_name}")
        try:
            self.client.pull(full_name, quiet=True)
        except DockerException as e:
            raise DaemonOperationError(f"Unable to pull '{full_name}'", cause=e) from e

    def build(self, image: str, archive: Path, options: BuildOptions) -> None:
        with tempfile.TemporaryDirectory(prefix="dockb-") as context_dir:
            try:
                with tarfile.open(archive) as tar:
                    tar.extractall(context_dir, filter="data")
            except (OSError, tarfile.TarError) as e:
                raise DaemonOperationError(f"Unable to unpack build context {archive}", cause=e) from e

            kwargs: Dict[str, Any] = {
                "tags": [image],
                "build_args": dict(options.build_args),
                "cache": not options.nocache,
            }
            if options.dockerfile:
                kwargs["file"] = os.path.join(context_dir, options.dockerfile)
            for key, value in options.options.items():
                if key == "pull":
                    kwargs["pull"] = str(value).lower() == "true"
                elif key in _PASSTHROUGH_OPTIONS:
                    kwargs[key] = value
                else:
                    logger.debug(f"[Daemon] Ignoring unsupported build option '{key}'")
            if options.force_remove:
                logger.debug("[Daemon] Intermediate containers are always removed by the CLI builder")

            logger.debug(f"[Daemon] Building {image} from {archive}")
            try:
                self.client.legacy_build(context_dir, **kwargs)
            except DockerException as e:
                raise DaemonOperationError(f"Unable to build image '{image}'", cause=e) from e

    def load(self, image: str, archive: Path) -> None:
        try:
            loaded = self.client.image.load(archive)
        except DockerException as e:
            raise DaemonOperationError(f"Unable to load '{archive}'", cause=e) from e
        if loaded and image not in loaded:
            self.tag(loaded[0], image, True)

    def tag(self, source: str, target: str, force: bool) -> None:
        logger.debug(f"[Daemon] Tagging {source} as {target}")
        try:
            self.client.image.tag(source, target)
        except DockerException as e:
            raise DaemonOperationError(f"Unable to tag '{source}' as '{target}'", cause=e) from e

    def remove(self, image_id: str, force: bool) -> None:
        try:
            self.client.image.remove(image_id, force=force)
        except DockerException as e:
            raise DaemonOperationError(f"Unable to remove image '{image_id}'", cause=e) from e

    def image_id(self, name: str) -> Optional[str]:
        try:
            return self.client.image.inspect(name).id
        except NoSuchImage:
            return None
        except DockerException as e:
            raise DaemonOperationError(f"Unable to inspect image '{name}'", cause=e) from e

    def has_image(self, name: str) -> bool:
        return self.image_id(name) is not None
