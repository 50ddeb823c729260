"""
Build Context Archives

Produces the tar build context handed to the daemon:

- Dockerfile mode: the context directory as-is (the Dockerfile is added at the
  root when it lives outside of it)
- assembly mode: a generated Dockerfile plus the assembly's source directory
"""

import re
import logging
import tarfile
from pathlib import Path
from typing import List, Optional

from .. import constants
from ..config import BuildImageConfiguration
from ..datacls import BuildContext
from ..exceptions import ArchiveError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def safe_dir_name(image: str) -> str:
    return _UNSAFE_CHARS.sub("_", image).strip("_") or "image"


class ArchiveService:

    def create_archive(self, image: str, build_config: BuildImageConfiguration,
                       context: BuildContext) -> Path:
        build_dir = context.absolute_output_dir / safe_dir_name(image)
        archive_path = build_dir / constants.ARCHIVE_FILENAME
        try:
            build_dir.mkdir(parents=True, exist_ok=True)
            with tarfile.open(archive_path, "w") as tar:
                if build_config.is_dockerfile_mode():
                    self._add_dockerfile_context(tar, build_config, context, build_dir)
                else:
                    self._add_assembly(tar, build_config, context, build_dir)
        except (OSError, tarfile.TarError) as e:
            raise ArchiveError(f"Failed to create build archive for '{image}': {e}") from e

        logger.debug(f"[Archive] Wrote build context for '{image}' to {archive_path}")
        return archive_path

    def _add_dockerfile_context(self, tar: tarfile.TarFile, build_config: BuildImageConfiguration,
                                context: BuildContext, build_dir: Path):
        context_dir = build_config.absolute_context_dir(context.base_dir)
        dockerfile = build_config.absolute_dockerfile_path(context.base_dir)
        if not dockerfile.is_file():
            raise ArchiveError(f"Dockerfile '{dockerfile}' does not exist")
        if not context_dir.is_dir():
            raise ArchiveError(f"Context directory '{context_dir}' does not exist")

        excluded = _relative_to(build_dir, context_dir)
        self._add_tree(tar, context_dir, "", excluded)

        # The daemon looks the Dockerfile up by name at the archive root
        relative = _relative_to(dockerfile, context_dir)
        if relative is None or relative.as_posix() != dockerfile.name:
            tar.add(str(dockerfile), arcname=dockerfile.name)

    def _add_assembly(self, tar: tarfile.TarFile, build_config: BuildImageConfiguration,
                      context: BuildContext, build_dir: Path):
        assembly = build_config.assembly
        lines: List[str] = [f"FROM {build_config.from_image or constants.SCRATCH_IMAGE}"]

        if assembly is not None and assembly.source_dir:
            source_dir = context.resolve_path(assembly.source_dir)
            if not source_dir.is_dir():
                raise ArchiveError(f"Assembly source directory '{source_dir}' does not exist")
            self._add_tree(tar, source_dir, assembly.name, _relative_to(build_dir, source_dir))
            lines.append(f"COPY {assembly.name} {assembly.effective_target_dir}")

        dockerfile = build_dir / constants.DOCKERFILE_NAME
        dockerfile.write_text("\n".join(lines) + "\n", encoding="utf-8")
        tar.add(str(dockerfile), arcname=constants.DOCKERFILE_NAME)

    @staticmethod
    def _add_tree(tar: tarfile.TarFile, root: Path, prefix: str, excluded: Optional[Path]):
        excluded_name = excluded.as_posix() if excluded is not None else None

        def skip_output(info: tarfile.TarInfo) -> Optional[tarfile.TarInfo]:
            name = info.name[len(prefix) + 1:] if prefix else info.name
            if excluded_name and (name == excluded_name or name.startswith(excluded_name + "/")):
                return None
            return info

        for child in sorted(root.iterdir()):
            arcname = f"{prefix}/{child.name}" if prefix else child.name
            tar.add(str(child), arcname=arcname, filter=skip_output)


def _relative_to(path: Path, root: Path) -> Optional[Path]:
    try:
        return path.relative_to(root)
    except ValueError:
        return None
