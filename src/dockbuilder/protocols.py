"""
Dockbuilder Protocol Definitions

This module contains the Protocol definitions for every collaborator the
build workflow talks to. The workflow only depends on these contracts; the
default implementations live in `dockbuilder.access`.

Protocols are the foundation layer with zero dependencies on other dockbuilder modules.
"""

from pathlib import Path
from typing import Protocol, Any, Optional, runtime_checkable


# ============================================================================
# Daemon Protocols
# ============================================================================

@runtime_checkable
class DaemonAccess(Protocol):
    """
    Low-level primitives of the image daemon.

    Every method raises DaemonOperationError (with the transport error as cause)
    when the daemon rejects the call.
    """

    def pull(self, image: str, auth: Optional[Any], registry: Optional[str]) -> None:
        """
        Pull `image`, prefixed with `registry` when the name carries none.

        Args:
            image: Image reference to fetch
            auth: Resolved credentials or None for anonymous access
            registry: Registry to pull from
        """
        ...

    def build(self, image: str, archive: Path, options: Any) -> None:
        """
        Build `image` from a tar build context.

        Args:
            image: Name to tag the result with
            archive: Path of the tar build context
            options: BuildOptions for the backend
        """
        ...

    def load(self, image: str, archive: Path) -> None:
        """Load a pre-built image tarball and make it available as `image`."""
        ...

    def tag(self, source: str, target: str, force: bool) -> None:
        ...

    def remove(self, image_id: str, force: bool) -> None:
        ...


@runtime_checkable
class ImageQuery(Protocol):
    """Read-only questions about images known to the daemon."""

    def image_requires_auto_pull(self, policy: Optional[str], image: str,
                                 always_allowed: bool, cache: Any) -> bool:
        """
        Decide whether `image` has to be pulled.

        Args:
            policy: Opaque auto-pull policy of the run
            image: Image reference
            always_allowed: Whether an unconditional pull is allowed for this call
            cache: ImagePullCache snapshot of the images pulled so far

        Returns:
            True when the caller must pull the image
        """
        ...

    def resolve_image_id(self, name: str) -> Optional[str]:
        """Return the daemon id currently behind `name`, or None when it does not exist."""
        ...


# ============================================================================
# Build Input Protocols
# ============================================================================

@runtime_checkable
class ArchiveProducer(Protocol):
    """Packs a generative build configuration into a tar build context."""

    def create_archive(self, image: str, build_config: Any, context: Any) -> Path:
        ...


@runtime_checkable
class AuthResolver(Protocol):
    """Resolves registry credentials for an image."""

    def resolve_auth(self, image: Any, registry: Optional[str], is_push: bool,
                     auth_params: Any) -> Optional[Any]:
        ...


@runtime_checkable
class BaseImageExtractor(Protocol):
    """Reads the base image out of a Dockerfile."""

    def extract_base_image(self, dockerfile: Path) -> str:
        """Raise BaseImageResolutionError when the file cannot be read or has no FROM."""
        ...


# ============================================================================
# Session State Protocols
# ============================================================================

@runtime_checkable
class PropertyStore(Protocol):
    """String property bag shared by all image builds of one run."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...
