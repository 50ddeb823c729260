from typing import Optional


class DockBuilderError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading and validating configuration ---
class ConfigurationError(DockBuilderError):
    """Base class for errors encountered while reading or validating configuration."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the run configuration file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML configuration file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the configuration fails structural validation (e.g., Pydantic)."""

    pass


class InvalidImageNameError(ConfigurationError):
    """Raised when an image reference does not follow the `[registry/]repository[:tag]` grammar."""

    pass


# --- 2. Errors that occur while building an image ---
class BuildError(DockBuilderError):
    """Base class for errors raised during the build workflow of an image."""

    pass


class DaemonOperationError(BuildError):
    """
    Raised when a pull, build, load, tag or remove call against the image daemon fails.

    The underlying transport/daemon exception is kept in `cause`.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class BaseImageResolutionError(BuildError):
    """Raised when the base image cannot be read out of a Dockerfile."""

    pass


class ArchiveError(BuildError):
    """Raised when the build context archive cannot be produced."""

    pass


# --- 3. Errors related to session state ---
class CacheError(DockBuilderError):
    """Base class for errors around run-scoped caches."""

    pass


class PullCacheCorruptedError(CacheError):
    """Raised when the serialized pull cache read from the property store is malformed."""

    pass
