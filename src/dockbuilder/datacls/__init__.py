from .auth import AuthConfig, AuthParameters, RegistryCredentials
from .build import (
    ArchiveSource,
    GenerativeSource,
    BuildSource,
    BuildOptions,
    RemovalStatus,
    RemovalOutcome,
)
from .contexts import BuildContext

__all__ = [
    'AuthConfig',
    'AuthParameters',
    'RegistryCredentials',
    'ArchiveSource',
    'GenerativeSource',
    'BuildSource',
    'BuildOptions',
    'RemovalStatus',
    'RemovalOutcome',
    'BuildContext',
]
