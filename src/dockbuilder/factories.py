"""
Dockbuilder Factories

Wires collaborators into a BuildService. Every collaborator can be replaced,
which is how tests plug in fakes; the defaults talk to the local docker CLI.
"""

from typing import Optional
import logging

from python_on_whales import DockerClient

from .access import ArchiveService, AuthService, DaemonQuery, DockerfileExtractor, WhalesDaemon
from .builder import AutoPuller, BuildArgResolver, BuildExecutor, BuildService
from .cache import InMemoryPropertyStore, PullCacheService
from .exceptions import ConfigurationError
from .protocols import (
    ArchiveProducer,
    AuthResolver,
    BaseImageExtractor,
    DaemonAccess,
    ImageQuery,
    PropertyStore,
)

logger = logging.getLogger(__name__)


def create_build_service(daemon: Optional[DaemonAccess] = None,
                         query: Optional[ImageQuery] = None,
                         archive_service: Optional[ArchiveProducer] = None,
                         auth_service: Optional[AuthResolver] = None,
                         extractor: Optional[BaseImageExtractor] = None,
                         client: Optional[DockerClient] = None) -> BuildService:
    """
    Create a BuildService, filling in default collaborators for those not given.

    The default DaemonQuery asks the same WhalesDaemon that pulls and builds, so a
    custom `daemon` must come with its own `query`.

    Raises:
        ConfigurationError: when a custom daemon is given without a query
    """
    if daemon is not None and query is None and not isinstance(daemon, WhalesDaemon):
        raise ConfigurationError(
            f"A custom daemon ({type(daemon).__name__}) needs a matching query; pass `query` as well."
        )
    if daemon is None or query is None:
        whales = daemon if isinstance(daemon, WhalesDaemon) else WhalesDaemon(client)
        daemon = daemon or whales
        query = query or DaemonQuery(whales)
    archive_service = archive_service or ArchiveService()
    auth_service = auth_service or AuthService()
    extractor = extractor or DockerfileExtractor()

    logger.debug(
        f"BuildService wired with daemon={type(daemon).__name__}, query={type(query).__name__}, "
        f"archive={type(archive_service).__name__}"
    )
    return BuildService(
        auto_puller=AutoPuller(daemon, query, auth_service, extractor),
        executor=BuildExecutor(daemon, query, archive_service),
        arg_resolver=BuildArgResolver(),
    )


def create_pull_cache(store: Optional[PropertyStore] = None) -> PullCacheService:
    """Create the run-scoped pull cache; share the result between all workflows of the run."""
    return PullCacheService(store if store is not None else InMemoryPropertyStore())
