import logging
from typing import Optional

from ..datacls import AuthConfig, AuthParameters, RegistryCredentials
from ..images import ImageName, find_registry

logger = logging.getLogger(__name__)


class AuthService:
    """
    Picks the credentials for a daemon call.

    Lookup order: push credentials (push calls only), credentials of the
    effective registry, then the default credentials. None means anonymous.
    """

    def resolve_auth(self, image: ImageName, registry: Optional[str], is_push: bool,
                     auth_params: Optional[AuthParameters]) -> Optional[AuthConfig]:
        if auth_params is None:
            return None

        effective_registry = find_registry(image.registry, registry)
        credentials: Optional[RegistryCredentials] = None
        source = ""
        if is_push and auth_params.push is not None:
            credentials, source = auth_params.push, "push"
        elif effective_registry and effective_registry in auth_params.registries:
            credentials, source = auth_params.registries[effective_registry], f"registry '{effective_registry}'"
        elif auth_params.default is not None:
            credentials, source = auth_params.default, "default"

        if credentials is None:
            logger.debug(f"[Auth] No credentials for '{image}', using anonymous access")
            return None

        logger.debug(f"[Auth] Using {source} credentials of user '{credentials.username}' for '{image}'")
        return AuthConfig(
            username=credentials.username,
            password=credentials.password,
            email=credentials.email,
            registry=effective_registry,
        )
