from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RegistryCredentials(BaseModel):
    """Username/password pair for one registry."""
    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    email: Optional[str] = None


class AuthParameters(BaseModel):
    """
    Credentials available to a run.

    `registries` is keyed by registry host; `default` applies to every other
    registry. `push` overrides both for push operations.
    """
    model_config = ConfigDict(frozen=True)

    default: Optional[RegistryCredentials] = None
    push: Optional[RegistryCredentials] = None
    registries: Dict[str, RegistryCredentials] = Field(default_factory=dict)


class AuthConfig(BaseModel):
    """Credentials resolved for one daemon call."""
    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    email: Optional[str] = None
    registry: Optional[str] = None
