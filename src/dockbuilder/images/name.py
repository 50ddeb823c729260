"""
Image Reference

Parses image references of the form ``[registry/]repository[:tag][@digest]``
and derives the name variants used by the pull, tag and build steps.
"""

import re
from typing import List, Optional

from .. import constants
from ..exceptions import InvalidImageNameError

_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
REGISTRY_PATTERN = re.compile(rf"^{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?$")

_NAME_COMPONENT = r"[a-z0-9]+(?:(?:[._]|__|[-]+)[a-z0-9]+)*"
REPOSITORY_PATTERN = re.compile(rf"^{_NAME_COMPONENT}(?:/{_NAME_COMPONENT})*$")

TAG_PATTERN = re.compile(r"^[\w][\w.-]{0,127}$")
DIGEST_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}$")


class ImageName:
    """
    A parsed image reference.

    The registry part is only recognised when the first path component looks like
    a host (contains a ``.`` or a ``:``, or is ``localhost``), which mirrors how the
    docker CLI tells ``myhost:5000/app`` apart from ``library/app``.
    """

    def __init__(self, full_name: str, given_tag: Optional[str] = None):
        if not full_name:
            raise InvalidImageNameError("Image name must not be empty.")
        self.raw = full_name
        self.registry: Optional[str] = None
        self.tag: Optional[str] = None
        self.digest: Optional[str] = None

        rest = full_name
        if "@" in rest:
            rest, self.digest = rest.split("@", 1)

        if given_tag is not None:
            self.tag = given_tag
        else:
            slash = rest.rfind("/")
            colon = rest.rfind(":")
            if colon > slash:
                rest, self.tag = rest[:colon], rest[colon + 1:]

        parts = rest.split("/")
        if len(parts) > 1 and self._looks_like_registry(parts[0]):
            self.registry = parts[0]
            parts = parts[1:]
        self.repository = "/".join(parts)

        self._check()

    @staticmethod
    def _looks_like_registry(part: str) -> bool:
        return "." in part or ":" in part or part == "localhost"

    def _check(self):
        errors: List[str] = []
        if not REPOSITORY_PATTERN.match(self.repository):
            errors.append(
                f"repository '{self.repository}' must consist of lowercase alphanumerics "
                f"separated by '.', '_', '__', '-' or '/'"
            )
        if self.registry is not None and not REGISTRY_PATTERN.match(self.registry):
            errors.append(f"registry '{self.registry}' is not a valid host[:port]")
        if self.tag is not None and not TAG_PATTERN.match(self.tag):
            errors.append(f"tag '{self.tag}' is not valid")
        if self.digest is not None and not DIGEST_PATTERN.match(self.digest):
            errors.append(f"digest '{self.digest}' is not valid")
        if errors:
            raise InvalidImageNameError(f"Invalid image name '{self.raw}': {'; '.join(errors)}")

    @staticmethod
    def validate(name: str) -> None:
        """Raise InvalidImageNameError when `name` is not a well-formed image reference."""
        ImageName(name)

    @property
    def user(self) -> Optional[str]:
        if "/" in self.repository:
            return self.repository.split("/", 1)[0]
        return None

    @property
    def simple_name(self) -> str:
        """Repository without its leading user/organisation part."""
        return self.repository.split("/", 1)[1] if self.user else self.repository

    def has_registry(self) -> bool:
        return bool(self.registry)

    def name_without_tag(self, registry: Optional[str] = None) -> str:
        """Repository prefixed with its own registry, or with `registry` when it has none."""
        effective = self.registry or registry
        return f"{effective}/{self.repository}" if effective else self.repository

    def full_name(self, registry: Optional[str] = None) -> str:
        name = self.name_without_tag(registry)
        if self.tag:
            name += f":{self.tag}"
        if self.digest:
            name += f"@{self.digest}"
        return name

    def with_latest_if_no_tag(self) -> str:
        """Reference used for pulling: untagged names are fetched as ``:latest``."""
        if self.tag is None and self.digest is None:
            return f"{self.name_without_tag()}:{constants.LATEST_TAG}"
        return self.raw

    def __str__(self) -> str:
        return self.full_name()

    def __repr__(self) -> str:
        return f"ImageName({self.raw!r})"


def find_registry(*candidates: Optional[str]) -> Optional[str]:
    """Return the first non-empty registry among `candidates`."""
    for candidate in candidates:
        if candidate:
            return candidate
    return None
