from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from dockbuilder.builder import AutoPuller, BuildArgResolver, BuildExecutor, BuildService
from dockbuilder.cache import InMemoryPropertyStore, PullCacheService
from dockbuilder.datacls import BuildContext
from dockbuilder.exceptions import BaseImageResolutionError


class FakeDaemon:
    """Records every primitive call; `fail_on` maps an operation name to the exception it raises."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.fail_on: Dict[str, Exception] = {}

    def _record(self, op: str, *args):
        self.calls.append((op,) + args)
        if op in self.fail_on:
            raise self.fail_on[op]

    def pull(self, image, auth, registry):
        self._record("pull", image, auth, registry)

    def build(self, image, archive, options):
        self._record("build", image, archive, options)

    def load(self, image, archive):
        self._record("load", image, archive)

    def tag(self, source, target, force):
        self._record("tag", source, target, force)

    def remove(self, image_id, force):
        self._record("remove", image_id, force)

    def ops(self) -> List[str]:
        return [call[0] for call in self.calls]

    def calls_of(self, op: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == op]


class FakeQuery:
    """
    `ids` maps an image name to the ids returned by successive lookups (the last one repeats).
    By default an image needs pulling unless the pull cache already holds it.
    """

    def __init__(self, ids: Optional[Dict[str, Sequence[Optional[str]]]] = None,
                 decide: Optional[Callable] = None):
        self.ids = {name: list(values) for name, values in (ids or {}).items()}
        self.decide = decide
        self.pull_questions: List[tuple] = []
        self.id_lookups: List[str] = []

    def image_requires_auto_pull(self, policy, image, always_allowed, cache):
        self.pull_questions.append((policy, image, always_allowed, cache.images()))
        if self.decide is not None:
            return self.decide(policy, image, always_allowed, cache)
        return not cache.contains(image)

    def resolve_image_id(self, name):
        self.id_lookups.append(name)
        values = self.ids.get(name)
        if not values:
            return None
        return values.pop(0) if len(values) > 1 else values[0]


class FakeArchive:
    def __init__(self, path: Path):
        self.path = path
        self.calls: List[tuple] = []

    def create_archive(self, image, build_config, context):
        self.calls.append((image, build_config))
        return self.path


class FakeAuth:
    def __init__(self, result=None):
        self.result = result
        self.calls: List[tuple] = []

    def resolve_auth(self, image, registry, is_push, auth_params):
        self.calls.append((str(image), registry, is_push))
        return self.result


class FakeExtractor:
    def __init__(self, base: Optional[str] = None):
        self.base = base
        self.paths: List[Path] = []

    def extract_base_image(self, dockerfile):
        self.paths.append(dockerfile)
        if self.base is None:
            raise BaseImageResolutionError(f"No FROM instruction found in '{dockerfile}'")
        return self.base


@pytest.fixture
def daemon() -> FakeDaemon:
    return FakeDaemon()


@pytest.fixture
def query() -> FakeQuery:
    return FakeQuery()


@pytest.fixture
def archive(tmp_path: Path) -> FakeArchive:
    return FakeArchive(tmp_path / "docker-build.tar")


@pytest.fixture
def auth() -> FakeAuth:
    return FakeAuth()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor("alpine:3.19")


@pytest.fixture
def store() -> InMemoryPropertyStore:
    return InMemoryPropertyStore()


@pytest.fixture
def make_context(tmp_path: Path, store: InMemoryPropertyStore):
    """Build a BuildContext rooted at tmp_path that shares one pull cache per test."""
    pull_cache = PullCacheService(store)

    def _make(**overrides) -> BuildContext:
        settings = {"pull_cache": pull_cache, "base_dir": tmp_path, "output_dir": tmp_path / "out"}
        settings.update(overrides)
        return BuildContext(**settings)

    return _make


@pytest.fixture
def context(make_context) -> BuildContext:
    return make_context()


@pytest.fixture
def puller(daemon, query, auth, extractor) -> AutoPuller:
    return AutoPuller(daemon, query, auth, extractor)


@pytest.fixture
def executor(daemon, query, archive) -> BuildExecutor:
    return BuildExecutor(daemon, query, archive)


@pytest.fixture
def service(puller, executor) -> BuildService:
    return BuildService(puller, executor, BuildArgResolver())


@pytest.fixture
def make_query() -> Callable[..., FakeQuery]:
    return FakeQuery
