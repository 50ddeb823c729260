import pytest

from dockbuilder.exceptions import InvalidImageNameError
from dockbuilder.images import ImageName, find_registry


class TestImageNameParsing:
    """Splitting references into registry, repository, tag and digest."""

    @pytest.mark.parametrize(
        "name, registry, repository, tag",
        [
            ("alpine", None, "alpine", None),
            ("alpine:3.19", None, "alpine", "3.19"),
            ("library/alpine", None, "library/alpine", None),
            ("docker.io/library/alpine:latest", "docker.io", "library/alpine", "latest"),
            ("localhost:5000/app", "localhost:5000", "app", None),
            ("localhost/app:1", "localhost", "app", "1"),
            ("registry.example.com:8443/team/app:v1.2-rc", "registry.example.com:8443", "team/app", "v1.2-rc"),
            ("repo/name", None, "repo/name", None),
        ],
    )
    def test_parts(self, name, registry, repository, tag):
        image = ImageName(name)
        assert image.registry == registry
        assert image.repository == repository
        assert image.tag == tag

    def test_digest(self):
        digest = "sha256:" + "a" * 64
        image = ImageName(f"alpine@{digest}")
        assert image.digest == digest
        assert image.tag is None
        assert image.full_name() == f"alpine@{digest}"

    def test_user_and_simple_name(self):
        image = ImageName("quay.io/acme/tools/builder:1")
        assert image.user == "acme"
        assert image.simple_name == "tools/builder"
        assert ImageName("alpine").user is None


class TestImageNameValidation:

    @pytest.mark.parametrize(
        "name",
        [
            "",
            "Alpine",
            "UPPER/case",
            "alpine:",
            "alpine:bad tag",
            "-leading-dash",
            "double//slash",
            "trailing/",
            "alpine@sha256:short",
        ],
    )
    def test_invalid_names_raise(self, name):
        with pytest.raises(InvalidImageNameError):
            ImageName.validate(name)

    @pytest.mark.parametrize("name", ["a", "my-app", "my_app", "my__app", "my.app", "a/b/c:1.0"])
    def test_valid_names(self, name):
        ImageName.validate(name)


class TestImageNameDerivations:

    def test_has_registry(self):
        assert ImageName("gcr.io/project/app").has_registry()
        assert not ImageName("project/app").has_registry()

    def test_name_without_tag_prefers_own_registry(self):
        assert ImageName("gcr.io/app:1").name_without_tag("other.io") == "gcr.io/app"
        assert ImageName("app:1").name_without_tag("other.io") == "other.io/app"
        assert ImageName("app:1").name_without_tag() == "app"

    def test_full_name_with_registry(self):
        assert ImageName("team/app:2").full_name("registry.local:5000") == "registry.local:5000/team/app:2"
        assert ImageName("team/app").full_name() == "team/app"

    def test_with_latest_if_no_tag(self):
        assert ImageName("repo/name").with_latest_if_no_tag() == "repo/name:latest"
        assert ImageName("repo/name:1.0").with_latest_if_no_tag() == "repo/name:1.0"


def test_find_registry_returns_first_defined():
    assert find_registry(None, "", "pull.io", "general.io") == "pull.io"
    assert find_registry("own.io", "pull.io") == "own.io"
    assert find_registry(None, None) is None
