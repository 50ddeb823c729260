import tarfile

import pytest

from dockbuilder.access import ArchiveService
from dockbuilder.access.archive import safe_dir_name
from dockbuilder.config import BuildImageConfiguration
from dockbuilder.exceptions import ArchiveError


def members(path):
    with tarfile.open(path) as tar:
        return {info.name: info for info in tar.getmembers()}


def read_member(path, name):
    with tarfile.open(path) as tar:
        return tar.extractfile(name).read().decode()


class TestDockerfileMode:

    def test_context_directory_is_archived(self, context, tmp_path):
        (tmp_path / "app").mkdir()
        (tmp_path / "app" / "Dockerfile").write_text("FROM alpine\n")
        (tmp_path / "app" / "main.py").write_text("print('hi')\n")
        build = BuildImageConfiguration(dockerfile="app/Dockerfile")

        archive = ArchiveService().create_archive("acme/app:1", build, context)

        assert archive == tmp_path / "out" / "acme_app_1" / "docker-build.tar"
        assert set(members(archive)) == {"Dockerfile", "main.py"}

    def test_output_directory_is_excluded(self, context, tmp_path):
        (tmp_path / "Dockerfile").write_text("FROM alpine\n")
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "lib.py").write_text("")
        build = BuildImageConfiguration(dockerfile="Dockerfile", context_dir=".")

        archive = ArchiveService().create_archive("acme/app", build, context)

        names = set(members(archive))
        assert "Dockerfile" in names
        assert "src/lib.py" in names
        assert not any(name.startswith("out/acme_app") for name in names)

    def test_nested_dockerfile_is_added_at_root(self, context, tmp_path):
        (tmp_path / "ctx" / "docker").mkdir(parents=True)
        (tmp_path / "ctx" / "docker" / "Dockerfile.prod").write_text("FROM debian\n")
        build = BuildImageConfiguration(context_dir="ctx", dockerfile="docker/Dockerfile.prod")

        archive = ArchiveService().create_archive("acme/app", build, context)

        names = set(members(archive))
        assert "Dockerfile.prod" in names
        assert "docker/Dockerfile.prod" in names

    def test_missing_dockerfile_raises(self, context):
        build = BuildImageConfiguration(dockerfile="nope/Dockerfile")
        with pytest.raises(ArchiveError):
            ArchiveService().create_archive("acme/app", build, context)


class TestAssemblyMode:

    def test_generated_dockerfile_copies_assembly(self, context, tmp_path):
        (tmp_path / "dist").mkdir()
        (tmp_path / "dist" / "data.json").write_text("{}")
        build = BuildImageConfiguration.model_validate({
            'from': 'busybox',
            'assembly': {'name': 'payload', 'sourceDir': 'dist'},
        })

        archive = ArchiveService().create_archive("acme/data", build, context)

        assert set(members(archive)) == {"Dockerfile", "payload/data.json"}
        assert read_member(archive, "Dockerfile") == "FROM busybox\nCOPY payload /payload\n"

    def test_without_from_uses_scratch(self, context):
        archive = ArchiveService().create_archive("acme/empty", BuildImageConfiguration(), context)
        assert read_member(archive, "Dockerfile") == "FROM scratch\n"

    def test_missing_source_dir_raises(self, context):
        build = BuildImageConfiguration.model_validate({'assembly': {'sourceDir': 'missing'}})
        with pytest.raises(ArchiveError):
            ArchiveService().create_archive("acme/data", build, context)


@pytest.mark.parametrize("image, expected", [
    ("acme/app:1", "acme_app_1"),
    ("registry.io:5000/team/app", "registry.io_5000_team_app"),
    ("///", "image"),
])
def test_safe_dir_name(image, expected):
    assert safe_dir_name(image) == expected
