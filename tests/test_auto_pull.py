import pytest

from dockbuilder import constants
from dockbuilder.config import AssemblyConfiguration, BuildImageConfiguration, ImageConfiguration
from dockbuilder.exceptions import DaemonOperationError


def image(name="acme/app", **build) -> ImageConfiguration:
    return ImageConfiguration(name=name, build=BuildImageConfiguration(**build))


class TestResolveBaseImage:

    def test_archive_mode_has_no_base(self, puller, context):
        build = BuildImageConfiguration(docker_archive="app.tar")
        assert puller.resolve_base_image(build, context) is None

    def test_explicit_from(self, puller, context):
        build = BuildImageConfiguration(from_image="alpine:3.19")
        assert puller.resolve_base_image(build, context) == "alpine:3.19"

    def test_no_from_and_no_assembly_is_scratch(self, puller, context):
        assert puller.resolve_base_image(BuildImageConfiguration(), context) == constants.SCRATCH_IMAGE

    def test_assembly_without_from_is_unknown(self, puller, context):
        build = BuildImageConfiguration(assembly=AssemblyConfiguration(source_dir="dist"))
        assert puller.resolve_base_image(build, context) is None

    def test_dockerfile_mode_uses_extractor(self, puller, extractor, context, tmp_path):
        build = BuildImageConfiguration(dockerfile="docker/Dockerfile")
        assert puller.resolve_base_image(build, context) == "alpine:3.19"
        assert extractor.paths == [tmp_path / "docker" / "Dockerfile"]

    def test_unreadable_dockerfile_is_not_an_error(self, puller, extractor, context):
        extractor.base = None
        build = BuildImageConfiguration(dockerfile="Dockerfile")
        assert puller.resolve_base_image(build, context) is None


class TestAutoPullBaseImage:

    @pytest.mark.parametrize("policy", [None, "on", "once", "always", "off"])
    def test_scratch_base_never_pulls(self, puller, daemon, query, make_context, policy):
        puller.auto_pull_base_image(image(), make_context(auto_pull=policy))
        assert daemon.calls == []
        assert query.pull_questions == []

    def test_unknown_dockerfile_base_skips_pull(self, puller, daemon, extractor, context):
        extractor.base = None
        puller.auto_pull_base_image(image(dockerfile="Dockerfile"), context)
        assert daemon.calls == []

    def test_base_pull_is_unconditional_and_passes_policy(self, puller, query, make_context):
        puller.auto_pull_base_image(image(from_image="alpine:3.19"), make_context(auto_pull="always"))
        assert query.pull_questions == [("always", "alpine:3.19", True, [])]

    def test_untagged_reference_is_pulled_as_latest(self, puller, daemon, context):
        puller.auto_pull_base_image(image(from_image="repo/name"), context)

        assert daemon.calls_of("pull") == [("pull", "repo/name:latest", None, None)]
        assert context.pull_cache.load().images() == ["repo/name"]

    def test_second_pull_is_skipped_through_cache(self, puller, daemon, context):
        puller.auto_pull_base_image(image(from_image="alpine:3.19"), context)
        puller.auto_pull_base_image(image(name="acme/other", from_image="alpine:3.19"), context)
        assert len(daemon.calls_of("pull")) == 1

    def test_query_says_no(self, puller, daemon, query, context):
        query.decide = lambda *args: False
        puller.auto_pull_base_image(image(from_image="alpine:3.19"), context)
        assert daemon.calls == []
        assert context.pull_cache.load().images() == []


class TestCheckImageWithAutoPull:

    def test_registry_precedence(self, puller, daemon, make_context):
        context = make_context(pull_registry="pull.example.com", registry="general.example.com")
        puller.check_image_with_auto_pull("own.example.com/app:1", None, True, context)
        puller.check_image_with_auto_pull("app:2", None, True, context)

        pulls = daemon.calls_of("pull")
        assert pulls[0][3] == "own.example.com"
        assert pulls[1][3] == "pull.example.com"

    def test_general_registry_is_last_resort(self, puller, daemon, make_context):
        puller.check_image_with_auto_pull("app:1", None, True, make_context(registry="general.example.com"))
        assert daemon.calls_of("pull")[0][3] == "general.example.com"

    def test_registry_pull_tags_short_name(self, puller, daemon, make_context):
        context = make_context(pull_registry="mirror.local:5000")
        puller.check_image_with_auto_pull("repo/name", None, True, context)

        assert daemon.ops() == ["pull", "tag"]
        assert daemon.calls_of("tag") == [("tag", "mirror.local:5000/repo/name:latest", "repo/name", False)]

    def test_embedded_registry_is_not_retagged(self, puller, daemon, make_context):
        puller.check_image_with_auto_pull("own.example.com/app:1", None, True,
                                          make_context(pull_registry="pull.example.com"))
        assert daemon.ops() == ["pull"]

    def test_auth_resolved_for_effective_registry(self, puller, daemon, auth, make_context):
        auth.result = object()
        puller.check_image_with_auto_pull("app:1", None, True, make_context(registry="reg.io"))
        assert auth.calls == [("app:1", "reg.io", False)]
        assert daemon.calls_of("pull")[0][2] is auth.result

    def test_pull_failure_propagates_and_is_not_cached(self, puller, daemon, context):
        daemon.fail_on["pull"] = DaemonOperationError("pull failed", cause=IOError("network down"))
        with pytest.raises(DaemonOperationError):
            puller.check_image_with_auto_pull("alpine:3.19", None, True, context)
        assert not context.pull_cache.contains("alpine:3.19")

    def test_tag_failure_is_fatal(self, puller, daemon, make_context):
        daemon.fail_on["tag"] = DaemonOperationError("tag failed")
        with pytest.raises(DaemonOperationError, match="tag failed"):
            puller.check_image_with_auto_pull("app", None, True, make_context(registry="reg.io"))
