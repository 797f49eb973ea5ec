"""Tests for the installation verifier."""

from rcsetup.models import Expectation
from rcsetup.verifier import InstallationVerifier


class TestInstallationVerifier:
    """Tests for InstallationVerifier."""

    def test_absent_when_not_on_path(self, which, runner):
        """Test that a missing tool satisfies ABSENT but not PRESENT."""
        verifier = InstallationVerifier("ruscompile", which=which, runner=runner)

        assert verifier.locate() is None
        assert verifier.verify(Expectation.ABSENT)
        assert not verifier.verify(Expectation.PRESENT)

    def test_present_when_on_path_with_version(
        self, which, runner, settings, make_stub
    ):
        """Test that a resolvable tool reporting a version is PRESENT."""
        make_stub(settings.install_path)
        verifier = InstallationVerifier("ruscompile", which=which, runner=runner)

        assert verifier.locate() == str(settings.install_path)
        assert verifier.version() == "ruscompile 0.1.0"
        assert verifier.verify(Expectation.PRESENT)
        assert not verifier.verify(Expectation.ABSENT)

    def test_not_present_when_version_query_fails(
        self, which, make_runner, settings, make_stub
    ):
        """Test that a tool that cannot report a version is not PRESENT."""
        tool = make_stub(settings.install_path)
        runner = make_runner(fail=((str(tool), "--version"),))
        verifier = InstallationVerifier("ruscompile", which=which, runner=runner)

        assert verifier.version() is None
        assert not verifier.verify(Expectation.PRESENT)

    def test_user_local_install_is_found(self, which, runner, settings, make_stub):
        """Test that ~/.local/bin counts as on the search path."""
        make_stub(settings.home / ".local" / "bin" / "ruscompile")
        verifier = InstallationVerifier("ruscompile", which=which, runner=runner)

        assert not verifier.verify(Expectation.ABSENT)
