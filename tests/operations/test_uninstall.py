"""Tests for the simple and complete uninstall flows."""

import shutil
from pathlib import Path

import pytest

from rcsetup.config import Settings
from rcsetup.models import OutcomeStatus
from rcsetup.models import RunState
from rcsetup.operations import complete_uninstall_flow
from rcsetup.operations import simple_uninstall_flow
from rcsetup.operations.uninstall import COMPLETE_REMOVED

PATH_LINE = 'export PATH="$PATH:/opt/ruscompile/bin"\n'
ALIAS_LINE = "alias rc='ruscompile'\n"


def snapshot(root: Path) -> dict[str, bytes | None]:
    """Map every path under root to its content (None for directories)."""
    return {
        str(p.relative_to(root)): None if p.is_dir() else p.read_bytes()
        for p in sorted(root.rglob("*"))
    }


def phase_statuses(report) -> dict[str, OutcomeStatus]:
    return {phase.name: phase.status for phase in report.phases}


@pytest.fixture
def environment(settings, bin_dir, make_stub):
    """A machine where the tool and everything around it is installed."""
    make_stub(settings.install_path)
    make_stub(settings.target.candidates[3])
    for name in ("apt-get", "nasm", "ld", "cargo", "mandb"):
        make_stub(bin_dir / name)

    settings.directories[0].joinpath("bin").mkdir(parents=True)
    settings.directories[1].mkdir()
    tmp = settings.home.parent / "root" / "tmp"
    tmp.mkdir(parents=True)
    (tmp / "ruscompile-build").mkdir()
    (tmp / "ruscompile.log").write_text("log\n")
    (tmp / "other.log").write_text("keep\n")

    bashrc = settings.home / ".bashrc"
    bashrc.write_text("# bashrc\n" + PATH_LINE + ALIAS_LINE + "alias ll='ls -l'\n")
    zshrc = settings.home / ".zshrc"
    zshrc.write_text("function rcc() { ruscompile \"$@\"; }\nexport EDITOR=vi\n")

    project = settings.project_dir
    (project / "Cargo.toml").write_text("[package]\nname = \"ruscompile\"\n")
    (project / "Cargo.lock").write_text("# lock\n")
    (project / "main.o").write_text("obj")
    (project / "src").mkdir()
    (project / "src" / "main.rs").write_text("fn main() {}\n")
    (project / "target" / "release").mkdir(parents=True)
    (project / "examples" / "nested").mkdir(parents=True)
    (project / "examples" / "hello.rs").write_text("func main() {}\n")
    (project / "examples" / "hello.s").write_text("asm")
    (project / "examples" / "nested" / "deep.out").write_text("bin")

    for entry in (*settings.menu_entries, *settings.man_pages):
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.write_text("entry\n")
    return settings


@pytest.fixture
def teardown_runner(make_runner, bin_dir, settings):
    """Runner whose package and cargo commands really change the stubs."""
    probes = {"nasm": "nasm", "binutils": "ld"}

    def hook(argv):
        if argv[:3] == ["sudo", "apt-get", "remove"]:
            (bin_dir / probes[argv[-1]]).unlink()
        elif argv[1:] == ["clean"]:
            shutil.rmtree(settings.project_dir / "target")

    return make_runner(hook=hook)


STRICT_YES = ["SIM", "CONFIRMO"]


class TestSimpleUninstall:
    """Tests for the executable-only flow."""

    def test_confirmed_removes_executable(
        self, make_orchestrator, settings, make_stub
    ):
        """Test that confirming removes the executable and verifies absence."""
        make_stub(settings.install_path)
        rc_file = settings.home / ".bashrc"
        rc_file.write_text(PATH_LINE)

        report = make_orchestrator(answers=["y"]).run(simple_uninstall_flow())

        assert report.state is RunState.VERIFIED
        assert not settings.install_path.exists()
        assert rc_file.read_text() == PATH_LINE

    def test_uppercase_yes_confirms(self, make_orchestrator, settings, make_stub):
        make_stub(settings.install_path)

        report = make_orchestrator(answers=["Y"]).run(simple_uninstall_flow())

        assert report.state is RunState.VERIFIED

    def test_refusal_changes_nothing(self, make_orchestrator, settings, make_stub):
        """Test that anything but y leaves the executable in place."""
        make_stub(settings.install_path)

        report = make_orchestrator(answers=["yes"]).run(simple_uninstall_flow())

        assert report.state is RunState.CANCELLED
        assert settings.install_path.exists()

    def test_removes_every_candidate(self, make_orchestrator, settings, make_stub):
        for candidate in settings.target.candidates:
            make_stub(candidate)

        report = make_orchestrator(answers=["y"]).run(simple_uninstall_flow())

        assert settings.target.existing() == []
        assert len(report.phases[0].outcomes) == len(settings.target.candidates)

    def test_home_with_glob_characters(self, make_orchestrator, tmp_path, make_stub):
        """Test that a per-user executable under a home like user[1] is removed."""
        home = tmp_path / "user[1]"
        home.mkdir()
        settings = Settings.build(
            home=home, project_dir=tmp_path / "project", root=tmp_path / "root"
        )
        executable = make_stub(settings.target.candidates[3])

        report = make_orchestrator(answers=["y"], settings=settings).run(
            simple_uninstall_flow()
        )

        assert report.phases[0].status is OutcomeStatus.SUCCESS
        assert not executable.exists()

    def test_copy_outside_candidates_fails_verification(
        self, make_orchestrator, settings, bin_dir, make_stub
    ):
        """Test that a copy elsewhere on PATH makes the run fail."""
        make_stub(settings.install_path)
        make_stub(bin_dir / "ruscompile")

        report = make_orchestrator(answers=["y"]).run(simple_uninstall_flow())

        assert report.state is RunState.FAILED
        assert report.location == str(bin_dir / "ruscompile")


class TestCompleteUninstall:
    """Tests for the full teardown flow."""

    def test_removes_everything(self, make_orchestrator, environment, teardown_runner):
        """Test a full teardown on a fully provisioned machine."""
        settings = environment
        orchestrator = make_orchestrator(answers=STRICT_YES, runner=teardown_runner)

        report = orchestrator.run(complete_uninstall_flow())

        assert report.state is RunState.VERIFIED
        assert report.failed_phases == []
        assert settings.target.existing() == []
        assert not any(d.exists() for d in settings.directories)

        tmp = settings.home.parent / "root" / "tmp"
        assert sorted(p.name for p in tmp.iterdir()) == ["other.log"]

        bashrc = settings.home / ".bashrc"
        assert bashrc.read_text() == "# bashrc\nalias ll='ls -l'\n"
        assert (settings.home / ".zshrc").read_text() == "export EDITOR=vi\n"
        assert len(list(settings.home.glob(".bashrc.backup.*"))) == 1
        assert len(list(settings.home.glob(".zshrc.backup.*"))) == 1

        project = settings.project_dir
        assert not (project / "target").exists()
        assert not (project / "Cargo.lock").exists()
        assert not (project / "main.o").exists()
        assert not (project / "examples" / "hello.s").exists()
        assert not (project / "examples" / "nested" / "deep.out").exists()
        assert (project / "examples" / "hello.rs").exists()
        assert (project / "src" / "main.rs").exists()
        assert (project / "Cargo.toml").exists()

        assert not any(p.exists() for p in settings.menu_entries)
        assert not any(p.exists() for p in settings.man_pages)
        assert ["sudo", "mandb"] in teardown_runner.calls

    def test_second_run_is_all_skipped(
        self, make_orchestrator, environment, teardown_runner
    ):
        """Test that running the teardown twice changes nothing the second time."""
        first = make_orchestrator(answers=STRICT_YES, runner=teardown_runner)
        first.run(complete_uninstall_flow())
        before = snapshot(environment.home.parent)
        calls_before = len(teardown_runner.calls)

        second = make_orchestrator(answers=STRICT_YES, runner=teardown_runner)
        report = second.run(complete_uninstall_flow())

        assert report.state is RunState.VERIFIED
        assert set(phase_statuses(report).values()) == {OutcomeStatus.SKIPPED}
        assert snapshot(environment.home.parent) == before
        assert len(teardown_runner.calls) == calls_before

    def test_without_markers_leaves_rc_files_alone(
        self, make_orchestrator, settings, teardown_runner
    ):
        """Test that rc files without tool lines are neither edited nor backed up."""
        bashrc = settings.home / ".bashrc"
        bashrc.write_text("alias ll='ls -l'\n")

        report = make_orchestrator(
            answers=STRICT_YES, runner=teardown_runner
        ).run(complete_uninstall_flow())

        statuses = phase_statuses(report)
        assert statuses["clean_path"] is OutcomeStatus.SKIPPED
        assert statuses["clean_aliases"] is OutcomeStatus.SKIPPED
        assert bashrc.read_text() == "alias ll='ls -l'\n"
        assert list(settings.home.glob("*.backup.*")) == []

    def test_missing_package_manager_does_not_stop_teardown(
        self, make_orchestrator, environment, teardown_runner, bin_dir, capsys
    ):
        """Test that dependency failures are reported and later phases still run."""
        (bin_dir / "apt-get").unlink()

        report = make_orchestrator(
            answers=STRICT_YES, runner=teardown_runner
        ).run(complete_uninstall_flow())

        statuses = phase_statuses(report)
        assert statuses["remove_dependencies"] is OutcomeStatus.FAILED
        assert statuses["remove_project_files"] is OutcomeStatus.SUCCESS
        assert statuses["clean_system_config"] is OutcomeStatus.SUCCESS
        assert report.state is RunState.VERIFIED
        assert (bin_dir / "nasm").exists()
        assert "handle nasm manually" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "answers",
        [
            ["sim", "CONFIRMO"],
            ["SIM", "confirmo"],
            ["SIM ", "CONFIRMO"],
            ["y", "y"],
            ["", ""],
        ],
    )
    def test_inexact_answers_cancel_without_changes(
        self, make_orchestrator, environment, teardown_runner, answers
    ):
        """Test that only the exact two-step answers start the teardown."""
        before = snapshot(environment.home.parent)

        report = make_orchestrator(answers=answers, runner=teardown_runner).run(
            complete_uninstall_flow()
        )

        assert report.state is RunState.CANCELLED
        assert report.phases == []
        assert teardown_runner.calls == []
        assert snapshot(environment.home.parent) == before

    def test_lists_what_will_be_removed(
        self, make_orchestrator, environment, teardown_runner, capsys
    ):
        make_orchestrator(answers=["no"], runner=teardown_runner).run(
            complete_uninstall_flow()
        )

        out = capsys.readouterr().out
        for item in COMPLETE_REMOVED:
            assert item in out

    def test_outside_checkout_keeps_project_files(
        self, make_orchestrator, settings, teardown_runner
    ):
        """Test that generated-file patterns only apply inside a checkout."""
        stray = settings.project_dir / "notes.s"
        stray.write_text("not ours")

        report = make_orchestrator(
            answers=STRICT_YES, runner=teardown_runner
        ).run(complete_uninstall_flow())

        assert stray.exists()
        assert phase_statuses(report)["remove_project_files"] is OutcomeStatus.SKIPPED

    def test_mandb_only_after_removing_a_man_page(
        self, make_orchestrator, settings, teardown_runner, bin_dir, make_stub
    ):
        make_stub(bin_dir / "mandb")
        settings.menu_entries[0].parent.mkdir(parents=True)
        settings.menu_entries[0].write_text("entry\n")

        make_orchestrator(answers=STRICT_YES, runner=teardown_runner).run(
            complete_uninstall_flow()
        )

        assert ["sudo", "mandb"] not in teardown_runner.calls
        assert not settings.menu_entries[0].exists()

    def test_failed_build_clean_is_reported(
        self, make_orchestrator, environment, make_runner, bin_dir
    ):
        """Test that a failing cargo clean leaves a FAILED outcome, not a crash."""
        runner = make_runner(fail=((str(bin_dir / "cargo"), "clean"),))

        report = make_orchestrator(answers=STRICT_YES, runner=runner).run(
            complete_uninstall_flow()
        )

        assert phase_statuses(report)["clean_cache"] is OutcomeStatus.FAILED
        # remove_project_files still deletes target/ afterwards
        assert not (environment.project_dir / "target").exists()
