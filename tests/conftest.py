"""Shared test fixtures."""

import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from rcsetup.config import Settings
from rcsetup.operations import Orchestrator


class FakeRunner:
    """Record commands instead of running them.

    Commands starting with any prefix in ``fail`` raise CalledProcessError.
    ``<cmd> --version`` prints ``<basename> 0.1.0``. ``hook`` is called with
    every successful argv so tests can simulate side effects.
    """

    def __init__(
        self,
        fail: tuple[tuple[str, ...], ...] = (),
        hook: Callable[[list[str]], None] | None = None,
    ):
        self.calls: list[list[str]] = []
        self.cwds: list[Path | None] = []
        self.fail = [list(prefix) for prefix in fail]
        self.hook = hook

    def __call__(self, argv, cwd=None, capture=False):
        argv = [str(arg) for arg in argv]
        self.calls.append(argv)
        self.cwds.append(cwd)
        if any(argv[: len(prefix)] == prefix for prefix in self.fail):
            raise subprocess.CalledProcessError(1, argv)
        if self.hook is not None:
            self.hook(argv)
        stdout = ""
        if argv[-1] == "--version":
            stdout = f"{Path(argv[0]).name} 0.1.0\n"
        return subprocess.CompletedProcess(argv, 0, stdout=stdout, stderr="")


def make_executable(path: Path) -> Path:
    """Create an executable stub at path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings rooted entirely inside tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    return Settings.build(home=home, project_dir=project_dir, root=tmp_path / "root")


@pytest.fixture
def bin_dir(tmp_path) -> Path:
    """Directory for stub commands (package managers, cargo, ...)."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def which(settings, bin_dir) -> Callable[[str], str | None]:
    """PATH lookup over bin_dir plus every candidate executable directory."""
    search_dirs = [bin_dir, *(p.parent for p in settings.target.candidates)]
    search_path = os.pathsep.join(str(d) for d in search_dirs)

    def _which(name: str) -> str | None:
        return shutil.which(name, path=search_path)

    return _which


@pytest.fixture
def make_stub() -> Callable[[Path], Path]:
    return make_executable


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture
def make_orchestrator(settings, which, runner) -> Callable[..., Orchestrator]:
    """Build an orchestrator whose gate reads from a list of answers."""

    def _make(answers=(), runner=runner, settings=settings) -> Orchestrator:
        pending = list(answers)

        def ask(text: str) -> str:
            return pending.pop(0) if pending else ""

        return Orchestrator.create(settings, which=which, runner=runner, ask=ask)

    return _make
