"""Install flow: toolchain, dependencies, build, placement and smoke test."""

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path

from rcsetup import commands
from rcsetup.models import ActionOutcome
from rcsetup.models import Expectation
from rcsetup.models import OutcomeStatus
from rcsetup.models import PackageAction
from rcsetup.operations.orchestrator import Flow
from rcsetup.operations.orchestrator import Orchestrator
from rcsetup.operations.orchestrator import Phase

_logger = logging.getLogger(__name__)

RUSTUP_BOOTSTRAP = (
    "curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh -s -- -y"
)

HELLO_EXAMPLE = """\
func main() -> int {
    println("Hello, World!");
    return 0;
}
"""


def _run(
    ctx: Orchestrator,
    argv: Sequence[str],
    done: str,
    cwd: Path | None = None,
) -> ActionOutcome:
    """Run a command and turn its exit into an outcome."""
    try:
        ctx.run_command(list(argv), cwd=cwd)
    except (subprocess.CalledProcessError, OSError) as e:
        return ActionOutcome.failed(commands.describe_failure(argv, e))
    return ActionOutcome.success(done)


def _first_line(ctx: Orchestrator, argv: Sequence[str]) -> str | None:
    try:
        result = ctx.run_command(list(argv), capture=True)
    except (subprocess.CalledProcessError, OSError):
        return None
    lines = (result.stdout or "").strip().splitlines()
    return lines[0] if lines else None


def _prepend_to_path(directory: Path) -> None:
    """Make a freshly installed toolchain visible to later phases."""
    current = os.environ.get("PATH", "")
    if str(directory) not in current.split(os.pathsep):
        os.environ["PATH"] = f"{directory}{os.pathsep}{current}"


def ensure_rust(ctx: Orchestrator) -> list[ActionOutcome]:
    """Bootstrap Rust through rustup when rustc is missing."""
    rustc = ctx.which("rustc")
    if rustc is not None:
        version = _first_line(ctx, [rustc, "--version"]) or rustc
        return [ActionOutcome.skipped(f"Rust is already installed: {version}")]

    outcome = _run(ctx, ["sh", "-c", RUSTUP_BOOTSTRAP], "Rust installed via rustup")
    if outcome.status is not OutcomeStatus.FAILED:
        _prepend_to_path(ctx.settings.home / ".cargo" / "bin")
    return [outcome]


def install_dependencies(ctx: Orchestrator) -> list[ActionOutcome]:
    return [
        ctx.packages.install_or_remove(dependency, PackageAction.INSTALL)
        for dependency in ctx.settings.dependencies
    ]


def update_rust(ctx: Orchestrator) -> list[ActionOutcome]:
    rustup = ctx.which("rustup")
    if rustup is None:
        return [ActionOutcome.skipped("rustup not found; toolchain not updated")]
    return [_run(ctx, [rustup, "update"], "Rust toolchain updated")]


def build_release(ctx: Orchestrator) -> list[ActionOutcome]:
    return [
        _run(
            ctx,
            ["cargo", "build", "--release"],
            "Release build finished",
            cwd=ctx.settings.project_dir,
        )
    ]


def run_tests(ctx: Orchestrator) -> list[ActionOutcome]:
    return [
        _run(ctx, ["cargo", "test"], "Test suite passed", cwd=ctx.settings.project_dir)
    ]


def place_executable(ctx: Orchestrator) -> list[ActionOutcome]:
    """Copy the release binary into the install location."""
    artifact = ctx.settings.release_artifact
    destination = ctx.settings.install_path
    if not artifact.is_file():
        return [ActionOutcome.failed(f"Build artifact not found: {artifact}", artifact)]

    copied = _run(
        ctx,
        ["sudo", "cp", str(artifact), str(destination)],
        f"Copied {artifact.name} to {destination}",
    )
    if copied.status is OutcomeStatus.FAILED:
        return [copied]
    return [
        copied,
        _run(
            ctx,
            ["sudo", "chmod", "+x", str(destination)],
            f"Marked {destination} executable",
        ),
    ]


def smoke_test(ctx: Orchestrator) -> list[ActionOutcome]:
    """Compile the hello example with the installed compiler."""
    outcomes = []
    tool = ctx.which(ctx.settings.tool_name)
    if tool is None:
        return [ActionOutcome.failed(f"{ctx.settings.tool_name} is not on PATH")]

    examples = ctx.settings.project_dir / "examples"
    source = examples / "hello.rs"
    if not source.is_file():
        examples.mkdir(parents=True, exist_ok=True)
        source.write_text(HELLO_EXAMPLE)
        _logger.info("Created %s", source)
        outcomes.append(ActionOutcome.success(f"Created example {source}", source))

    outcomes.append(
        _run(
            ctx,
            [tool, str(source), "-o", str(examples / "hello.s")],
            f"Compiled {source.name}",
        )
    )
    return outcomes


def install_flow() -> Flow:
    """Provision the toolchain, build the compiler and put it on PATH."""
    return Flow(
        name="install",
        phases=(
            Phase("ensure_rust", ensure_rust),
            Phase("install_dependencies", install_dependencies),
            Phase("update_rust", update_rust),
            Phase("build_release", build_release),
            Phase("run_tests", run_tests),
            Phase("place_executable", place_executable),
            Phase("smoke_test", smoke_test),
        ),
        expectation=Expectation.PRESENT,
    )
