"""Uninstall flows: executable only, or a complete teardown."""

import subprocess

from rcsetup import commands
from rcsetup.files import alias_marker
from rcsetup.files import substring_marker
from rcsetup.models import ActionOutcome
from rcsetup.models import Expectation
from rcsetup.models import GateMode
from rcsetup.models import OutcomeStatus
from rcsetup.models import PackageAction
from rcsetup.models import ShellConfigFile
from rcsetup.operations.orchestrator import Flow
from rcsetup.operations.orchestrator import Orchestrator
from rcsetup.operations.orchestrator import Phase

SIMPLE_REMOVED = ("Compiler executable",)

COMPLETE_REMOVED = (
    "Compiler executable",
    "Installation directories",
    "Build, cache and temporary files",
    "PATH entries",
    "Aliases and functions",
    "Dependencies (NASM, binutils)",
    "Files generated in the current project",
    "Desktop entries and man pages",
)


def detect_environment(ctx: Orchestrator) -> list[ActionOutcome]:
    """Report where the tool resolves and which package manager is active."""
    kind = ctx.packages.detect()
    manager = kind.value if kind is not None else "none found"
    location = ctx.verifier.locate()
    if location is None:
        return [
            ActionOutcome.skipped(
                f"{ctx.settings.tool_name} not found on PATH "
                f"(package manager: {manager})"
            )
        ]
    return [
        ActionOutcome.success(
            f"Found {ctx.settings.tool_name} at {location} "
            f"(package manager: {manager})"
        )
    ]


def _in_project(ctx: Orchestrator) -> bool:
    return (ctx.settings.project_dir / "Cargo.toml").is_file()


def remove_executable(ctx: Orchestrator) -> list[ActionOutcome]:
    existing = ctx.settings.target.existing()
    if not existing:
        return [ActionOutcome.skipped("No executable found in the standard locations")]
    return [ctx.files.remove_if_exists(path, privileged=True) for path in existing]


def remove_directories(ctx: Orchestrator) -> list[ActionOutcome]:
    return [
        ctx.files.remove_if_exists(directory, privileged=True)
        for directory in ctx.settings.directories
    ]


def clean_cache(ctx: Orchestrator) -> list[ActionOutcome]:
    """Remove build output, generated example files and temporary files."""
    settings = ctx.settings
    outcomes = []
    if _in_project(ctx):
        outcomes.append(_clean_build_dir(ctx))
        outcomes.extend(
            ctx.files.remove_if_exists(pattern, root=settings.project_dir)
            for pattern in settings.generated_patterns
        )
    outcomes.extend(
        ctx.files.remove_if_exists(pattern) for pattern in settings.temp_patterns
    )
    return outcomes


def _clean_build_dir(ctx: Orchestrator) -> ActionOutcome:
    target_dir = ctx.settings.project_dir / "target"
    if not target_dir.is_dir():
        return ActionOutcome.skipped(f"Not found: {target_dir}")

    cargo = ctx.which("cargo")
    if cargo is None:
        return ctx.files.remove_if_exists(target_dir)

    argv = [cargo, "clean"]
    try:
        ctx.run_command(argv, cwd=ctx.settings.project_dir)
    except (subprocess.CalledProcessError, OSError) as e:
        return ActionOutcome.failed(commands.describe_failure(argv, e), target_dir)
    return ActionOutcome.success(f"Cleaned build output in {target_dir}", target_dir)


def clean_path(ctx: Orchestrator) -> list[ActionOutcome]:
    marker = substring_marker(ctx.settings.tool_name)
    return [
        ctx.editor.strip_marked_lines(ShellConfigFile(path), marker)
        for path in ctx.settings.path_configs
    ]


def clean_aliases(ctx: Orchestrator) -> list[ActionOutcome]:
    marker = alias_marker(ctx.settings.tool_name)
    return [
        ctx.editor.strip_marked_lines(ShellConfigFile(path), marker)
        for path in ctx.settings.alias_configs
    ]


def remove_dependencies(ctx: Orchestrator) -> list[ActionOutcome]:
    return [
        ctx.packages.install_or_remove(dependency, PackageAction.REMOVE)
        for dependency in ctx.settings.dependencies
    ]


def remove_project_files(ctx: Orchestrator) -> list[ActionOutcome]:
    """Delete build output and generated files from the project checkout."""
    if not _in_project(ctx):
        return [
            ActionOutcome.skipped(
                f"{ctx.settings.project_dir} is not a project checkout"
            )
        ]
    return [
        ctx.files.remove_if_exists(item, root=ctx.settings.project_dir)
        for item in ctx.settings.project_artifacts
    ]


def clean_system_config(ctx: Orchestrator) -> list[ActionOutcome]:
    """Remove desktop entries and man pages, refreshing the man index if needed."""
    settings = ctx.settings
    outcomes = [
        ctx.files.remove_if_exists(entry, privileged=True)
        for entry in settings.menu_entries
    ]
    man_outcomes = [
        ctx.files.remove_if_exists(page, privileged=True) for page in settings.man_pages
    ]
    outcomes.extend(man_outcomes)

    removed_man_page = any(o.status is OutcomeStatus.SUCCESS for o in man_outcomes)
    if removed_man_page and ctx.which("mandb") is not None:
        argv = ["sudo", "mandb"]
        try:
            ctx.run_command(argv)
        except (subprocess.CalledProcessError, OSError) as e:
            outcomes.append(ActionOutcome.failed(commands.describe_failure(argv, e)))
        else:
            outcomes.append(ActionOutcome.success("Man page index updated"))
    return outcomes


def simple_uninstall_flow() -> Flow:
    """Remove the executable only, after a y/N confirmation."""
    return Flow(
        name="uninstall",
        phases=(Phase("remove_executable", remove_executable),),
        expectation=Expectation.ABSENT,
        gate_mode=GateMode.SIMPLE,
        summary_items=SIMPLE_REMOVED,
    )


def complete_uninstall_flow() -> Flow:
    """Remove everything the tool and its toolchain left on the machine."""
    return Flow(
        name="uninstall-all",
        phases=(
            Phase("detect_environment", detect_environment),
            Phase("remove_executable", remove_executable),
            Phase("remove_directories", remove_directories),
            Phase("clean_cache", clean_cache),
            Phase("clean_path", clean_path),
            Phase("clean_aliases", clean_aliases),
            Phase("remove_dependencies", remove_dependencies),
            Phase("remove_project_files", remove_project_files),
            Phase("clean_system_config", clean_system_config),
        ),
        expectation=Expectation.ABSENT,
        gate_mode=GateMode.STRICT,
        summary_items=COMPLETE_REMOVED,
    )
