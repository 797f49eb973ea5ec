"""Output formatting for rcsetup flows."""

from collections.abc import Sequence
from pathlib import Path

import typer

from rcsetup.config import PALETTE
from rcsetup.models import ActionOutcome
from rcsetup.models import OutcomeStatus
from rcsetup.models import RunReport
from rcsetup.models import RunState

_STATUS_LABELS = {
    OutcomeStatus.SUCCESS: ("✓", PALETTE.success),
    OutcomeStatus.SKIPPED: ("-", PALETTE.muted),
    OutcomeStatus.FAILED: ("✗", PALETTE.error),
}


def print_banner(title: str) -> None:
    """Print a boxed flow title."""
    rule = "=" * 42
    typer.echo(rule)
    typer.secho(f"    {title}", bold=True)
    typer.echo(rule)
    typer.echo()


def print_info(message: str) -> None:
    typer.secho("[INFO] ", fg=PALETTE.info, nl=False)
    typer.echo(message)


def print_success(message: str) -> None:
    typer.secho("[SUCCESS] ", fg=PALETTE.success, nl=False)
    typer.echo(message)


def print_warning(message: str) -> None:
    typer.secho("[WARNING] ", fg=PALETTE.warning, nl=False)
    typer.echo(message)


def print_error(message: str) -> None:
    typer.secho("[ERROR] ", fg=PALETTE.error, bold=True, nl=False, err=True)
    typer.echo(message, err=True)


def print_phase(name: str) -> None:
    """Print the header line for a phase."""
    typer.secho(f"→ {name.replace('_', ' ')}", fg=PALETTE.info, bold=True)


def print_outcome(outcome: ActionOutcome) -> None:
    """Print a single action outcome, indented under its phase."""
    symbol, color = _STATUS_LABELS[outcome.status]
    typer.secho(f"  {symbol} {outcome.message}", fg=color)
    if outcome.backup is not None:
        typer.secho(
            f"    backup: {display_path(outcome.backup.backup_path)}",
            fg=PALETTE.muted,
        )


def print_teardown_warning(items: Sequence[str]) -> None:
    """Print what a complete uninstall is about to destroy."""
    typer.secho(
        "⚠️  CRITICAL: this will COMPLETELY remove the tool from this system.",
        fg=PALETTE.error,
        bold=True,
    )
    typer.echo("This includes:")
    for item in items:
        typer.echo(f"  • {item}")
    typer.echo()
    typer.secho("⚠️  This action is IRREVERSIBLE!", fg=PALETTE.error, bold=True)
    typer.echo()


def print_last_chance() -> None:
    typer.secho(
        "⚠️  LAST CHANCE: everything listed above will be lost!",
        fg=PALETTE.error,
        bold=True,
    )


def print_cancelled() -> None:
    print_info("Cancelled by user. Nothing was changed.")


def print_not_installed(tool_name: str) -> None:
    """Explain that a simple uninstall has nothing to do."""
    print_warning(f"{tool_name} does not appear to be installed.")
    typer.echo()
    typer.echo("This command only removes the compiler executable.")
    typer.echo("For a complete removal, run: rcsetup uninstall-all")


def print_uninstall_summary(
    report: RunReport, tool_name: str, removed: Sequence[str]
) -> None:
    """Print the result of an uninstall run.

    Args:
        report: Finished run report
        tool_name: Name of the managed executable
        removed: Human-readable list of what the flow removes
    """
    _print_phase_totals(report)
    if report.state is RunState.VERIFIED:
        print_success(f"✅ {tool_name} was uninstalled successfully!")
        typer.echo()
        typer.echo("What was removed:")
        for item in removed:
            typer.echo(f"  • {item}")
        typer.echo()
        typer.echo("To reinstall, run:")
        typer.echo("  rcsetup install")
    else:
        print_error(
            f"❌ Uninstall failed. {tool_name} is still available "
            f"at {report.location}."
        )
        print_error("Check the messages above and run the command again.")


def print_install_summary(report: RunReport, tool_name: str) -> None:
    """Print the result of an install run, with usage hints on success."""
    _print_phase_totals(report)
    if report.state is RunState.VERIFIED:
        print_success(f"{tool_name} installed successfully!")
        typer.echo()
        typer.echo("Available commands:")
        typer.echo(f"  {tool_name} --help                 - Show help")
        typer.echo(f"  {tool_name} file.rs                - Compile a file")
        typer.echo(f"  {tool_name} file.rs -o out.s      - Choose the output file")
        typer.echo(f"  {tool_name} file.rs --tokens       - Show lexical tokens")
        typer.echo(f"  {tool_name} file.rs --ast          - Show the AST")
        typer.echo(f"  {tool_name} file.rs --assembly     - Show assembly")
        typer.echo()
        typer.echo("Example:")
        typer.echo(f"  {tool_name} examples/hello.rs -o hello.s")
        typer.echo("  nasm -f elf64 hello.s -o hello.o")
        typer.echo("  ld hello.o -o hello")
        typer.echo("  ./hello")
        typer.echo()
        print_success(f"Installed version: {report.version}")
    else:
        print_error("Installation failed. Check the messages above.")


def _print_phase_totals(report: RunReport) -> None:
    counts = {status: 0 for status in OutcomeStatus}
    for phase in report.phases:
        counts[phase.status] += 1
    typer.echo()
    typer.secho(
        f"{len(report.phases)} phases: "
        f"{counts[OutcomeStatus.SUCCESS]} done, "
        f"{counts[OutcomeStatus.SKIPPED]} skipped, "
        f"{counts[OutcomeStatus.FAILED]} failed",
        fg=PALETTE.muted,
    )
    for phase in report.failed_phases:
        typer.secho(f"  failed: {phase.name}", fg=PALETTE.warning)


def display_path(path: Path) -> str:
    """Format path for display, using ~ for home directory.

    Args:
        path: Path to format

    Returns:
        String representation with ~ substitution if applicable
    """
    try:
        home = Path.home()
        rel_path = path.relative_to(home)
        return f"~/{rel_path}"
    except ValueError:
        return str(path)
