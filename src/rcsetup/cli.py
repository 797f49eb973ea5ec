"""Command-line interface for rcsetup."""

import logging
from typing import Annotated

import typer

from rcsetup import __version__
from rcsetup import output
from rcsetup.config import Settings
from rcsetup.exceptions import PreconditionError
from rcsetup.exceptions import RcsetupError
from rcsetup.models import RunReport
from rcsetup.models import RunState
from rcsetup.operations import Orchestrator
from rcsetup.operations import complete_uninstall_flow
from rcsetup.operations import install_flow
from rcsetup.operations import require_non_root
from rcsetup.operations import require_project_dir
from rcsetup.operations import simple_uninstall_flow

app = typer.Typer(help="Install and uninstall the ruscompile toolchain")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rcsetup {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version"
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show diagnostic logging")
    ] = False,
) -> None:
    """Install and uninstall the ruscompile toolchain."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def load_orchestrator() -> Orchestrator:
    """Build an orchestrator for the current user and directory."""
    return Orchestrator.create(Settings.load())


def _exit_for(report: RunReport) -> None:
    if report.state is RunState.FAILED:
        raise typer.Exit(1)


@app.command()
def install() -> None:
    """Install dependencies, build the compiler and place it on PATH."""
    try:
        orchestrator = load_orchestrator()
        require_project_dir(orchestrator.settings.project_dir)
        output.print_banner("RUSCOMPILE INSTALLER")
        report = orchestrator.run(install_flow())
    except PreconditionError as e:
        output.print_error(str(e))
        raise typer.Exit(1) from None
    except RcsetupError as e:
        output.print_error(f"Error: {e}")
        raise typer.Exit(1) from None

    output.print_install_summary(report, orchestrator.settings.tool_name)
    _exit_for(report)


@app.command()
def uninstall() -> None:
    """Remove the compiler executable only."""
    try:
        require_non_root("uninstall")
        orchestrator = load_orchestrator()
        output.print_banner("RUSCOMPILE UNINSTALLER (SIMPLE)")

        location = orchestrator.verifier.locate()
        if location is None:
            output.print_not_installed(orchestrator.settings.tool_name)
            raise typer.Exit(0)
        output.print_info(f"Found {orchestrator.settings.tool_name}: {location}")

        flow = simple_uninstall_flow()
        report = orchestrator.run(flow)
    except PreconditionError as e:
        output.print_error(str(e))
        raise typer.Exit(1) from None
    except RcsetupError as e:
        output.print_error(f"Error: {e}")
        raise typer.Exit(1) from None

    if report.state is RunState.CANCELLED:
        output.print_cancelled()
        return
    output.print_uninstall_summary(
        report, orchestrator.settings.tool_name, flow.summary_items
    )
    _exit_for(report)


@app.command("uninstall-all")
def uninstall_all() -> None:
    """Remove the compiler, its files, shell config entries and dependencies."""
    try:
        require_non_root("uninstall-all")
        orchestrator = load_orchestrator()
        output.print_banner("RUSCOMPILE UNINSTALLER (COMPLETE)")

        flow = complete_uninstall_flow()
        report = orchestrator.run(flow)
    except PreconditionError as e:
        output.print_error(str(e))
        raise typer.Exit(1) from None
    except RcsetupError as e:
        output.print_error(f"Error: {e}")
        raise typer.Exit(1) from None

    if report.state is RunState.CANCELLED:
        output.print_cancelled()
        return
    output.print_uninstall_summary(
        report, orchestrator.settings.tool_name, flow.summary_items
    )
    _exit_for(report)


def main() -> None:
    """Main entry point for the rcsetup CLI."""
    app()


if __name__ == "__main__":
    main()
