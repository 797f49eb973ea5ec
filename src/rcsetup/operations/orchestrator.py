"""Run a flow's phases in order and decide the outcome."""

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from typing import Self

from rcsetup import commands
from rcsetup import output
from rcsetup.commands import CommandRunner
from rcsetup.commands import Which
from rcsetup.config import Settings
from rcsetup.exceptions import RcsetupError
from rcsetup.files import FileSystemMutator
from rcsetup.files import ShellConfigEditor
from rcsetup.gate import ConfirmationGate
from rcsetup.gate import read_answer
from rcsetup.models import ActionOutcome
from rcsetup.models import Expectation
from rcsetup.models import GateMode
from rcsetup.models import GateResult
from rcsetup.models import PhaseResult
from rcsetup.models import RunReport
from rcsetup.models import RunState
from rcsetup.package_managers import PackageManagerAdapter
from rcsetup.verifier import InstallationVerifier

_logger = logging.getLogger(__name__)

PhaseAction = Callable[["Orchestrator"], list[ActionOutcome]]


@dataclass(frozen=True)
class Phase:
    """A named, best-effort step of a flow."""

    name: str
    action: PhaseAction


@dataclass(frozen=True)
class Flow:
    """Ordered phases plus the gate before them and the check after them."""

    name: str
    phases: tuple[Phase, ...]
    expectation: Expectation
    gate_mode: GateMode | None = None  # None: no confirmation needed
    summary_items: tuple[str, ...] = ()


class Orchestrator:
    """Drive the components through a flow.

    Every phase runs regardless of how earlier phases ended. The verifier's
    post-condition alone decides between VERIFIED and FAILED.
    """

    def __init__(
        self,
        settings: Settings,
        gate: ConfirmationGate,
        packages: PackageManagerAdapter,
        files: FileSystemMutator,
        editor: ShellConfigEditor,
        verifier: InstallationVerifier,
        runner: CommandRunner,
        which: Which,
    ):
        self.settings = settings
        self.gate = gate
        self.packages = packages
        self.files = files
        self.editor = editor
        self.verifier = verifier
        self.run_command = runner
        self.which = which
        self.state = RunState.IDLE

    @classmethod
    def create(
        cls,
        settings: Settings,
        which: Which | None = None,
        runner: CommandRunner | None = None,
        ask: Callable[[str], str] | None = None,
    ) -> Self:
        """Wire up all components for the given settings.

        Args:
            settings: Locations and definitions for this run
            which: PATH lookup (default: shutil.which)
            runner: Command runner (default: subprocess.run wrapper)
            ask: Prompt function for the confirmation gate

        Returns:
            Orchestrator in the IDLE state
        """
        which = which or commands.which
        runner = runner or commands.run_command
        return cls(
            settings=settings,
            gate=ConfirmationGate(ask=ask or read_answer),
            packages=PackageManagerAdapter(which=which, runner=runner),
            files=FileSystemMutator(runner=runner),
            editor=ShellConfigEditor(),
            verifier=InstallationVerifier(
                settings.tool_name, which=which, runner=runner
            ),
            runner=runner,
            which=which,
        )

    def run(self, flow: Flow) -> RunReport:
        """Confirm, execute every phase, then verify.

        Args:
            flow: Flow to run

        Returns:
            RunReport ending in CANCELLED, VERIFIED or FAILED
        """
        self.state = RunState.IDLE
        if flow.gate_mode is not None:
            result = self.gate.confirm(flow.gate_mode, flow.summary_items)
            if result is GateResult.CANCELLED:
                self.state = RunState.CANCELLED
                return RunReport(flow_name=flow.name, state=self.state)
        self.state = RunState.CONFIRMED

        self.state = RunState.EXECUTING
        report = RunReport(flow_name=flow.name, state=self.state)
        for phase in flow.phases:
            report.phases.append(self.run_phase(phase))

        verified = self.verifier.verify(flow.expectation)
        report.location = self.verifier.locate()
        if flow.expectation is Expectation.PRESENT:
            report.version = self.verifier.version()
        self.state = RunState.VERIFIED if verified else RunState.FAILED
        report.state = self.state
        _logger.debug("Flow %s finished: %s", flow.name, self.state.name)
        return report

    def run_phase(self, phase: Phase) -> PhaseResult:
        """Run one phase, recording rather than raising its errors."""
        output.print_phase(phase.name)
        try:
            outcomes = phase.action(self)
        except (RcsetupError, OSError, subprocess.CalledProcessError) as e:
            _logger.debug("Phase %s raised", phase.name, exc_info=True)
            outcomes = [ActionOutcome.failed(f"{phase.name} failed: {e}")]

        for outcome in outcomes:
            output.print_outcome(outcome)
        if not outcomes:
            outcomes = [ActionOutcome.skipped("Nothing to do")]
            output.print_outcome(outcomes[0])
        return PhaseResult(name=phase.name, outcomes=outcomes)
