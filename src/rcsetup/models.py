"""Data models for rcsetup."""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from enum import Enum
from enum import auto
from pathlib import Path
from typing import Self


class OutcomeStatus(Enum):
    """Result of a single action."""

    SUCCESS = auto()
    SKIPPED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class BackupRecord:
    """A verbatim copy of a config file taken before it was edited."""

    original_path: Path
    backup_path: Path
    created_at: datetime


@dataclass(frozen=True)
class ActionOutcome:
    """Outcome of one action inside a phase."""

    status: OutcomeStatus
    message: str
    path: Path | None = None
    backup: BackupRecord | None = None

    @classmethod
    def success(cls, message: str, path: Path | None = None, **kwargs) -> Self:
        return cls(OutcomeStatus.SUCCESS, message, path, **kwargs)

    @classmethod
    def skipped(cls, message: str, path: Path | None = None) -> Self:
        return cls(OutcomeStatus.SKIPPED, message, path)

    @classmethod
    def failed(cls, message: str, path: Path | None = None) -> Self:
        return cls(OutcomeStatus.FAILED, message, path)


class ManagerKind(str, Enum):
    """Known OS package managers, valued by their probe command."""

    APT = "apt-get"
    YUM = "yum"
    DNF = "dnf"
    PACMAN = "pacman"
    BREW = "brew"


class PackageAction(str, Enum):
    """What to do with a dependency."""

    INSTALL = "install"
    REMOVE = "remove"


@dataclass(frozen=True)
class Dependency:
    """A toolchain dependency provisioned through the OS package manager."""

    name: str  # Human-facing name, also the default package name
    probe: str  # Command whose presence on PATH means "installed"
    packages: Mapping[ManagerKind, str] = field(default_factory=dict)

    def package_for(self, kind: ManagerKind) -> str:
        """Get the package name to pass to the given manager."""
        return self.packages.get(kind, self.name)


@dataclass(frozen=True)
class InstallationTarget:
    """Canonical locations where the executable may live, in priority order."""

    candidates: tuple[Path, ...]

    def existing(self) -> list[Path]:
        """Get candidates currently present on disk (including broken symlinks)."""
        return [p for p in self.candidates if p.exists() or p.is_symlink()]


@dataclass(frozen=True)
class ShellConfigFile:
    """A shell startup file that may reference the tool."""

    path: Path

    @property
    def exists(self) -> bool:
        return self.path.is_file()


class GateMode(Enum):
    """Confirmation style required before destructive work."""

    SIMPLE = auto()  # single y/N prompt
    STRICT = auto()  # typed "SIM" then "CONFIRMO"


class GateResult(Enum):
    CONFIRMED = auto()
    CANCELLED = auto()


class Expectation(Enum):
    """Post-condition checked by the verifier."""

    PRESENT = auto()
    ABSENT = auto()


class RunState(Enum):
    """Orchestrator state machine."""

    IDLE = auto()
    CONFIRMED = auto()
    EXECUTING = auto()
    VERIFIED = auto()
    FAILED = auto()
    CANCELLED = auto()


@dataclass
class PhaseResult:
    """All outcomes produced by one phase."""

    name: str
    outcomes: list[ActionOutcome]

    @property
    def status(self) -> OutcomeStatus:
        """Aggregate status: any failure wins, then any success, else skipped."""
        statuses = {o.status for o in self.outcomes}
        if OutcomeStatus.FAILED in statuses:
            return OutcomeStatus.FAILED
        if OutcomeStatus.SUCCESS in statuses:
            return OutcomeStatus.SUCCESS
        return OutcomeStatus.SKIPPED


@dataclass
class RunReport:
    """Everything a flow did, and how it ended."""

    flow_name: str
    state: RunState
    phases: list[PhaseResult] = field(default_factory=list)
    location: str | None = None  # Where the tool resolves after the run
    version: str | None = None

    @property
    def failed_phases(self) -> list[PhaseResult]:
        return [p for p in self.phases if p.status is OutcomeStatus.FAILED]
