"""Custom exceptions for rcsetup."""

from collections.abc import Sequence
from pathlib import Path

from rcsetup.models import Dependency
from rcsetup.models import ManagerKind


class RcsetupError(Exception):
    """Base exception for rcsetup."""


class PreconditionError(RcsetupError):
    """A flow cannot start (running as superuser, wrong directory, etc.)."""


class PackageManagerNotFoundError(RcsetupError):
    """None of the known package managers is available."""

    def __init__(self, dependency: Dependency, probed: Sequence[ManagerKind]):
        self.dependency = dependency
        self.probed = probed
        probed_names = ", ".join(kind.value for kind in probed)
        super().__init__(
            f"No supported package manager found (tried {probed_names}); "
            f"handle {dependency.name} manually"
        )


class BackupError(RcsetupError):
    """Backup of a config file could not be completed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Could not back up {path}: {reason}")
