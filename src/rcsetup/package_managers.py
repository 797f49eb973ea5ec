"""OS package manager detection and dispatch."""

import logging
import subprocess

from rcsetup import commands
from rcsetup.commands import CommandRunner
from rcsetup.commands import Which
from rcsetup.exceptions import PackageManagerNotFoundError
from rcsetup.models import ActionOutcome
from rcsetup.models import Dependency
from rcsetup.models import ManagerKind
from rcsetup.models import PackageAction

_logger = logging.getLogger(__name__)

# Probed in this order; the first one on PATH wins
DETECTION_ORDER = (
    ManagerKind.APT,
    ManagerKind.YUM,
    ManagerKind.DNF,
    ManagerKind.PACMAN,
    ManagerKind.BREW,
)

PACKAGE = "{package}"

CommandTemplates = dict[PackageAction, tuple[tuple[str, ...], ...]]

COMMAND_TEMPLATES: dict[ManagerKind, CommandTemplates] = {
    ManagerKind.APT: {
        PackageAction.INSTALL: (
            ("sudo", "apt-get", "update"),
            ("sudo", "apt-get", "install", "-y", PACKAGE),
        ),
        PackageAction.REMOVE: (
            ("sudo", "apt-get", "remove", "-y", PACKAGE),
            ("sudo", "apt-get", "autoremove", "-y"),
        ),
    },
    ManagerKind.YUM: {
        PackageAction.INSTALL: (("sudo", "yum", "install", "-y", PACKAGE),),
        PackageAction.REMOVE: (("sudo", "yum", "remove", "-y", PACKAGE),),
    },
    ManagerKind.DNF: {
        PackageAction.INSTALL: (("sudo", "dnf", "install", "-y", PACKAGE),),
        PackageAction.REMOVE: (("sudo", "dnf", "remove", "-y", PACKAGE),),
    },
    ManagerKind.PACMAN: {
        PackageAction.INSTALL: (("sudo", "pacman", "-S", PACKAGE),),
        PackageAction.REMOVE: (("sudo", "pacman", "-R", PACKAGE),),
    },
    ManagerKind.BREW: {
        PackageAction.INSTALL: (("brew", "install", PACKAGE),),
        PackageAction.REMOVE: (("brew", "uninstall", PACKAGE),),
    },
}


class PackageManagerAdapter:
    """Install and remove dependencies through whichever manager is present.

    The manager is probed once, on first use, and reused for every
    dependency in the run.
    """

    def __init__(
        self,
        which: Which | None = None,
        runner: CommandRunner | None = None,
    ):
        self._which = which or commands.which
        self._run = runner or commands.run_command
        self._detected: ManagerKind | None = None
        self._probed = False

    def detect(self) -> ManagerKind | None:
        """Find the first known package manager on PATH.

        Returns:
            The selected manager, or None if none of the known ones exist
        """
        if not self._probed:
            self._detected = next(
                (kind for kind in DETECTION_ORDER if self._which(kind.value)),
                None,
            )
            self._probed = True
            _logger.debug("Package manager: %s", self._detected)
        return self._detected

    def commands_for(
        self, dependency: Dependency, action: PackageAction
    ) -> list[list[str]]:
        """Build the concrete commands for an action on a dependency.

        Raises:
            PackageManagerNotFoundError: If no known manager is available
        """
        kind = self.detect()
        if kind is None:
            raise PackageManagerNotFoundError(dependency, DETECTION_ORDER)
        package = dependency.package_for(kind)
        return [
            [package if arg == PACKAGE else arg for arg in template]
            for template in COMMAND_TEMPLATES[kind][action]
        ]

    def is_installed(self, dependency: Dependency) -> bool:
        return self._which(dependency.probe) is not None

    def install_or_remove(
        self, dependency: Dependency, action: PackageAction
    ) -> ActionOutcome:
        """Install or remove a dependency.

        Already satisfied requests (installing something present, removing
        something absent) are skipped without touching the package manager.

        Args:
            dependency: Dependency to act on
            action: INSTALL or REMOVE

        Returns:
            SKIPPED if nothing needed doing, SUCCESS if every command ran,
            FAILED if no manager was found or a command failed
        """
        installed = self.is_installed(dependency)
        if action is PackageAction.INSTALL and installed:
            return ActionOutcome.skipped(f"{dependency.name} is already installed")
        if action is PackageAction.REMOVE and not installed:
            return ActionOutcome.skipped(f"{dependency.name} is not installed")

        try:
            argvs = self.commands_for(dependency, action)
        except PackageManagerNotFoundError as e:
            return ActionOutcome.failed(str(e))

        for argv in argvs:
            try:
                self._run(argv)
            except (subprocess.CalledProcessError, OSError) as e:
                return ActionOutcome.failed(
                    f"Could not {action.value} {dependency.name}: "
                    f"{commands.describe_failure(argv, e)}"
                )

        past = "installed" if action is PackageAction.INSTALL else "removed"
        return ActionOutcome.success(f"{dependency.name} {past}")
