"""Post-condition checks deciding whether a run succeeded."""

import logging
import subprocess

from rcsetup import commands
from rcsetup.commands import CommandRunner
from rcsetup.commands import Which
from rcsetup.models import Expectation

_logger = logging.getLogger(__name__)


class InstallationVerifier:
    """Check whether the tool resolves on the command search path."""

    def __init__(
        self,
        tool_name: str,
        which: Which | None = None,
        runner: CommandRunner | None = None,
    ):
        self.tool_name = tool_name
        self._which = which or commands.which
        self._run = runner or commands.run_command

    def locate(self) -> str | None:
        """Get the path the tool resolves to, or None."""
        return self._which(self.tool_name)

    def version(self) -> str | None:
        """Get the first line of ``<tool> --version``, or None if unavailable."""
        location = self.locate()
        if location is None:
            return None
        try:
            result = self._run([location, "--version"], capture=True)
        except (subprocess.CalledProcessError, OSError) as e:
            _logger.debug("Version query failed: %s", e)
            return None
        lines = (result.stdout or "").strip().splitlines()
        return lines[0].strip() if lines else None

    def verify(self, expectation: Expectation) -> bool:
        """Check the post-condition of a run.

        Args:
            expectation: ABSENT after an uninstall, PRESENT after an install

        Returns:
            For ABSENT, True iff the tool no longer resolves. For PRESENT,
            True iff it resolves and reports a version.
        """
        if expectation is Expectation.ABSENT:
            return self.locate() is None
        return self.version() is not None
