"""Thin wrappers around process execution and PATH lookup."""

import logging
import shlex
import shutil
import subprocess
from collections.abc import Callable
from collections.abc import Sequence
from pathlib import Path

_logger = logging.getLogger(__name__)

CommandRunner = Callable[..., subprocess.CompletedProcess]
Which = Callable[[str], str | None]


def which(name: str) -> str | None:
    """Resolve a command name on the search path."""
    return shutil.which(name)


def run_command(
    argv: Sequence[str], cwd: Path | None = None, capture: bool = False
) -> subprocess.CompletedProcess:
    """Run a command to completion.

    Blocks without a timeout; privilege prompts (sudo) read from the
    controlling terminal.

    Args:
        argv: Command and arguments
        cwd: Working directory for the command
        capture: If True, capture stdout/stderr instead of inheriting them

    Returns:
        The completed process

    Raises:
        subprocess.CalledProcessError: If the command exits non-zero
        OSError: If the command cannot be started
    """
    _logger.debug("Running: %s", shlex.join(argv))
    return subprocess.run(
        list(argv), cwd=cwd, check=True, text=True, capture_output=capture
    )


def describe_failure(argv: Sequence[str], error: Exception) -> str:
    """Format a command failure for an outcome message."""
    if isinstance(error, subprocess.CalledProcessError):
        return f"`{shlex.join(argv)}` exited with status {error.returncode}"
    return f"`{shlex.join(argv)}` could not run: {error}"
