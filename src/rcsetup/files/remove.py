"""Idempotent removal of files, directories and glob patterns."""

import glob
import logging
import shutil
import subprocess
from pathlib import Path

from rcsetup import commands
from rcsetup.commands import CommandRunner
from rcsetup.models import ActionOutcome

_logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


def is_pattern(target: str | Path) -> bool:
    """Check whether a target is a glob pattern.

    Only strings are patterns. A Path is always literal, even when its name
    contains glob metacharacters.
    """
    return isinstance(target, str) and any(char in _GLOB_CHARS for char in target)


def expand(target: str | Path, root: Path | None = None) -> list[Path]:
    """Resolve a path or glob pattern to the paths that exist right now.

    A pattern that matches nothing expands to an empty list, never to the
    literal pattern text.

    Args:
        target: Literal Path, or str glob pattern (``**`` recurses)
        root: Directory relative targets are resolved against

    Returns:
        Sorted existing paths (broken symlinks included)
    """
    if is_pattern(target):
        if root is None:
            matches = glob.glob(target, recursive=True)
            return sorted(Path(m) for m in matches)
        matches = glob.glob(target, root_dir=root, recursive=True)
        return sorted(root / m for m in matches)

    path = Path(target)
    if root is not None:
        path = root / path
    if path.exists() or path.is_symlink():
        return [path]
    return []


class FileSystemMutator:
    """Delete paths only after confirming they exist.

    Deletion is attempted in-process first. For ``privileged`` targets a
    permission error falls back to ``sudo rm -rf``, which may prompt for a
    password and blocks until it is answered.
    """

    def __init__(self, runner: CommandRunner | None = None):
        self._run = runner or commands.run_command

    def remove_if_exists(
        self,
        target: str | Path,
        root: Path | None = None,
        privileged: bool = False,
    ) -> ActionOutcome:
        """Remove a path, or every match of a glob pattern.

        Args:
            target: Literal path or glob pattern
            root: Directory relative targets are resolved against
            privileged: Retry through sudo when permission is denied

        Returns:
            SKIPPED if nothing exists, SUCCESS if everything matched was
            removed, FAILED if any match could not be removed
        """
        matches = expand(target, root)
        if not matches:
            return ActionOutcome.skipped(f"Not found: {target}")

        removed: list[Path] = []
        errors: list[str] = []
        for path in matches:
            try:
                self._remove(path, privileged)
            except (OSError, subprocess.CalledProcessError) as e:
                _logger.debug("Failed to remove %s: %s", path, e)
                errors.append(f"{path} ({e})")
            else:
                _logger.info("Removed %s", path)
                removed.append(path)

        if errors:
            return ActionOutcome.failed(
                f"Could not remove {', '.join(errors)}",
                path=matches[0],
            )
        if len(removed) == 1:
            return ActionOutcome.success(f"Removed {removed[0]}", path=removed[0])
        listing = ", ".join(str(p) for p in removed)
        return ActionOutcome.success(
            f"Removed {len(removed)} paths matching {target}: {listing}",
            path=removed[0],
        )

    def _remove(self, path: Path, privileged: bool) -> None:
        try:
            _remove_local(path)
        except PermissionError:
            if not privileged:
                raise
            self._run(["sudo", "rm", "-rf", "--", str(path)])


def _remove_local(path: Path) -> None:
    """Remove a file, symlink or directory tree.

    Raises:
        OSError: If removal fails
    """
    # is_dir follows symlinks; a symlink to a directory is unlinked, not walked
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)
