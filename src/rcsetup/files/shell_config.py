"""Backup-then-edit removal of tool references from shell rc files."""

import logging
import os
import re
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from rcsetup.exceptions import BackupError
from rcsetup.models import ActionOutcome
from rcsetup.models import BackupRecord
from rcsetup.models import ShellConfigFile

_logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(frozen=True)
class MarkerPredicate:
    """Identifies tool-related lines in an rc file."""

    pattern: re.Pattern[str]
    description: str

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


def substring_marker(tool_name: str) -> MarkerPredicate:
    """Match any line mentioning the tool (PATH exports, sources, etc.)."""
    return MarkerPredicate(re.compile(re.escape(tool_name)), "PATH entries")


def alias_marker(tool_name: str) -> MarkerPredicate:
    """Match alias and function declarations that reference the tool."""
    escaped = re.escape(tool_name)
    return MarkerPredicate(
        re.compile(rf"alias.*{escaped}|function.*{escaped}"),
        "aliases and functions",
    )


def backup_path_for(path: Path, now: datetime) -> Path:
    """Pick an unused ``<path>.backup.<timestamp>`` name.

    Args:
        path: File being backed up
        now: Backup time

    Returns:
        Backup path; a ``_<n>`` counter is appended if the timestamped name
        is already taken
    """
    base = f"{path.name}.backup.{now.strftime(BACKUP_TIMESTAMP_FORMAT)}"
    candidate = path.with_name(base)
    counter = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = path.with_name(f"{base}_{counter}")
        counter += 1
    return candidate


def _fsync_file(path: Path) -> None:
    with path.open("rb") as f:
        os.fsync(f.fileno())


def _fsync_directory(path: Path) -> None:
    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError:
        return  # Not supported on every platform
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class ShellConfigEditor:
    """Strip marked lines from rc files, always keeping a backup first."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock

    def find_marked_lines(
        self, config: ShellConfigFile, marker: MarkerPredicate
    ) -> list[str]:
        """Get the lines of a config file that the marker selects."""
        if not config.exists:
            return []
        lines = [_decode(line) for line in _split_lines(config.path.read_bytes())]
        return [line for line in lines if marker.matches(line)]

    def backup(self, path: Path) -> BackupRecord:
        """Copy a file verbatim beside itself and flush it to disk.

        Raises:
            BackupError: If the copy cannot be written or does not match
        """
        now = self._clock()
        backup_path = backup_path_for(path, now)
        try:
            shutil.copy2(path, backup_path)
            _fsync_file(backup_path)
            _fsync_directory(backup_path.parent)
            if backup_path.read_bytes() != path.read_bytes():
                raise BackupError(path, "backup content differs from original")
        except OSError as e:
            raise BackupError(path, str(e)) from e

        _logger.info("Backed up %s to %s", path, backup_path)
        return BackupRecord(
            original_path=path, backup_path=backup_path, created_at=now
        )

    def strip_marked_lines(
        self, config: ShellConfigFile, marker: MarkerPredicate
    ) -> ActionOutcome:
        """Remove every line the marker selects from a config file.

        The file is backed up before anything is written. The edited content
        goes to a temporary file in the same directory which then atomically
        replaces the original; unmatched lines keep their order and bytes.

        Args:
            config: rc file to edit
            marker: Which lines to remove

        Returns:
            SKIPPED if the file is missing or has no marked lines, SUCCESS
            (carrying the BackupRecord) once edited, FAILED if the backup
            or the rewrite could not be completed
        """
        if not config.exists:
            return ActionOutcome.skipped(
                f"{config.path} does not exist", config.path
            )

        try:
            marked = self.find_marked_lines(config, marker)
            if not marked:
                return ActionOutcome.skipped(
                    f"No {marker.description} in {config.path}", config.path
                )
            lines = _split_lines(config.path.read_bytes())
        except OSError as e:
            return ActionOutcome.failed(
                f"Could not read {config.path}: {e}", config.path
            )

        for line in marked:
            _logger.debug("Removing from %s: %s", config.path, line.rstrip())
        kept = [line for line in lines if not marker.matches(_decode(line))]

        try:
            record = self.backup(config.path)
        except BackupError as e:
            return ActionOutcome.failed(f"{e}; file left unchanged", config.path)

        try:
            _atomic_write(config.path, b"".join(kept))
        except OSError as e:
            return ActionOutcome.failed(
                f"Could not rewrite {config.path}: {e} "
                f"(backup at {record.backup_path})",
                config.path,
            )

        removed = len(lines) - len(kept)
        _logger.info("Removed %d line(s) from %s", removed, config.path)
        return ActionOutcome.success(
            f"Removed {removed} line{'s' if removed != 1 else ''} of "
            f"{marker.description} from {config.path}",
            config.path,
            backup=record,
        )


def _split_lines(data: bytes) -> list[bytes]:
    return data.splitlines(keepends=True)


def _decode(line: bytes) -> str:
    return line.decode("utf-8", errors="surrogateescape")


def _atomic_write(path: Path, data: bytes) -> None:
    """Replace a file's content via a sibling temp file and rename.

    Symlinked rc files (e.g. managed dotfiles) are edited at their target so
    the link itself survives.
    """
    real_path = path.resolve()
    temp_path = real_path.with_name(f".{real_path.name}.rcsetup.tmp")
    try:
        with temp_path.open("wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        shutil.copymode(real_path, temp_path)
        temp_path.replace(real_path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
    _fsync_directory(real_path.parent)
