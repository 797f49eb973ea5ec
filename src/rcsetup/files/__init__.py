"""Filesystem operations for rcsetup."""

from rcsetup.files.remove import FileSystemMutator
from rcsetup.files.remove import expand
from rcsetup.files.shell_config import MarkerPredicate
from rcsetup.files.shell_config import ShellConfigEditor
from rcsetup.files.shell_config import alias_marker
from rcsetup.files.shell_config import substring_marker

__all__ = [
    "FileSystemMutator",
    "MarkerPredicate",
    "ShellConfigEditor",
    "alias_marker",
    "expand",
    "substring_marker",
]
