"""Checks that must pass before a flow starts."""

import os
from pathlib import Path

from rcsetup.exceptions import PreconditionError


def is_superuser() -> bool:
    """Check whether the effective user is root."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def require_non_root(command: str) -> None:
    """Refuse to run an interactive flow as root.

    Args:
        command: Command name, used in the error message

    Raises:
        PreconditionError: If the effective user is root
    """
    if is_superuser():
        raise PreconditionError(
            "This command must not be run as root. "
            f"Run it as a regular user: rcsetup {command}"
        )


def require_project_dir(project_dir: Path) -> Path:
    """Normalize and validate the tool's source checkout.

    Args:
        project_dir: Directory expected to hold Cargo.toml

    Returns:
        Absolute path to the project directory

    Raises:
        PreconditionError: If Cargo.toml is not present
    """
    project_dir = project_dir.resolve()

    if not (project_dir / "Cargo.toml").is_file():
        raise PreconditionError(
            f"Run this from the project root (no Cargo.toml in {project_dir})"
        )

    return project_dir
