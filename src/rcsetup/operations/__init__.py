"""High-level operations for rcsetup."""

from rcsetup.operations.install import install_flow
from rcsetup.operations.orchestrator import Flow
from rcsetup.operations.orchestrator import Orchestrator
from rcsetup.operations.orchestrator import Phase
from rcsetup.operations.preconditions import require_non_root
from rcsetup.operations.preconditions import require_project_dir
from rcsetup.operations.uninstall import complete_uninstall_flow
from rcsetup.operations.uninstall import simple_uninstall_flow

__all__ = [
    "Flow",
    "Orchestrator",
    "Phase",
    "complete_uninstall_flow",
    "install_flow",
    "require_non_root",
    "require_project_dir",
    "simple_uninstall_flow",
]
