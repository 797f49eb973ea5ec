"""Static configuration: install locations, rc files, dependencies, colors."""

import glob
from dataclasses import dataclass
from pathlib import Path
from typing import Self

import typer
from platformdirs import user_cache_path
from platformdirs import user_data_path

from rcsetup.models import Dependency
from rcsetup.models import InstallationTarget

TOOL_NAME = "ruscompile"

DEPENDENCIES = (
    Dependency(name="nasm", probe="nasm"),
    Dependency(name="binutils", probe="ld"),  # provides the linker
)

# Build outputs the compiler and assembler leave behind
GENERATED_SUFFIXES = (".s", ".o", ".out", ".exe")

PATH_CONFIG_NAMES = (
    ".bashrc",
    ".bash_profile",
    ".zshrc",
    ".profile",
    ".bash_login",
)
ALIAS_CONFIG_NAMES = (".bashrc", ".bash_profile", ".zshrc", ".bash_login")


@dataclass(frozen=True)
class Palette:
    """Colors for each message level."""

    info: str = typer.colors.BLUE
    success: str = typer.colors.GREEN
    warning: str = typer.colors.YELLOW
    error: str = typer.colors.RED
    muted: str = typer.colors.BRIGHT_BLACK


PALETTE = Palette()


@dataclass(frozen=True)
class Settings:
    """Every location and definition a flow needs, fixed at startup."""

    tool_name: str
    home: Path
    project_dir: Path
    target: InstallationTarget
    install_path: Path
    directories: tuple[Path, ...]
    temp_patterns: tuple[str, ...]
    path_configs: tuple[Path, ...]
    alias_configs: tuple[Path, ...]
    dependencies: tuple[Dependency, ...]
    generated_patterns: tuple[str, ...]  # relative to project_dir
    project_artifacts: tuple[str, ...]  # relative to project_dir
    menu_entries: tuple[Path, ...]
    man_pages: tuple[Path, ...]

    @property
    def release_artifact(self) -> Path:
        return self.project_dir / "target" / "release" / self.tool_name

    @classmethod
    def build(
        cls,
        home: Path,
        project_dir: Path,
        root: Path = Path("/"),
        cache_dir: Path | None = None,
        data_dir: Path | None = None,
        tool_name: str = TOOL_NAME,
    ) -> Self:
        """Build settings for a given home and project directory.

        Args:
            home: User home directory (rc files and per-user paths)
            project_dir: Checkout of the tool's source tree
            root: Prefix for system-wide paths (``/`` outside of tests)
            cache_dir: User cache directory (default: ``home/.cache``)
            data_dir: User data directory (default: ``home/.local/share``)
            tool_name: Executable name

        Returns:
            Settings with every path made absolute
        """
        if cache_dir is None:
            cache_dir = home / ".cache"
        if data_dir is None:
            data_dir = home / ".local" / "share"
        usr = root / "usr"

        return cls(
            tool_name=tool_name,
            home=home,
            project_dir=project_dir,
            target=InstallationTarget(
                candidates=(
                    usr / "local" / "bin" / tool_name,
                    usr / "bin" / tool_name,
                    root / "opt" / tool_name / "bin" / tool_name,
                    home / ".local" / "bin" / tool_name,
                )
            ),
            install_path=usr / "local" / "bin" / tool_name,
            directories=(
                root / "opt" / tool_name,
                home / f".{tool_name}",
                usr / "local" / "share" / tool_name,
                usr / "share" / tool_name,
                usr / "local" / "lib" / tool_name,
                usr / "lib" / tool_name,
            ),
            temp_patterns=tuple(
                f"{glob.escape(str(base))}/{tool_name}*"
                for base in (root / "tmp", root / "var" / "tmp", cache_dir)
            ),
            path_configs=tuple(home / name for name in PATH_CONFIG_NAMES),
            alias_configs=tuple(home / name for name in ALIAS_CONFIG_NAMES),
            dependencies=DEPENDENCIES,
            generated_patterns=tuple(
                f"examples/**/*{suffix}" for suffix in GENERATED_SUFFIXES
            ),
            project_artifacts=(
                "target",
                "Cargo.lock",
                *(f"examples/*{suffix}" for suffix in GENERATED_SUFFIXES),
                *(f"*{suffix}" for suffix in GENERATED_SUFFIXES),
            ),
            menu_entries=(
                usr / "share" / "applications" / f"{tool_name}.desktop",
                data_dir / "applications" / f"{tool_name}.desktop",
            ),
            man_pages=(
                usr / "local" / "share" / "man" / "man1" / f"{tool_name}.1",
                usr / "share" / "man" / "man1" / f"{tool_name}.1",
            ),
        )

    @classmethod
    def load(cls) -> Self:
        """Load settings for the current user and working directory."""
        return cls.build(
            home=Path.home(),
            project_dir=Path.cwd(),
            cache_dir=user_cache_path(),
            data_dir=user_data_path(),
        )
