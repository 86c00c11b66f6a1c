"""Shell command abstractions for building and publishing a site.

This package provides a narrow interface for the external tools used during
a publish. It is organized into specialized modules for each tool:

- package_manager: yarn/npm install and script execution
- git: Git repository operations for the deploy commit and push

Usage:
    from scully_publish.shell_commands import ShellCommands

    commands = ShellCommands(project_root=Path("."), secrets=[token])
    commands.package_manager.install(PackageManager.NPM)
"""

from collections.abc import Iterable
from pathlib import Path

from .git import GitCommands
from .package_manager import PackageManagerCommands
from .runner import CommandRunner
from .types import CommandResult


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        package_manager: yarn/npm commands
        git: Git repository commands

    Example:
        >>> commands = ShellCommands(Path("."))
        >>> commands.git.init(Path("dist/static"))
    """

    def __init__(
        self,
        project_root: Path,
        secrets: Iterable[str] = (),
        *,
        runner: CommandRunner | None = None,
    ) -> None:
        """Initialize the shell commands executor.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
            secrets: Values to redact from command logs and errors
            runner: Optional pre-built runner, used to substitute a fake in tests
        """
        self._project_root = Path(project_root)
        self._runner = runner or CommandRunner(self._project_root, secrets)

        self.package_manager = PackageManagerCommands(self._runner)
        self.git = GitCommands(self._runner)

    @property
    def project_root(self) -> Path:
        """Get the project root path."""
        return self._project_root

    @property
    def runner(self) -> CommandRunner:
        """Get the underlying command runner."""
        return self._runner


__all__ = [
    "ShellCommands",
    "CommandResult",
    "GitCommands",
    "PackageManagerCommands",
    "CommandRunner",
]
