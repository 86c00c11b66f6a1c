"""Node package manager command abstractions.

This module wraps the yarn/npm invocations used to install dependencies and
run package.json scripts.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..decisions import PackageManager, install_arguments
from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class PackageManagerCommands:
    """Package manager shell commands.

    Provides operations for:
    - Locked dependency installation
    - Running package.json scripts with extra arguments
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize package manager commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def install(self, package_manager: PackageManager) -> CommandResult:
        """Install dependencies exactly as pinned by the lock file.

        Runs ``yarn install --frozen-lockfile`` or ``npm ci``.
        """
        return self._runner.run_checked(
            [package_manager.value, *install_arguments(package_manager)]
        )

    def run_script(
        self,
        package_manager: PackageManager,
        script: str,
        args: Sequence[str] = (),
    ) -> CommandResult:
        """Run a package.json script, e.g. ``npm run build -- --prod``."""
        return self._runner.run_checked(
            [package_manager.value, "run", script, *args]
        )
