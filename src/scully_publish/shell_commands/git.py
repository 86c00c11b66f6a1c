"""Git command abstractions.

This module provides the commands used to turn the generated site into a
single-commit repository and force-push it to the deploy branch.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class GitCommands:
    """Git-related shell commands.

    Provides operations for:
    - Repository initialization
    - Committer identity configuration
    - Staging and committing
    - Force-pushing to a remote branch
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Git commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def init(self, cwd: Path, initial_branch: str | None = None) -> CommandResult:
        """Initialize a fresh repository in ``cwd``.

        Args:
            cwd: Directory to turn into a repository
            initial_branch: Name of the first branch (git's default if None)
        """
        cmd = ["git", "init"]
        if initial_branch:
            cmd.extend(["--initial-branch", initial_branch])
        return self._runner.run_checked(cmd, cwd=cwd)

    def set_identity(self, name: str, email: str, cwd: Path) -> None:
        """Configure the committer name and e-mail for the repository."""
        self._runner.run_checked(["git", "config", "user.name", name], cwd=cwd)
        self._runner.run_checked(["git", "config", "user.email", email], cwd=cwd)

    def add_all(self, cwd: Path) -> CommandResult:
        """Stage every file in the working tree."""
        return self._runner.run_checked(["git", "add", "."], cwd=cwd)

    def commit(self, message: str, cwd: Path) -> CommandResult:
        """Create a commit with the given message."""
        return self._runner.run_checked(["git", "commit", "-m", message], cwd=cwd)

    def force_push(
        self,
        remote_url: str,
        local_branch: str,
        remote_branch: str,
        cwd: Path,
    ) -> CommandResult:
        """Force-push ``local_branch`` to ``remote_branch`` on ``remote_url``.

        Output is captured so the runner can redact credentials embedded in
        the URL before anything is reported.

        Example:
            >>> git.force_push(url, "main", "gh-pages", cwd=site_dir)
        """
        result = self._runner.run_checked(
            ["git", "push", "-f", remote_url, f"{local_branch}:{remote_branch}"],
            cwd=cwd,
            capture_output=True,
        )
        # git reports the push summary on stderr
        summary = self._runner.redact((result.stderr or result.stdout).strip())
        if summary:
            logger.info(summary)
        return result
