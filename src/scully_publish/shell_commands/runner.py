"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
all specialized command modules. It is the only place in the package that
spawns processes, and the only place that sees secrets in argument lists.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Iterable, Sequence
from pathlib import Path

from loguru import logger

from ..errors import CommandFailedError
from .types import CommandResult

REDACTED = "***"


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Registered secrets are replaced with ``***`` in every log line and
    error message produced by the runner.
    """

    def __init__(self, project_root: Path, secrets: Iterable[str] = ()) -> None:
        """Initialize the command runner.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
            secrets: Values that must never appear in logs or errors
        """
        self.project_root = project_root
        self._secrets: set[str] = {s for s in secrets if s}

    def add_secret(self, value: str) -> None:
        """Register a value to redact from logs and errors."""
        if value:
            self._secrets.add(value)

    def redact(self, text: str) -> str:
        """Replace every registered secret in ``text``."""
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def describe(self, cmd: Sequence[str]) -> str:
        """Render a command line for display, with secrets redacted."""
        return shlex.join(self.redact(arg) for arg in cmd)

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        """Execute a shell command and return structured result.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            capture_output: Whether to capture stdout/stderr. When False the
                           command writes straight to the job log.

        Returns:
            CommandResult with success status, output, and return code

        Raises:
            CommandFailedError: If the executable cannot be started
        """
        workdir = cwd or self.project_root
        logger.info(f"[command]{self.describe(cmd)}")
        logger.debug(f"Working directory: {workdir}")

        try:
            result = subprocess.run(
                list(cmd),
                cwd=workdir,
                capture_output=capture_output,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CommandFailedError(
                self.describe(cmd),
                127,
                details=self.redact(str(e)),
            ) from e

        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def run_checked(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = False,
    ) -> CommandResult:
        """Execute a command, raising on failure.

        Args:
            cmd: Command and arguments
            cwd: Working directory (defaults to project_root)
            capture_output: Whether to capture stdout/stderr

        Returns:
            CommandResult of the successful command

        Raises:
            CommandFailedError: If the command exits with non-zero code
        """
        result = self.run(cmd, cwd=cwd, capture_output=capture_output)
        if not result.success:
            output = (result.stderr or result.stdout).strip()
            raise CommandFailedError(
                self.describe(cmd),
                result.returncode,
                details=self.redact(output) or None,
            )
        return result
