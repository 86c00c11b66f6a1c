"""CLI context and dependency container."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import click
import typer

from scully_publish.constants import PublishConstants
from scully_publish.publisher import ScullyPublisher
from scully_publish.reporting import ActionReporter
from scully_publish.shared.console import CLIConsole, console
from scully_publish.shell_commands import ShellCommands


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    project_root: Path
    commands: ShellCommands
    reporter: ActionReporter
    constants: PublishConstants

    def publisher(self) -> ScullyPublisher:
        """Build a publisher wired to this context's dependencies."""
        return ScullyPublisher(
            commands=self.commands,
            console=self.console,
            reporter=self.reporter,
            project_root=self.project_root,
            constants=self.constants,
        )


def build_cli_context(
    project_root: Path | None = None, secrets: Iterable[str] = ()
) -> CLIContext:
    """Build a fresh CLIContext.

    Args:
        project_root: Site project directory (defaults to the working directory)
        secrets: Values to redact from command logs
    """
    root = Path(project_root or Path.cwd()).resolve()

    return CLIContext(
        console=console,
        project_root=root,
        commands=ShellCommands(root, secrets),
        reporter=ActionReporter(),
        constants=PublishConstants(),
    )


def get_cli_context(
    ctx: typer.Context | None = None,
    project_root: Path | None = None,
    secrets: Iterable[str] = (),
) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance.

    The running command's context should be passed as ``ctx``; the click
    lookup only covers callers that do not receive one.
    """
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context(project_root, secrets)
