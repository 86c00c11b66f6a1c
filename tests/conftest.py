"""Shared fixtures for scully-publish tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from scully_publish.config import GitHubContext, PublishInputs
from scully_publish.publisher import ScullyPublisher
from scully_publish.reporting import ActionReporter
from scully_publish.shared.console import CLIConsole
from scully_publish.shell_commands import ShellCommands
from tests.helpers import TOKEN, FakeRunner, write_package_lock


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a site project with an npm lock file and generated output."""
    write_package_lock(tmp_path)
    (tmp_path / "dist" / "static").mkdir(parents=True)
    (tmp_path / "dist" / "static" / "index.html").write_text("<html></html>")
    return tmp_path


@pytest.fixture
def fake_runner(project: Path) -> FakeRunner:
    """Create a recording runner rooted at the project."""
    return FakeRunner(project)


@pytest.fixture
def commands(project: Path, fake_runner: FakeRunner) -> ShellCommands:
    """Create shell commands backed by the fake runner."""
    return ShellCommands(project, runner=fake_runner)


@pytest.fixture
def output() -> io.StringIO:
    """Capture workflow commands written by the reporter."""
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO, tmp_path: Path) -> ActionReporter:
    """Create a reporter writing outputs to a temporary GITHUB_OUTPUT file."""
    return ActionReporter(
        stream=output,
        environ={"GITHUB_OUTPUT": str(tmp_path / "github_output")},
    )


@pytest.fixture
def cli_console() -> CLIConsole:
    """Create a console that writes to memory."""
    return CLIConsole(Console(file=io.StringIO(), width=200))


@pytest.fixture
def publisher(
    project: Path,
    commands: ShellCommands,
    cli_console: CLIConsole,
    reporter: ActionReporter,
) -> ScullyPublisher:
    """Create a publisher wired to fakes."""
    return ScullyPublisher(
        commands=commands,
        console=cli_console,
        reporter=reporter,
        project_root=project,
    )


@pytest.fixture
def inputs() -> PublishInputs:
    """Default inputs with a token."""
    return PublishInputs(access_token=TOKEN)


@pytest.fixture
def github() -> GitHubContext:
    """Context for a push to a source branch."""
    return GitHubContext(
        ref="refs/heads/develop",
        sha="0123456789abcdef0123456789abcdef01234567",
        actor="octocat",
        repository="octo-org/site",
    )
