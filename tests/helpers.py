"""Test helpers shared across test modules."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from scully_publish.shell_commands import CommandResult, CommandRunner

TOKEN = "ghp_secret-token"


class FakeRunner(CommandRunner):
    """Command runner that records commands instead of spawning them.

    Commands whose leading arguments match a key in ``results`` return the
    mapped result; everything else succeeds.
    """

    def __init__(
        self,
        project_root: Path,
        results: dict[tuple[str, ...], CommandResult] | None = None,
    ) -> None:
        super().__init__(project_root)
        self.calls: list[tuple[list[str], Path]] = []
        self.results = results or {}

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        command = list(cmd)
        self.calls.append((command, cwd or self.project_root))
        for prefix, result in self.results.items():
            if tuple(command[: len(prefix)]) == prefix:
                return result
        return CommandResult(success=True)

    def fail(self, *prefix: str, stderr: str = "", returncode: int = 1) -> None:
        """Make commands starting with ``prefix`` fail."""
        self.results[prefix] = CommandResult(
            success=False, stderr=stderr, returncode=returncode
        )

    @property
    def commands(self) -> list[list[str]]:
        """Get every recorded command line."""
        return [command for command, _ in self.calls]


def write_package_lock(root: Path, version: str = "0.0.80") -> Path:
    """Write a lockfile v1 package-lock.json listing Scully."""
    path = root / "package-lock.json"
    path.write_text(
        json.dumps(
            {
                "name": "site",
                "lockfileVersion": 1,
                "dependencies": {
                    "@scullyio/scully": {"version": version},
                    "@angular/core": {"version": "10.0.0"},
                },
            }
        )
    )
    return path


def write_yarn_lock(root: Path, version: str = "0.0.90") -> Path:
    """Write a classic yarn.lock listing Scully."""
    path = root / "yarn.lock"
    path.write_text(
        "# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.\n"
        "# yarn lockfile v1\n"
        "\n"
        "\n"
        '"@angular/core@^10.0.0":\n'
        '  version "10.0.0"\n'
        '  resolved "https://registry.yarnpkg.com/@angular/core/-/core-10.0.0.tgz"\n'
        "\n"
        '"@scullyio/scully@^0.0.85":\n'
        f'  version "{version}"\n'
        '  resolved "https://registry.yarnpkg.com/@scullyio/scully/-/scully.tgz"\n'
    )
    return path

