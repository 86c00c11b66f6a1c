"""Unit tests for lock file version resolution."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from scully_publish.decisions import PackageManager
from scully_publish.errors import GeneratorVersionNotFoundError, LockfileError
from scully_publish.lockfile import (
    package_lock_version,
    package_name_from_specifier,
    resolve_package_version,
    yarn_lock_version,
)
from tests.helpers import write_package_lock, write_yarn_lock

SCULLY = "@scullyio/scully"


class TestSpecifier:
    """Tests for ``<name>@<range>`` parsing."""

    @pytest.mark.parametrize(
        ("specifier", "expected"),
        [
            ("@scullyio/scully@^0.0.85", "@scullyio/scully"),
            ('"@scullyio/scully@^0.0.85"', "@scullyio/scully"),
            ("@scullyio/scully@npm:^0.0.85", "@scullyio/scully"),
            ("lodash@^4.17.0", "lodash"),
            (" lodash@4.17.0", "lodash"),
            ("@scullyio/scully", "@scullyio/scully"),
        ],
    )
    def test_name(self, specifier: str, expected: str) -> None:
        assert package_name_from_specifier(specifier) == expected


class TestYarnLock:
    """Tests for yarn.lock parsing."""

    def test_classic_lockfile(self, tmp_path: Path) -> None:
        path = write_yarn_lock(tmp_path, version="0.0.85")

        assert yarn_lock_version(path, SCULLY) == "0.0.85"

    def test_classic_lockfile_with_several_specifiers(self, tmp_path: Path) -> None:
        path = tmp_path / "yarn.lock"
        path.write_text(
            "# yarn lockfile v1\n"
            "\n"
            '"@scullyio/scully-plugin-puppeteer@^1.0.0":\n'
            '  version "1.0.2"\n'
            "\n"
            '"@scullyio/scully@^1.0.0", "@scullyio/scully@^1.1.0":\n'
            '  version "1.1.1"\n'
        )

        assert yarn_lock_version(path, SCULLY) == "1.1.1"

    def test_match_is_exact_package_name(self, tmp_path: Path) -> None:
        path = tmp_path / "yarn.lock"
        path.write_text(
            "# yarn lockfile v1\n"
            "\n"
            '"@scullyio/scully-plugin-puppeteer@^1.0.0":\n'
            '  version "1.0.2"\n'
        )

        with pytest.raises(GeneratorVersionNotFoundError):
            yarn_lock_version(path, SCULLY)

    def test_berry_lockfile(self, tmp_path: Path) -> None:
        path = tmp_path / "yarn.lock"
        path.write_text(
            "# This file is generated by running \"yarn install\".\n"
            "\n"
            "__metadata:\n"
            "  version: 6\n"
            "  cacheKey: 8\n"
            "\n"
            '"@scullyio/scully@npm:^2.1.0":\n'
            "  version: 2.1.41\n"
            '  resolution: "@scullyio/scully@npm:2.1.41"\n'
        )

        assert yarn_lock_version(path, SCULLY) == "2.1.41"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LockfileError, match="Could not read './yarn.lock'"):
            yarn_lock_version(tmp_path / "yarn.lock", SCULLY)


class TestPackageLock:
    """Tests for package-lock.json parsing."""

    def test_lockfile_v1_dependencies(self, tmp_path: Path) -> None:
        path = write_package_lock(tmp_path, version="0.0.80")

        assert package_lock_version(path, SCULLY) == "0.0.80"

    def test_lockfile_v3_packages(self, tmp_path: Path) -> None:
        path = tmp_path / "package-lock.json"
        path.write_text(
            json.dumps(
                {
                    "lockfileVersion": 3,
                    "packages": {
                        "": {"name": "site"},
                        "node_modules/@scullyio/scully": {"version": "2.1.41"},
                    },
                }
            )
        )

        assert package_lock_version(path, SCULLY) == "2.1.41"

    def test_missing_entry_is_distinct_error(self, tmp_path: Path) -> None:
        path = tmp_path / "package-lock.json"
        path.write_text(json.dumps({"lockfileVersion": 1, "dependencies": {}}))

        with pytest.raises(GeneratorVersionNotFoundError) as excinfo:
            package_lock_version(path, SCULLY)

        assert excinfo.value.package == SCULLY
        assert excinfo.value.message == (
            "Could not find '@scullyio/scully' in './package-lock.json'."
        )

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "package-lock.json"
        path.write_text("{not json")

        with pytest.raises(LockfileError, match="Could not parse"):
            package_lock_version(path, SCULLY)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LockfileError):
            package_lock_version(tmp_path / "package-lock.json", SCULLY)


class TestResolvePackageVersion:
    """Tests for picking the lock file from the package manager."""

    def test_yarn_reads_yarn_lock(self, tmp_path: Path) -> None:
        write_yarn_lock(tmp_path, version="0.0.90")
        write_package_lock(tmp_path, version="0.0.80")

        version = resolve_package_version(PackageManager.YARN, tmp_path, SCULLY)

        assert version == "0.0.90"

    def test_npm_reads_package_lock(self, tmp_path: Path) -> None:
        write_yarn_lock(tmp_path, version="0.0.90")
        write_package_lock(tmp_path, version="0.0.80")

        version = resolve_package_version(PackageManager.NPM, tmp_path, SCULLY)

        assert version == "0.0.80"
