"""Resolve the installed generator version from a lock file.

Supported lock files:
- yarn classic (v1), parsed with pyarn
- yarn berry (v2+), which is YAML with a ``__metadata`` entry
- npm ``package-lock.json`` (lockfile versions 1 to 3)
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pyarn import lockfile as yarn_lockfile

from .decisions import PackageManager
from .errors import GeneratorVersionNotFoundError, LockfileError

_BERRY_METADATA = re.compile(r"^__metadata:", re.MULTILINE)


def package_name_from_specifier(specifier: str) -> str:
    """Extract the package name from a ``<name>@<range>`` specifier.

    Example:
        >>> package_name_from_specifier("@scullyio/scully@^0.0.85")
        '@scullyio/scully'
        >>> package_name_from_specifier("lodash@npm:^4.17.0")
        'lodash'
    """
    spec = specifier.strip().strip('"')
    at = spec.rfind("@")
    # A leading "@" belongs to the scope, not to the range
    if at <= 0:
        return spec
    return spec[:at]


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise LockfileError(f"Could not read './{path.name}': {e.strerror}") from e


def _find_yarn_entry(entries: dict[str, Any], package: str) -> dict[str, Any] | None:
    """Find the entry whose key lists ``package`` among its specifiers."""
    for key, entry in entries.items():
        if not isinstance(entry, dict):
            continue
        names = {package_name_from_specifier(spec) for spec in str(key).split(",")}
        if package in names:
            return entry
    return None


def _parse_yarn_lock(content: str, path: Path) -> dict[str, Any]:
    if _BERRY_METADATA.search(content):
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise LockfileError(f"Could not parse './{path.name}': {e}") from e
        if not isinstance(data, dict):
            raise LockfileError(f"Could not parse './{path.name}': unexpected format")
        return data

    try:
        return yarn_lockfile.Lockfile.from_str(content).data
    except Exception as e:  # pyarn has no dedicated parse error type
        raise LockfileError(f"Could not parse './{path.name}': {e}") from e


def yarn_lock_version(path: Path, package: str) -> str:
    """Get the resolved version of ``package`` from a yarn lock file.

    Raises:
        LockfileError: If the file cannot be read or parsed
        GeneratorVersionNotFoundError: If no entry matches the package
    """
    entries = _parse_yarn_lock(_read(path), path)
    entry = _find_yarn_entry(entries, package)
    if entry is None or "version" not in entry:
        raise GeneratorVersionNotFoundError(package, path.name)
    return str(entry["version"])


def package_lock_version(path: Path, package: str) -> str:
    """Get the resolved version of ``package`` from package-lock.json.

    Lockfile v1 (and v2, for compatibility) list top-level packages under
    ``dependencies``; v3 only has the ``packages`` map keyed by install path.

    Raises:
        LockfileError: If the file cannot be read or parsed
        GeneratorVersionNotFoundError: If no entry matches the package
    """
    try:
        data = json.loads(_read(path))
    except json.JSONDecodeError as e:
        raise LockfileError(f"Could not parse './{path.name}': {e}") from e

    if not isinstance(data, dict):
        raise LockfileError(f"Could not parse './{path.name}': unexpected format")

    candidates = (
        (data.get("dependencies") or {}).get(package),
        (data.get("packages") or {}).get(f"node_modules/{package}"),
    )
    for entry in candidates:
        if isinstance(entry, dict) and entry.get("version"):
            return str(entry["version"])

    raise GeneratorVersionNotFoundError(package, path.name)


def resolve_package_version(
    package_manager: PackageManager,
    project_root: Path,
    package: str,
    *,
    yarn_lock: str = "yarn.lock",
    npm_lock: str = "package-lock.json",
) -> str:
    """Resolve the installed version of a package for the chosen manager."""
    if package_manager is PackageManager.YARN:
        path = project_root / yarn_lock
        logger.info(f"Determine Scully version from './{yarn_lock}'.")
        version = yarn_lock_version(path, package)
    else:
        path = project_root / npm_lock
        logger.info(f"Determine Scully version from './{npm_lock}'.")
        version = package_lock_version(path, package)

    logger.debug(f"Resolved {package}={version} from {path}")
    return version
