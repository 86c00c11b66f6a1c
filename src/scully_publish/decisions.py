"""Pure decision functions for the publish workflow.

Every branch in the publish sequence is expressed here as a small function
of plain values, so it can be tested without running any external tool:

- which package manager to use and how to install with it
- how build and Scully arguments are normalised
- whether the legacy no-watch flag is needed for a Scully version
- whether the triggering ref is the deploy branch itself
- how the push URL and committer e-mail are built
"""

from __future__ import annotations

import shlex
from enum import Enum

import semver

from .constants import PublishConstants

_CONSTANTS = PublishConstants()


class PackageManager(str, Enum):
    """Node package managers supported for install, build and generate."""

    YARN = "yarn"
    NPM = "npm"


def choose_package_manager(yarn_lock_exists: bool) -> PackageManager:
    """Pick yarn when a yarn lock file is present, npm otherwise."""
    return PackageManager.YARN if yarn_lock_exists else PackageManager.NPM


def install_arguments(package_manager: PackageManager) -> list[str]:
    """Get the locked install arguments for a package manager.

    Both variants fail when the lock file disagrees with package.json.
    """
    if package_manager is PackageManager.YARN:
        return ["install", "--frozen-lockfile"]
    return ["ci"]


def normalize_build_args(
    raw: str, separator: str = _CONSTANTS.ARGS_SEPARATOR
) -> str:
    """Prefix build arguments with the run separator when it is missing.

    Args:
        raw: Build arguments as given by the user
        separator: Separator token, including its trailing space

    Returns:
        Stripped arguments, prefixed with the separator unless empty

    Example:
        >>> normalize_build_args("--prod")
        '-- --prod'
        >>> normalize_build_args("-- --prod")
        '-- --prod'
    """
    args = raw.strip()
    if args and not args.startswith(separator):
        args = f"{separator}{args}"
    return args


def normalize_scully_args(
    raw: str, separator: str = _CONSTANTS.ARGS_SEPARATOR
) -> str:
    """Strip a leading run separator from Scully arguments.

    The generator is always invoked with its own separator, so a second one
    supplied by the user would be passed through to Scully verbatim.
    """
    args = raw.strip()
    if args.startswith(separator):
        args = args[len(separator) :]
    return args


def requires_no_watch_flag(
    version: str, threshold: str = _CONSTANTS.LEGACY_SCULLY_VERSION
) -> bool:
    """Check whether a Scully version is at or below the legacy threshold.

    Comparison follows semantic-version precedence, so pre-releases sort
    before their release (``0.0.85-beta < 0.0.85``).

    Raises:
        ValueError: If either value is not a valid semantic version
    """
    return semver.Version.parse(version) <= semver.Version.parse(threshold)


def apply_compatibility_flag(
    args: str,
    version: str,
    *,
    threshold: str = _CONSTANTS.LEGACY_SCULLY_VERSION,
    flag: str = _CONSTANTS.NO_WATCH_FLAG,
) -> str:
    """Prepend the no-watch flag when the Scully version needs it."""
    if not requires_no_watch_flag(version, threshold):
        return args
    return f"{flag} {args}".strip()


def is_deploy_branch_ref(ref: str, deploy_branch: str) -> bool:
    """Check whether the triggering ref is exactly the deploy branch."""
    return ref == f"refs/heads/{deploy_branch}"


def split_args(args: str) -> list[str]:
    """Split an argument string the way a POSIX shell would."""
    return shlex.split(args)


def build_push_url(token: str, host: str, repository: str) -> str:
    """Build the authenticated HTTPS URL used for the deploy push.

    The result embeds the token and must only be handed to the command
    runner, never logged.
    """
    return f"https://{token}@{host}/{repository}.git"


def noreply_email(
    actor: str, host: str, prefix: str = _CONSTANTS.NOREPLY_PREFIX
) -> str:
    """Build the no-reply committer e-mail for a CI actor."""
    return f"{actor}@{prefix}.{host}"
