"""Publish constants and configuration.

This module centralizes all magic strings, paths, and thresholds used
throughout the publish process.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PublishConstants:
    """Constants for building and publishing a Scully site.

    All attributes are class-level and immutable.
    """

    DEFAULT_DEPLOY_BRANCH: str = "main"

    # Generator package and the last version that needs the no-watch flag
    SCULLY_PACKAGE: str = "@scullyio/scully"
    LEGACY_SCULLY_VERSION: str = "0.0.85"
    NO_WATCH_FLAG: str = "--nw"

    # Separator passed to `<pm> run` so arguments reach the script
    ARGS_SEPARATOR: str = "-- "

    # package.json scripts
    BUILD_SCRIPT: str = "build"
    SCULLY_SCRIPT: str = "scully"

    # Files probed in the project root
    YARN_LOCK: str = "yarn.lock"
    NPM_LOCK: str = "package-lock.json"
    CNAME_FILE: str = "CNAME"

    # Generated site, relative to the project root
    OUTPUT_DIR: str = "dist/static"

    # Git
    LOCAL_BRANCH: str = "main"
    NOREPLY_PREFIX: str = "users.noreply"
    COMMIT_MESSAGE_TEMPLATE: str = "deployed via Scully Publish Action 🎩 for {sha}"

    DEFAULT_SERVER_URL: str = "https://github.com"

    def output_dir(self, project_root: Path) -> Path:
        """Get the generated site directory for a project."""
        return project_root / self.OUTPUT_DIR

    def commit_message(self, sha: str) -> str:
        """Build the commit message for a triggering commit."""
        return self.COMMIT_MESSAGE_TEMPLATE.format(sha=sha)
