"""Action inputs and CI context models.

Inputs follow the GitHub Actions convention of ``INPUT_<NAME>`` environment
variables; the triggering context comes from the ``GITHUB_*`` variables the
runner exports for every job.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .constants import PublishConstants

_CONSTANTS = PublishConstants()


def input_env_names(name: str) -> list[str]:
    """Get the environment variable names an action input may arrive in.

    The runner keeps hyphens (``INPUT_ACCESS-TOKEN``); composite actions and
    shells usually forward them with underscores instead.
    """
    upper = name.replace(" ", "_").upper()
    names = [f"INPUT_{upper}"]
    if "-" in upper:
        names.append(f"INPUT_{upper.replace('-', '_')}")
    return names


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Read an action input, returning an empty string when unset."""
    env = os.environ if environ is None else environ
    for key in input_env_names(name):
        value = env.get(key)
        if value:
            return value.strip()
    return ""


class PublishInputs(BaseModel):
    """User-supplied inputs for a publish run."""

    model_config = ConfigDict(frozen=True)

    access_token: SecretStr = Field(
        default=SecretStr(""),
        description="Token used for the authenticated push",
    )
    deploy_branch: str = Field(
        default=_CONSTANTS.DEFAULT_DEPLOY_BRANCH,
        description="Branch receiving the generated site",
    )
    build_args: str = Field(default="", description="Extra build arguments")
    scully_args: str = Field(default="", description="Extra Scully arguments")

    @field_validator("deploy_branch", mode="before")
    @classmethod
    def _default_branch(cls, value: str | None) -> str:
        if value is None or not str(value).strip():
            return _CONSTANTS.DEFAULT_DEPLOY_BRANCH
        return str(value).strip()

    @field_validator("build_args", "scully_args", mode="before")
    @classmethod
    def _strip_args(cls, value: str | None) -> str:
        return (value or "").strip()

    @property
    def token(self) -> str:
        """Get the stripped access token value."""
        return self.access_token.get_secret_value().strip()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PublishInputs:
        """Load inputs from ``INPUT_*`` environment variables."""
        return cls(
            access_token=SecretStr(get_input("access-token", environ)),
            deploy_branch=get_input("deploy-branch", environ),
            build_args=get_input("build-args", environ),
            scully_args=get_input("scully-args", environ),
        )


class GitHubContext(BaseModel):
    """Triggering context of the workflow run."""

    model_config = ConfigDict(frozen=True)

    ref: str = ""
    sha: str = ""
    actor: str = ""
    repository: str = ""
    server_url: str = _CONSTANTS.DEFAULT_SERVER_URL

    @property
    def owner(self) -> str:
        """Get the repository owner."""
        return self.repository.partition("/")[0]

    @property
    def repo(self) -> str:
        """Get the repository name."""
        return self.repository.partition("/")[2]

    @property
    def host(self) -> str:
        """Get the host name of the GitHub server, e.g. ``github.com``."""
        return urlparse(self.server_url).netloc or "github.com"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GitHubContext:
        """Load the context from ``GITHUB_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            ref=env.get("GITHUB_REF", ""),
            sha=env.get("GITHUB_SHA", ""),
            actor=env.get("GITHUB_ACTOR", ""),
            repository=env.get("GITHUB_REPOSITORY", ""),
            server_url=env.get("GITHUB_SERVER_URL") or _CONSTANTS.DEFAULT_SERVER_URL,
        )
