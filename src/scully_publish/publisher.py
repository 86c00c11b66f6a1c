"""Build a Scully site and publish it to a deploy branch.

The publish runs nine steps in order and stops at the first failure:

1. Validate inputs (access token, deploy branch)
2. Skip when triggered by the deploy branch itself
3. Install dependencies with yarn or npm
4. Build the site
5. Resolve the installed Scully version
6. Generate the static site
7. Copy CNAME into the generated site
8. Commit the generated site to a fresh repository
9. Force-push that commit to the deploy branch

Steps that already ran are left as they are when a later one fails.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger
from rich.markup import escape

from .constants import PublishConstants
from .decisions import (
    PackageManager,
    apply_compatibility_flag,
    build_push_url,
    choose_package_manager,
    is_deploy_branch_ref,
    noreply_email,
    normalize_build_args,
    normalize_scully_args,
    split_args,
)
from .errors import ConfigurationError, LockfileError, PublishError
from .lockfile import resolve_package_version

if TYPE_CHECKING:
    from .config import GitHubContext, PublishInputs
    from .reporting import ActionReporter
    from .shared.console import CLIConsole
    from .shell_commands import ShellCommands

MISSING_TOKEN_MESSAGE = (
    "No personal access token found. Please provide one by setting the "
    "`access-token` input for this action."
)


class PublishStep(str, Enum):
    """Steps of a publish run, in execution order."""

    VALIDATE = "validate inputs"
    GUARD = "check triggering branch"
    INSTALL = "install dependencies"
    BUILD = "build site"
    RESOLVE_VERSION = "resolve Scully version"
    GENERATE = "generate static site"
    CNAME = "copy CNAME"
    COMMIT = "commit generated site"
    PUSH = "push to deploy branch"


@dataclass(frozen=True)
class PublishOutcome:
    """Result of a publish run.

    ``success`` and ``failure_reason`` are mutually exclusive. A run that was
    skipped because it was triggered by the deploy branch counts as a success.
    """

    success: bool
    skipped: bool = False
    failure_reason: str | None = None
    failed_step: PublishStep | None = None


class ScullyPublisher:
    """Orchestrates a complete publish run.

    Attributes:
        commands: Shell command executor
        console: Console for user-facing progress messages
        reporter: Workflow command reporter for outputs and failures
        project_root: Directory containing package.json
        constants: Publish configuration constants
    """

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        reporter: ActionReporter,
        project_root: Path,
        constants: PublishConstants | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            commands: Shell command executor
            console: Console for progress output
            reporter: Workflow command reporter
            project_root: Path to the site project
            constants: Optional constants (uses defaults if not provided)
        """
        self.commands = commands
        self.console = console
        self.reporter = reporter
        self.project_root = Path(project_root)
        self.constants = constants or PublishConstants()
        self._step = PublishStep.VALIDATE

    # =========================================================================
    # Entry point
    # =========================================================================

    def run(self, inputs: PublishInputs, context: GitHubContext) -> PublishOutcome:
        """Run every publish step and report the outcome.

        Failures are never raised: the failing step's message is reported
        as the run's failure reason and returned in the outcome.
        """
        try:
            outcome = self._publish(inputs, context)
            if not outcome.skipped:
                self.reporter.set_output("success", True)
        except PublishError as e:
            logger.debug(f"Publish failed during '{self._step.value}': {e.message}")
            if e.details:
                self.console.print(escape(e.details))
            self.reporter.set_failed(e.message)
            return PublishOutcome(
                success=False,
                failure_reason=e.message,
                failed_step=self._step,
            )

        return outcome

    def _publish(self, inputs: PublishInputs, context: GitHubContext) -> PublishOutcome:
        self._enter(PublishStep.VALIDATE)
        token = self.validate_inputs(inputs)

        self._enter(PublishStep.GUARD)
        if self.is_self_triggered(context.ref, inputs.deploy_branch):
            return PublishOutcome(success=True, skipped=True)

        with self._grouped(PublishStep.INSTALL):
            package_manager = self.install_dependencies()

        with self._grouped(PublishStep.BUILD):
            self.build_site(package_manager, inputs.build_args)

        self._enter(PublishStep.RESOLVE_VERSION)
        version = self.resolve_scully_version(package_manager)

        with self._grouped(PublishStep.GENERATE):
            self.generate_site(package_manager, inputs.scully_args, version)

        self._enter(PublishStep.CNAME)
        self.copy_cname()

        self.console.print("Ready to deploy your new shiny site!")
        self.console.print(
            f"Deploying to repo: {context.repository} and branch: {inputs.deploy_branch}"
        )
        self.console.print(
            "You can configure the deploy branch by setting the `deploy-branch` "
            "input for this action."
        )

        with self._grouped(PublishStep.COMMIT):
            self.commit_site(context)

        with self._grouped(PublishStep.PUSH):
            self.push_site(token, context, inputs.deploy_branch)
        self.console.ok("Finished deploying your site.")

        self.console.print("Enjoy! ✨")
        return PublishOutcome(success=True)

    def _enter(self, step: PublishStep) -> None:
        self._step = step
        logger.debug(f"Step: {step.value}")

    @contextmanager
    def _grouped(self, step: PublishStep) -> Iterator[None]:
        self._enter(step)
        with self.reporter.group(step.value.capitalize()):
            yield

    @staticmethod
    def _split(args: str, input_name: str) -> list[str]:
        try:
            return split_args(args)
        except ValueError as e:
            raise ConfigurationError(f"Could not parse `{input_name}`: {e}") from e

    # =========================================================================
    # Steps
    # =========================================================================

    def validate_inputs(self, inputs: PublishInputs) -> str:
        """Check the access token and register it as a secret.

        Returns:
            The stripped access token

        Raises:
            ConfigurationError: If the token is empty or whitespace
        """
        token = inputs.token
        if not token:
            raise ConfigurationError(MISSING_TOKEN_MESSAGE)

        self.reporter.mask(token)
        self.commands.runner.add_secret(token)
        return token

    def is_self_triggered(self, ref: str, deploy_branch: str) -> bool:
        """Check whether the run was triggered by a push to the deploy branch."""
        if not is_deploy_branch_ref(ref, deploy_branch):
            return False
        self.console.info(f"Triggered by branch used to deploy: {ref}.")
        self.console.info("Nothing to deploy.")
        return True

    def install_dependencies(self) -> PackageManager:
        """Detect the package manager and install locked dependencies."""
        yarn_lock = self.project_root / self.constants.YARN_LOCK
        package_manager = choose_package_manager(yarn_lock.exists())
        logger.debug(f"{yarn_lock} exists: {package_manager is PackageManager.YARN}")

        self.console.print(
            f"Installing your site's dependencies using {package_manager.value}."
        )
        self.commands.package_manager.install(package_manager)
        self.console.ok("Finished installing dependencies.")
        return package_manager

    def build_site(self, package_manager: PackageManager, raw_args: str) -> None:
        """Run the build script, forwarding extra arguments to the builder."""
        args = normalize_build_args(raw_args, self.constants.ARGS_SEPARATOR)

        self.console.print("Ready to build your Scully site!")
        self.console.print(
            f"Building with: {package_manager.value} run "
            f"{self.constants.BUILD_SCRIPT} {escape(args)}".rstrip()
        )
        self.commands.package_manager.run_script(
            package_manager, self.constants.BUILD_SCRIPT, self._split(args, "build-args")
        )
        self.console.ok("Finished building your site.")

    def resolve_scully_version(self, package_manager: PackageManager) -> str:
        """Read the installed Scully version from the lock file.

        Raises:
            LockfileError: If the lock file is unreadable or has no Scully entry
        """
        version = resolve_package_version(
            package_manager,
            self.project_root,
            self.constants.SCULLY_PACKAGE,
            yarn_lock=self.constants.YARN_LOCK,
            npm_lock=self.constants.NPM_LOCK,
        )
        self.console.info(f"Scully Version {version} is used")
        return version

    def generate_site(
        self, package_manager: PackageManager, raw_args: str, version: str
    ) -> None:
        """Run Scully, adding the no-watch flag for legacy versions."""
        args = normalize_scully_args(raw_args, self.constants.ARGS_SEPARATOR)
        try:
            final_args = apply_compatibility_flag(
                args,
                version,
                threshold=self.constants.LEGACY_SCULLY_VERSION,
                flag=self.constants.NO_WATCH_FLAG,
            )
        except ValueError as e:
            raise LockfileError(
                f"Scully version '{version}' is not a valid semantic version."
            ) from e

        if final_args != args:
            self.console.info(
                f"Scully Version is less than or equal to "
                f"'{self.constants.LEGACY_SCULLY_VERSION}', adding "
                f"'{self.constants.NO_WATCH_FLAG}' flag"
            )

        self.commands.package_manager.run_script(
            package_manager,
            self.constants.SCULLY_SCRIPT,
            ["--", *self._split(final_args, "scully-args")],
        )
        self.console.ok("Finished Scullying your site.")

    def copy_cname(self) -> bool:
        """Copy CNAME into the generated site when the project has one.

        Returns:
            True if the file was copied, False if the project has no CNAME

        Raises:
            PublishError: If the file exists but cannot be copied
        """
        source = self.project_root / self.constants.CNAME_FILE
        if not source.exists():
            logger.debug(f"No {source}, skipping")
            return False

        destination = (
            self.constants.output_dir(self.project_root) / self.constants.CNAME_FILE
        )
        self.console.print("Copying CNAME over.")
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise PublishError(
                f"Failed to copy {self.constants.CNAME_FILE} to "
                f"{self.constants.OUTPUT_DIR}: {e.strerror or e}"
            ) from e
        self.console.ok("Finished copying CNAME.")
        return True

    def commit_site(self, context: GitHubContext) -> None:
        """Commit the generated site to a fresh repository.

        Raises:
            PublishError: If the generated site directory does not exist
            CommandFailedError: If any git command fails
        """
        site_dir = self.constants.output_dir(self.project_root)
        if not site_dir.is_dir():
            raise PublishError(
                f"Generated site not found at ./{self.constants.OUTPUT_DIR}.",
                details="Check that the scully build writes to dist/static.",
            )

        git = self.commands.git
        git.init(site_dir, initial_branch=self.constants.LOCAL_BRANCH)
        git.set_identity(
            context.actor,
            noreply_email(context.actor, context.host, self.constants.NOREPLY_PREFIX),
            site_dir,
        )
        git.add_all(site_dir)
        git.commit(self.constants.commit_message(context.sha), site_dir)

    def push_site(self, token: str, context: GitHubContext, deploy_branch: str) -> None:
        """Force-push the generated site commit to the deploy branch.

        Raises:
            ConfigurationError: If the repository is not ``owner/name``
            CommandFailedError: If the push fails
        """
        if not context.owner or not context.repo:
            raise ConfigurationError(
                f"Invalid repository '{context.repository}', expected 'owner/name'. "
                "Is GITHUB_REPOSITORY set?"
            )

        self.commands.git.force_push(
            build_push_url(token, context.host, context.repository),
            self.constants.LOCAL_BRANCH,
            deploy_branch,
            self.constants.output_dir(self.project_root),
        )
