"""Exceptions raised while publishing a site."""

from __future__ import annotations


class PublishError(Exception):
    """Raised when a publish operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(PublishError):
    """Raised when required inputs or CI context are missing or malformed."""


class CommandFailedError(PublishError):
    """Raised when an external command exits non-zero or cannot be started.

    The command line stored here has already been redacted by the runner.
    """

    def __init__(
        self,
        command: str,
        returncode: int,
        details: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        super().__init__(
            f"The process '{command}' failed with exit code {returncode}",
            details=details,
        )


class LockfileError(PublishError):
    """Raised when a lock file cannot be read or parsed."""


class GeneratorVersionNotFoundError(LockfileError):
    """Raised when the generator package has no entry in the lock file."""

    def __init__(self, package: str, lockfile: str):
        self.package = package
        self.lockfile = lockfile
        super().__init__(
            f"Could not find '{package}' in './{lockfile}'.",
            details=f"Make sure {package} is listed in package.json and the "
            f"lock file is committed.",
        )
