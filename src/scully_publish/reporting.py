"""GitHub Actions workflow command reporting.

The runner reads specially formatted lines on stdout (``::error::``,
``::add-mask::``, ``::group::``) and key/value pairs appended to the file
named by ``$GITHUB_OUTPUT``. This module writes both.
"""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from loguru import logger

from .errors import PublishError


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionReporter:
    """Report masks, outputs, failures and log groups to the Actions runner.

    Attributes:
        exit_code: 1 once a failure has been reported, 0 otherwise
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            stream: Where workflow commands are written (defaults to stdout)
            environ: Environment to read ``GITHUB_OUTPUT`` from
        """
        self._stream = stream or sys.stdout
        self._environ = os.environ if environ is None else environ
        self.exit_code = 0
        self.outputs: dict[str, str] = {}

    def _command(self, name: str, message: str = "") -> None:
        self._stream.write(f"::{name}::{escape_data(message)}\n")
        self._stream.flush()

    def mask(self, value: str) -> None:
        """Ask the runner to hide ``value`` in every subsequent log line."""
        if value:
            self._command("add-mask", value)

    def set_output(self, name: str, value: object) -> None:
        """Set a step output, e.g. ``success=true``."""
        text = str(value).lower() if isinstance(value, bool) else str(value)
        self.outputs[name] = text

        output_file = self._environ.get("GITHUB_OUTPUT")
        if not output_file:
            logger.debug(f"GITHUB_OUTPUT not set, output {name}={text} not written")
            return

        if "\n" in text:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            entry = f"{name}<<{delimiter}\n{text}\n{delimiter}\n"
        else:
            entry = f"{name}={text}\n"
        try:
            with Path(output_file).open("a", encoding="utf-8") as f:
                f.write(entry)
        except OSError as e:
            raise PublishError(
                f"Could not write output '{name}' to {output_file}: {e.strerror}"
            ) from e

    def set_failed(self, message: str) -> None:
        """Report an error annotation and mark the run as failed."""
        self.exit_code = 1
        self._command("error", message)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Fold everything logged inside the block under ``title``."""
        self._command("group", title)
        try:
            yield
        finally:
            self._command("endgroup")
