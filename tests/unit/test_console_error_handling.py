import pytest
import typer

from scully_publish.errors import ConfigurationError, PublishError
from scully_publish.shared.console import with_error_handling


def test_with_error_handling_handles_publish_error():
    @with_error_handling
    def _command() -> None:
        raise PublishError("Boom", details="extra")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_subclasses():
    @with_error_handling
    def _command() -> None:
        raise ConfigurationError("No token")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_keyboard_interrupt():
    @with_error_handling
    def _command() -> None:
        raise KeyboardInterrupt

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 130


def test_with_error_handling_lets_other_errors_through():
    @with_error_handling
    def _command() -> None:
        raise RuntimeError("unexpected")

    with pytest.raises(RuntimeError):
        _command()
