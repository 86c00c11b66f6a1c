"""Main CLI application module.

This module provides the ``scully-publish`` entry point. Inputs can be
passed as options or through the ``INPUT_*`` variables set by GitHub
Actions; the triggering context is always read from ``GITHUB_*``.
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from loguru import logger
from pydantic import SecretStr
from rich.markup import escape

from scully_publish import __version__
from scully_publish.config import GitHubContext, PublishInputs, get_input, input_env_names
from scully_publish.context import get_cli_context
from scully_publish.errors import ConfigurationError
from scully_publish.shared.console import with_error_handling

app = typer.Typer(
    help="🎩 Scully Publish - build a Scully site and push it to a deploy branch",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _configure_logging(verbose: bool) -> None:
    """Route loguru to stderr at INFO, or DEBUG when verbose."""
    logger.remove()
    if verbose:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
        )
    else:
        logger.add(sys.stderr, level="INFO", format="{message}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"scully-publish {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = False,
) -> None:
    """Build a Scully site and publish it to a deploy branch."""


@app.command()
@with_error_handling
def deploy(
    ctx: typer.Context,
    access_token: Annotated[
        str,
        typer.Option(
            "--access-token",
            envvar=input_env_names("access-token"),
            help="Token with push access to the repository",
            show_default=False,
        ),
    ] = "",
    deploy_branch: Annotated[
        str,
        typer.Option(
            "--deploy-branch",
            "-b",
            envvar=input_env_names("deploy-branch"),
            help="Branch that receives the generated site (default: main)",
            show_default=False,
        ),
    ] = "",
    build_args: Annotated[
        str,
        typer.Option(
            "--build-args",
            envvar=input_env_names("build-args"),
            help="Extra arguments for `run build`",
        ),
    ] = "",
    scully_args: Annotated[
        str,
        typer.Option(
            "--scully-args",
            envvar=input_env_names("scully-args"),
            help="Extra arguments for `run scully`",
        ),
    ] = "",
    project_root: Annotated[
        Path | None,
        typer.Option(
            "--project-root",
            "-C",
            help="Site project directory (defaults to the working directory)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Install, build, generate and force-push the site to the deploy branch.

    Examples:
        scully-publish deploy --access-token "$TOKEN"
        scully-publish deploy -b gh-pages --build-args "--prod"
    """
    _configure_logging(verbose)

    root = (project_root or Path.cwd()).resolve()
    if not root.is_dir():
        raise ConfigurationError(f"Project directory {root} does not exist.")

    # Local runs may keep inputs and GITHUB_* context in a .env file
    load_dotenv(root / ".env", override=False)

    inputs = PublishInputs(
        access_token=SecretStr(access_token or get_input("access-token")),
        deploy_branch=deploy_branch or get_input("deploy-branch"),
        build_args=build_args or get_input("build-args"),
        scully_args=scully_args or get_input("scully-args"),
    )
    github = GitHubContext.from_env()

    cli_ctx = get_cli_context(ctx, project_root=root, secrets=[inputs.token])
    cli_ctx.console.print_header("Scully Publish")
    outcome = cli_ctx.publisher().run(inputs, github)

    if not outcome.success:
        step = outcome.failed_step.value if outcome.failed_step else "publish"
        cli_ctx.console.error(f"Failed to {step}: {escape(outcome.failure_reason or '')}")
        raise typer.Exit(cli_ctx.reporter.exit_code or 1)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
