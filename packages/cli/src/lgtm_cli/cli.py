"""CLI entry point for prlgtm.

Commands:
  handle     — apply a GitHub event (e.g. from GitHub Actions) to its pull request
  help       — describe the /lgtm commands
  reviewers  — list who OWNERS files allow to /lgtm a pull request
  init       — write .lgtm.yml and a GitHub Actions workflow
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from lgtm_cli.commands.handle import handle_cmd
from lgtm_cli.commands.help import help_cmd
from lgtm_cli.commands.init import init_cmd
from lgtm_cli.commands.reviewers import reviewers_cmd

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # PyGithub logs every request at DEBUG.
    logging.getLogger("github").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("prlgtm"),
    prog_name="prlgtm",
)
@click.option(
    "--config",
    "config_path",
    default=".lgtm.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRLGTM_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Manage the lgtm label on GitHub pull requests from /lgtm comments."""
    from lgtm_core.config import load_config
    from lgtm_cli.auth import resolve_github_token

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(handle_cmd)
main.add_command(help_cmd)
main.add_command(reviewers_cmd)
main.add_command(init_cmd)
