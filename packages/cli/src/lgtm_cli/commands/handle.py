"""handle command — apply one GitHub event to its pull request."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console

from lgtm_core.dispatch import dispatch
from lgtm_core.gh.client import GitHubError, PyGithubClient
from lgtm_core.owners import DEFAULT_OWNERS_FILE, OwnersError, RepoOwnersLoader

console = Console()
logger = logging.getLogger(__name__)


def _read_payload(event_path: str) -> dict:
    try:
        payload = json.loads(Path(event_path).read_text())
    except FileNotFoundError:
        raise click.UsageError(f"Event payload not found: {event_path}")
    except json.JSONDecodeError as e:
        raise click.UsageError(f"Event payload is not valid JSON ({event_path}): {e}")
    if not isinstance(payload, dict):
        raise click.UsageError(f"Event payload must be a JSON object: {event_path}")
    return payload


@click.command("handle")
@click.option(
    "--event-name",
    envvar="GITHUB_EVENT_NAME",
    required=True,
    help="GitHub event name (issue_comment, pull_request_review, pull_request, ...).",
)
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path to the JSON webhook payload.",
)
@click.pass_context
def handle_cmd(ctx, event_name: str, event_path: str):
    """Apply a GitHub event to its pull request.

    Inside GitHub Actions both options default to the values the runner
    provides, so the command can run without arguments.

    \b
    Required environment variables:
      GITHUB_TOKEN    GitHub token (or PRLGTM_TOKEN, or use gh CLI)
    """
    config = ctx.obj["config"]
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    payload = _read_payload(event_path)
    client = PyGithubClient(token, bot_login=config.get("bot_login"))
    owners_loader = RepoOwnersLoader(token, owners_file=config.get("owners_file") or DEFAULT_OWNERS_FILE)

    try:
        handled = dispatch(event_name, payload, client, config, owners_loader)
    except (GitHubError, OwnersError) as e:
        logger.error("Handling %s event failed: %s", event_name, e)
        raise click.ClickException(str(e))

    if not handled:
        console.print(f"[dim]Nothing to do for {event_name} events.[/dim]")
