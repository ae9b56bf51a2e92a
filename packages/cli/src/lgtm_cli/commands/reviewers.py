"""reviewers command — show who OWNERS files allow to /lgtm a pull request."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from lgtm_core.authorization import load_pr_reviewers
from lgtm_core.gh.client import GitHubError, PyGithubClient
from lgtm_core.owners import DEFAULT_OWNERS_FILE, OwnersError, RepoOwnersLoader

console = Console()


@click.command("reviewers")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.pass_context
def reviewers_cmd(ctx, repo: str, pr_number: int):
    """List the OWNERS approvers and reviewers covering a pull request.

    These are the users allowed to /lgtm the pull request when the
    repository is listed under skip_collaborators.
    """
    config = ctx.obj["config"]
    token = config.get("github_token")
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")
    if "/" not in repo:
        raise click.UsageError("--repo must be in owner/name format.")
    org, name = repo.split("/", 1)

    client = PyGithubClient(token)
    owners_loader = RepoOwnersLoader(token, owners_file=config.get("owners_file") or DEFAULT_OWNERS_FILE)
    try:
        logins = load_pr_reviewers(client, owners_loader, org, name, pr_number)
    except (GitHubError, OwnersError) as e:
        raise click.ClickException(str(e))

    if not logins:
        console.print("[yellow]No OWNERS approvers or reviewers cover this pull request.[/yellow]")
        return

    console.print(f"\n[bold]{len(logins)}[/bold] user(s) may /lgtm [cyan]{repo}#{pr_number}[/cyan]:")
    for login in sorted(logins):
        console.print(f"  {escape(login)}")
