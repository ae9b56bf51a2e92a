"""init command — set up prlgtm for a repository.

Writes .lgtm.yml and, optionally, a GitHub Actions workflow that runs
`prlgtm handle` on every comment and on every push to a pull request.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

from lgtm_core.owners import DEFAULT_OWNERS_FILE

console = Console()
logger = logging.getLogger(__name__)

# Comments from the Actions-injected GITHUB_TOKEN are authored by this account,
# and it cannot look itself up through the API.
ACTIONS_BOT_LOGIN = "github-actions[bot]"

_WORKFLOW_TEMPLATE = """\
name: LGTM

on:
  issue_comment:
    types: [created]
  pull_request_review:
    types: [submitted]
  pull_request_review_comment:
    types: [created]
  pull_request_target:
    types: [synchronize]

permissions:
  contents: read
  issues: write
  pull-requests: write

jobs:
  lgtm:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install prlgtm
        run: pip install "prlgtm=={version}"

      - name: Handle event
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
        run: prlgtm handle
"""


@click.command("init")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Auto-detected from git remote.")
def init_cmd(repo: str | None):
    """Set up prlgtm for a repository.

    Creates .lgtm.yml and optionally generates a GitHub Actions workflow.
    """
    console.print("\n[bold cyan]prlgtm init[/bold cyan] — repository setup\n")

    if repo is None:
        repo = _detect_repo_from_git()
        if repo:
            console.print(f"[dim]Detected repository: {repo}[/dim]")
        else:
            repo = click.prompt("GitHub repository (owner/name)")

    console.print("\nWho may /lgtm a pull request:")
    console.print("  [bold]assignees[/bold] — any collaborator; commenters are assigned automatically (default)")
    console.print("  [bold]owners[/bold]    — approvers and reviewers from OWNERS files")
    mode = click.prompt(
        "Authorization",
        type=click.Choice(["assignees", "owners"]),
        default="assignees",
    )

    config: dict = {}
    if mode == "owners":
        config["skip_collaborators"] = [repo]
        owners_file = click.prompt("OWNERS file name", default=DEFAULT_OWNERS_FILE)
        if owners_file != DEFAULT_OWNERS_FILE:
            config["owners_file"] = owners_file

    setup_ci = click.confirm("\nGenerate .github/workflows/lgtm.yml for GitHub Actions?", default=True)
    if setup_ci:
        config["bot_login"] = ACTIONS_BOT_LOGIN

    _write_config(config)
    console.print("[green]Created .lgtm.yml[/green]")

    if setup_ci:
        _write_workflow()
        console.print("[green]Created .github/workflows/lgtm.yml[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print(f"Comment [bold]/lgtm[/bold] on a pull request in {repo} to try it out.")


def _detect_repo_from_git() -> str | None:
    """Try to detect the GitHub repo slug from the git remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    url = result.stdout.strip()
    # https://github.com/owner/repo.git and git@github.com:owner/repo.git
    if "github.com" not in url:
        return None
    slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
    return slug if "/" in slug else None


def _write_config(config: dict) -> None:
    """Write or update .lgtm.yml, preserving any existing keys."""
    path = Path(".lgtm.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    if "skip_collaborators" in config:
        merged = list(existing.get("skip_collaborators") or [])
        merged += [entry for entry in config["skip_collaborators"] if entry not in merged]
        config = {**config, "skip_collaborators": merged}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _get_version() -> str:
    try:
        from importlib.metadata import version

        return version("prlgtm")
    except Exception:
        logger.debug("prlgtm is not installed; pinning the workflow to the default version.")
        return "0.1.0"


def _write_workflow() -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    (workflow_dir / "lgtm.yml").write_text(_WORKFLOW_TEMPLATE.format(version=_get_version()))
