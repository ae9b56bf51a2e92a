"""Who may change the lgtm label on a pull request.

Three routes, checked in order:
  1. The PR author may always cancel, and may never approve.
  2. Repositories not listed in skip_collaborators: the commenter becomes an
     assignee. Assignment only succeeds for collaborators, so a successful
     assignment is the permission check.
  3. Repositories listed in skip_collaborators: the commenter must be an
     approver or reviewer in an OWNERS file covering a changed path.

A denial is returned as an outcome carrying the reply text. Failures that
prevent a decision are raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lgtm_core.commands import Command
from lgtm_core.config import skip_collaborators
from lgtm_core.events import CommentEvent
from lgtm_core.gh.client import GitHubClient, GitHubError

logger = logging.getLogger(__name__)

SELF_APPROVAL_DENIAL = "you cannot LGTM your own PR."
OWNERS_DENIAL = "adding LGTM is restricted to approvers and reviewers in OWNERS files."


@dataclass(frozen=True)
class AuthorizationOutcome:
    granted: bool
    message: str = ""

    @classmethod
    def grant(cls) -> AuthorizationOutcome:
        return cls(granted=True)

    @classmethod
    def deny(cls, message: str) -> AuthorizationOutcome:
        return cls(granted=False, message=message)


def owners_reviewers(view, filenames: list[str]) -> set[str]:
    """Union of approvers and reviewers from every OWNERS file covering filenames."""
    reviewers: set[str] = set()
    for filename in filenames:
        reviewers |= view.approvers(filename) | view.reviewers(filename)
    return reviewers


def get_changed_files(client: GitHubClient, org: str, repo: str, number: int) -> list[str]:
    try:
        return client.get_changed_files(org, repo, number)
    except GitHubError as e:
        raise GitHubError(f"cannot get PR changes for {org}/{repo}#{number}") from e


def load_pr_reviewers(client: GitHubClient, owners_loader, org: str, repo: str, number: int) -> set[str]:
    """Return everyone OWNERS files allow to review the pull request, at its base ref."""
    pr = client.get_pull_request(org, repo, number)
    view = owners_loader.load(org, repo, pr.base_ref)
    filenames = get_changed_files(client, org, repo, number)
    return owners_reviewers(view, filenames)


def _assignment_failure_reason(client: GitHubClient, event: CommentEvent, err: GitHubError) -> str:
    login = event.author.login
    try:
        is_collaborator = client.is_collaborator(event.org, event.repo, login)
    except GitHubError:
        logger.exception("Failed is_collaborator(%s, %s, %s)", event.org, event.repo, login)
        return "assigning you to the PR failed"
    if not is_collaborator:
        return f"only {event.org}/{event.repo} repo collaborators may be assigned issues"
    logger.error("Failed assign_issue(%s, %s, %d, %s): %s", event.org, event.repo, event.number, login, err)
    return "assigning you to the PR failed"


def resolve_authorization(
    client: GitHubClient,
    config: dict,
    owners_loader,
    event: CommentEvent,
    command: Command,
) -> AuthorizationOutcome:
    """Decide whether event.author may apply command to the pull request.

    Self-approval is denied before any API call. May assign the commenter as
    a side effect. Raises GitHubError/OwnersError when the OWNERS route cannot
    reach a decision.
    """
    if event.author.same_as(event.issue_author):
        if command is Command.APPROVE:
            return AuthorizationOutcome.deny(SELF_APPROVAL_DENIAL)
        return AuthorizationOutcome.grant()

    org, repo, number = event.org, event.repo, event.number
    login = event.author.login

    if not skip_collaborators(config, org, repo):
        if event.is_assignee:
            return AuthorizationOutcome.grant()
        logger.info("Assigning %s/%s#%d to %s", org, repo, number, login)
        try:
            client.assign_issue(org, repo, number, [login])
        except GitHubError as e:
            reason = _assignment_failure_reason(client, event, e)
            return AuthorizationOutcome.deny(f"changing LGTM is restricted to assignees, and {reason}.")
        return AuthorizationOutcome.grant()

    logger.debug("Skipping collaborator checks and loading OWNERS for %s/%s#%d", org, repo, number)
    if event.author.normalized not in load_pr_reviewers(client, owners_loader, org, repo, number):
        return AuthorizationOutcome.deny(OWNERS_DENIAL)
    return AuthorizationOutcome.grant()
