"""Event handlers that keep the lgtm label in step with /lgtm commands and new commits."""

from __future__ import annotations

import logging

from lgtm_core.authorization import resolve_authorization
from lgtm_core.commands import LGTM_LABEL, REMOVE_LGTM_LABEL_NOTIFICATION, Command, classify
from lgtm_core.events import CommentAction, CommentEvent, PullRequestSyncEvent, norm_login
from lgtm_core.gh.client import GitHubClient, GitHubError, LabelNotFound
from lgtm_core.responses import DEFAULT_ABOUT, format_response

logger = logging.getLogger(__name__)


def _current_labels(client: GitHubClient, event: CommentEvent) -> list[str]:
    """Return the PR's label names, or [] when they cannot be fetched.

    A failed fetch must not block the command: the handler proceeds as if the
    PR were unlabeled, which at worst repeats an add of a label already present.
    """
    try:
        return client.get_labels(event.org, event.repo, event.number)
    except GitHubError:
        logger.exception("Failed to get the labels on %s#%d.", event.full_name, event.number)
        return []


def remove_stale_notifications(client: GitHubClient, org: str, repo: str, number: int) -> int:
    """Delete the bot's "label has been removed" comments and return how many went.

    Every failure is logged and skipped: the label has already been added by
    the time this runs.
    """
    try:
        bot_login = norm_login(client.bot_login())
    except GitHubError:
        logger.exception("Failed to get bot name.")
        return 0

    try:
        comments = client.list_comments(org, repo, number)
    except GitHubError:
        logger.exception("Failed to get the list of issue comments on %s/%s#%d.", org, repo, number)
        return 0

    deleted = 0
    for comment in comments:
        if norm_login(comment.author) != bot_login or comment.body != REMOVE_LGTM_LABEL_NOTIFICATION:
            continue
        try:
            client.delete_comment(org, repo, number, comment.id)
            deleted += 1
        except GitHubError:
            logger.exception("Failed to delete comment from %s/%s#%d, ID:%d.", org, repo, number, comment.id)
    return deleted


def handle_comment(client: GitHubClient, config: dict, owners_loader, event: CommentEvent) -> None:
    """Apply an /lgtm or /lgtm cancel comment to its pull request.

    Rejections (self-approval, unauthorized commenter) are answered with a
    comment and return normally. GitHub failures on the label itself, and
    failures that stop authorization from reaching a decision, are raised.
    """
    if not event.is_pull_request or event.issue_state != "open" or event.action != CommentAction.CREATED:
        return

    command = classify(event.body)
    if command is Command.NONE:
        return

    outcome = resolve_authorization(client, config, owners_loader, event, command)
    if not outcome.granted:
        logger.info('Reply to /lgtm request with comment: "%s"', outcome.message)
        reply = format_response(
            event.body,
            event.html_url,
            event.author.login,
            outcome.message,
            about=config.get("about") or DEFAULT_ABOUT,
        )
        client.create_comment(event.org, event.repo, event.number, reply)
        return

    has_lgtm = LGTM_LABEL in _current_labels(client, event)

    if has_lgtm and command is Command.CANCEL:
        logger.info("Removing LGTM label from %s#%d.", event.full_name, event.number)
        client.remove_label(event.org, event.repo, event.number, LGTM_LABEL)
    elif not has_lgtm and command is Command.APPROVE:
        logger.info("Adding LGTM label to %s#%d.", event.full_name, event.number)
        client.add_label(event.org, event.repo, event.number, LGTM_LABEL)
        remove_stale_notifications(client, event.org, event.repo, event.number)


def handle_pull_request(client: GitHubClient, event: PullRequestSyncEvent) -> None:
    """Drop the lgtm label when new commits are pushed to an unmerged PR.

    The label is removed without checking for it first; LabelNotFound is the
    answer to "was it there", and only an actual removal is announced.
    """
    if not event.pushes_new_commits:
        return

    try:
        client.remove_label(event.org, event.repo, event.number, LGTM_LABEL)
    except LabelNotFound:
        return
    except GitHubError as e:
        raise GitHubError(f"failed removing lgtm label: {e}") from e

    logger.info(
        "Create a LGTM removed notification to %s/%s#%d with a message: %s",
        event.org,
        event.repo,
        event.number,
        REMOVE_LGTM_LABEL_NOTIFICATION,
    )
    client.create_comment(event.org, event.repo, event.number, REMOVE_LGTM_LABEL_NOTIFICATION)
