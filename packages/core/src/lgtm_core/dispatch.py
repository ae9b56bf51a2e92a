"""Routing of raw GitHub webhook payloads to the lgtm handlers."""

from __future__ import annotations

import logging

from lgtm_core.events import comment_event_from_payload, sync_event_from_payload
from lgtm_core.gh.client import GitHubClient
from lgtm_core.handlers import handle_comment, handle_pull_request

logger = logging.getLogger(__name__)

COMMENT_EVENTS = ("issue_comment", "pull_request_review", "pull_request_review_comment")
PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")


def dispatch(event_name: str, payload: dict, client: GitHubClient, config: dict, owners_loader) -> bool:
    """Run the handler for event_name and return whether one ran.

    Handler errors propagate to the caller.
    """
    if event_name in COMMENT_EVENTS:
        event = comment_event_from_payload(event_name, payload)
        if event is None:
            logger.debug("Ignoring %s event with action %r.", event_name, payload.get("action"))
            return False
        handle_comment(client, config, owners_loader, event)
        return True

    if event_name in PULL_REQUEST_EVENTS:
        event = sync_event_from_payload(payload)
        if not event.pushes_new_commits:
            logger.debug("Ignoring %s event with action %r.", event_name, event.action)
            return False
        handle_pull_request(client, event)
        return True

    logger.debug("No lgtm handler for %s events.", event_name)
    return False
