"""Event snapshots handed to the handlers, built from GitHub webhook payloads.

Each event is a frozen dataclass created for a single handler invocation.
The payload parsers accept the JSON GitHub delivers to webhooks and to
Actions (``$GITHUB_EVENT_PATH``) and map the three comment-bearing event
types onto one ``CommentEvent`` shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


def norm_login(login: str) -> str:
    """GitHub logins are case-insensitive; compare them lower-cased without a leading @."""
    return (login or "").strip().lstrip("@").lower()


class CommentAction(str, Enum):
    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"


@dataclass(frozen=True)
class Actor:
    login: str

    @property
    def normalized(self) -> str:
        return norm_login(self.login)

    def same_as(self, other: Actor) -> bool:
        return self.normalized == other.normalized


@dataclass(frozen=True)
class CommentEvent:
    """A new, edited or deleted comment on an issue or pull request."""

    is_pull_request: bool
    issue_state: str  # "open" | "closed"
    action: CommentAction
    body: str
    author: Actor
    issue_author: Actor
    org: str
    repo: str
    number: int
    html_url: str = ""
    assignees: tuple[Actor, ...] = field(default_factory=tuple)

    @property
    def is_assignee(self) -> bool:
        return any(self.author.same_as(a) for a in self.assignees)

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.repo}"


@dataclass(frozen=True)
class PullRequestSyncEvent:
    """A ``pull_request`` webhook event reduced to what the label revocation needs."""

    action: str
    merged: bool
    org: str
    repo: str
    number: int

    @property
    def pushes_new_commits(self) -> bool:
        return self.action == "synchronize" and not self.merged


# review actions that correspond to a freshly created comment
_REVIEW_ACTIONS = {
    "submitted": CommentAction.CREATED,
    "edited": CommentAction.EDITED,
    "dismissed": CommentAction.DELETED,
}


def _actor(user: dict | None) -> Actor:
    return Actor(login=(user or {}).get("login", ""))


def _action(raw: str, mapping: dict | None = None) -> CommentAction | None:
    if mapping is not None:
        return mapping.get(raw)
    try:
        return CommentAction(raw)
    except ValueError:
        return None


def comment_event_from_payload(event_name: str, payload: dict) -> CommentEvent | None:
    """Build a CommentEvent from a webhook payload, or None for unsupported events.

    Supported event names:
      issue_comment               — comments on issues and pull requests
      pull_request_review         — the top-level body of a submitted review
      pull_request_review_comment — inline diff comments
    """
    repository = payload.get("repository") or {}
    org = (repository.get("owner") or {}).get("login", "")
    repo = repository.get("name", "")

    if event_name == "issue_comment":
        issue = payload.get("issue") or {}
        comment = payload.get("comment") or {}
        action = _action(payload.get("action", ""))
        if action is None:
            return None
        return CommentEvent(
            is_pull_request="pull_request" in issue,
            issue_state=issue.get("state", ""),
            action=action,
            body=comment.get("body") or "",
            author=_actor(comment.get("user")),
            issue_author=_actor(issue.get("user")),
            assignees=tuple(_actor(a) for a in issue.get("assignees") or []),
            org=org,
            repo=repo,
            number=issue.get("number", 0),
            html_url=comment.get("html_url", ""),
        )

    if event_name in ("pull_request_review", "pull_request_review_comment"):
        pr = payload.get("pull_request") or {}
        if event_name == "pull_request_review":
            source = payload.get("review") or {}
            action = _action(payload.get("action", ""), _REVIEW_ACTIONS)
        else:
            source = payload.get("comment") or {}
            action = _action(payload.get("action", ""))
        if action is None:
            return None
        return CommentEvent(
            is_pull_request=True,
            issue_state=pr.get("state", ""),
            action=action,
            body=source.get("body") or "",
            author=_actor(source.get("user")),
            issue_author=_actor(pr.get("user")),
            assignees=tuple(_actor(a) for a in pr.get("assignees") or []),
            org=org,
            repo=repo,
            number=pr.get("number", 0),
            html_url=source.get("html_url", ""),
        )

    return None


def sync_event_from_payload(payload: dict) -> PullRequestSyncEvent:
    """Build a PullRequestSyncEvent from a ``pull_request`` payload.

    The repository is taken from the PR's base so events delivered for forks
    still act on the repository that owns the label.
    """
    pr = payload.get("pull_request") or {}
    base_repo = (pr.get("base") or {}).get("repo") or {}
    return PullRequestSyncEvent(
        action=payload.get("action", ""),
        merged=bool(pr.get("merged", False)),
        org=(base_repo.get("owner") or {}).get("login", ""),
        repo=base_repo.get("name", ""),
        number=pr.get("number", payload.get("number", 0)),
    )
