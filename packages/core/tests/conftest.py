"""Shared fixtures: a recording GitHubClient fake and event builders."""

from __future__ import annotations

import pytest

from lgtm_core.events import Actor, CommentAction, CommentEvent
from lgtm_core.gh.client import GitHubClient, GitHubError, IssueComment, LabelNotFound, MissingUsers, PullRequestInfo


class FakeGitHubClient(GitHubClient):
    """In-memory GitHub that records every call.

    Set ``fail[<method name>] = exc`` to make a method raise exc.
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self.labels: set[str] = set()
        self.assignees: set[str] = set()
        self.collaborators: set[str] = {"alice", "bob"}
        self.comments: list[IssueComment] = []
        self.created_comments: list[str] = []
        self.changed_files: list[str] = []
        self.base_ref = "main"
        self.pr_author = "author"
        self.bot = "lgtm-bot"
        self.fail: dict[str, Exception] = {}

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise self.fail[name]

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def is_collaborator(self, org, repo, login):
        self._record("is_collaborator", org, repo, login)
        return login in self.collaborators

    def add_label(self, org, repo, number, label):
        self._record("add_label", org, repo, number, label)
        self.labels.add(label)

    def remove_label(self, org, repo, number, label):
        self._record("remove_label", org, repo, number, label)
        if label not in self.labels:
            raise LabelNotFound(org, repo, number, label)
        self.labels.discard(label)

    def assign_issue(self, org, repo, number, logins):
        self._record("assign_issue", org, repo, number, list(logins))
        missing = [login for login in logins if login not in self.collaborators]
        if missing:
            raise MissingUsers(missing)
        self.assignees.update(logins)

    def create_comment(self, org, repo, number, body):
        self._record("create_comment", org, repo, number, body)
        self.created_comments.append(body)

    def delete_comment(self, org, repo, number, comment_id):
        self._record("delete_comment", org, repo, number, comment_id)
        self.comments = [c for c in self.comments if c.id != comment_id]

    def get_labels(self, org, repo, number):
        self._record("get_labels", org, repo, number)
        return sorted(self.labels)

    def get_pull_request(self, org, repo, number):
        self._record("get_pull_request", org, repo, number)
        return PullRequestInfo(number=number, base_ref=self.base_ref, author=self.pr_author)

    def get_changed_files(self, org, repo, number):
        self._record("get_changed_files", org, repo, number)
        return list(self.changed_files)

    def list_comments(self, org, repo, number):
        self._record("list_comments", org, repo, number)
        return list(self.comments)

    def bot_login(self):
        self._record("bot_login")
        return self.bot


class FakeOwnersLoader:
    def __init__(self, view=None, error: Exception | None = None):
        self.view = view
        self.error = error
        self.loads: list[tuple] = []

    def load(self, org, repo, ref):
        self.loads.append((org, repo, ref))
        if self.error is not None:
            raise self.error
        return self.view


def make_event(
    body="/lgtm",
    author="alice",
    issue_author="author",
    assignees=(),
    is_pull_request=True,
    issue_state="open",
    action=CommentAction.CREATED,
    org="org",
    repo="repo",
    number=7,
):
    return CommentEvent(
        is_pull_request=is_pull_request,
        issue_state=issue_state,
        action=action,
        body=body,
        author=Actor(author),
        issue_author=Actor(issue_author),
        assignees=tuple(Actor(a) for a in assignees),
        org=org,
        repo=repo,
        number=number,
        html_url="https://github.com/org/repo/pull/7#issuecomment-1",
    )


@pytest.fixture
def client():
    return FakeGitHubClient()


@pytest.fixture
def config():
    return {"skip_collaborators": [], "owners_file": "OWNERS", "about": "about text"}


@pytest.fixture
def transient_error():
    return GitHubError("502 Bad Gateway")


@pytest.fixture
def comment_event():
    """Factory fixture building CommentEvents; defaults describe /lgtm from a collaborator."""
    return make_event


@pytest.fixture
def owners_loader_factory():
    return FakeOwnersLoader
