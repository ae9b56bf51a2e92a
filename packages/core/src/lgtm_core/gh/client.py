"""GitHub client interface used by the handlers, and its PyGithub implementation.

Handlers depend on GitHubClient, never on PyGithub directly, so tests can
substitute a recording fake and the handlers stay free of API plumbing.
Every PyGithub failure surfaces as a GitHubError subclass.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from github import Github, GithubException

from lgtm_core.events import norm_login

logger = logging.getLogger(__name__)


class GitHubError(Exception):
    """A GitHub API call failed."""


class LabelNotFound(GitHubError):
    """The label to remove is not present on the issue."""

    def __init__(self, org: str, repo: str, number: int, label: str):
        super().__init__(f"label {label!r} not found on {org}/{repo}#{number}")
        self.label = label


class MissingUsers(GitHubError):
    """GitHub accepted an assignment request but dropped some of the users."""

    def __init__(self, users: list[str], action: str = "assign"):
        super().__init__(f"could not {action} the following user(s): {', '.join(users)}")
        self.users = users


@dataclass(frozen=True)
class PullRequestInfo:
    number: int
    base_ref: str
    author: str


@dataclass(frozen=True)
class IssueComment:
    id: int
    author: str
    body: str


class GitHubClient(ABC):
    """The GitHub operations the lgtm handlers need."""

    @abstractmethod
    def is_collaborator(self, org: str, repo: str, login: str) -> bool: ...

    @abstractmethod
    def add_label(self, org: str, repo: str, number: int, label: str) -> None: ...

    @abstractmethod
    def remove_label(self, org: str, repo: str, number: int, label: str) -> None:
        """Remove label, raising LabelNotFound when it is not on the issue."""

    @abstractmethod
    def assign_issue(self, org: str, repo: str, number: int, logins: list[str]) -> None:
        """Assign logins, raising MissingUsers for any that GitHub refused."""

    @abstractmethod
    def create_comment(self, org: str, repo: str, number: int, body: str) -> None: ...

    @abstractmethod
    def delete_comment(self, org: str, repo: str, number: int, comment_id: int) -> None: ...

    @abstractmethod
    def get_labels(self, org: str, repo: str, number: int) -> list[str]: ...

    @abstractmethod
    def get_pull_request(self, org: str, repo: str, number: int) -> PullRequestInfo: ...

    @abstractmethod
    def get_changed_files(self, org: str, repo: str, number: int) -> list[str]: ...

    @abstractmethod
    def list_comments(self, org: str, repo: str, number: int) -> list[IssueComment]: ...

    @abstractmethod
    def bot_login(self) -> str: ...


class PyGithubClient(GitHubClient):
    """GitHubClient backed by a PyGithub session authenticated with a token.

    ``bot_login`` pins the identity used for stale-notification cleanup. Set
    it when the token cannot read its own user, as with the Actions-injected
    GITHUB_TOKEN whose comments are authored by ``github-actions[bot]``.
    """

    def __init__(self, token: str, gh: Github | None = None, bot_login: str | None = None):
        self._gh = gh if gh is not None else Github(token)
        self._bot_login = bot_login

    def _repo(self, org: str, repo: str):
        return self._gh.get_repo(f"{org}/{repo}")

    def _issue(self, org: str, repo: str, number: int):
        return self._repo(org, repo).get_issue(number)

    def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        try:
            return self._repo(org, repo).has_in_collaborators(login)
        except GithubException as e:
            raise GitHubError(f"failed to check collaborator {login} on {org}/{repo}: {e}") from e

    def add_label(self, org: str, repo: str, number: int, label: str) -> None:
        try:
            self._issue(org, repo, number).add_to_labels(label)
        except GithubException as e:
            raise GitHubError(f"failed to add label {label!r} to {org}/{repo}#{number}: {e}") from e

    def remove_label(self, org: str, repo: str, number: int, label: str) -> None:
        try:
            self._issue(org, repo, number).remove_from_labels(label)
        except GithubException as e:
            if e.status == 404:
                raise LabelNotFound(org, repo, number, label) from e
            raise GitHubError(f"failed to remove label {label!r} from {org}/{repo}#{number}: {e}") from e

    def assign_issue(self, org: str, repo: str, number: int, logins: list[str]) -> None:
        try:
            issue = self._issue(org, repo, number)
            issue.add_to_assignees(*logins)
        except GithubException as e:
            raise GitHubError(f"failed to assign {logins} to {org}/{repo}#{number}: {e}") from e
        # GitHub answers 201 even when it ignores users who cannot be assigned;
        # the refreshed assignee list is the only signal.
        assigned = {norm_login(a.login) for a in issue.assignees}
        missing = [login for login in logins if norm_login(login) not in assigned]
        if missing:
            raise MissingUsers(missing)

    def create_comment(self, org: str, repo: str, number: int, body: str) -> None:
        try:
            self._issue(org, repo, number).create_comment(body)
        except GithubException as e:
            raise GitHubError(f"failed to comment on {org}/{repo}#{number}: {e}") from e

    def delete_comment(self, org: str, repo: str, number: int, comment_id: int) -> None:
        try:
            self._issue(org, repo, number).get_comment(comment_id).delete()
        except GithubException as e:
            raise GitHubError(f"failed to delete comment {comment_id} on {org}/{repo}#{number}: {e}") from e

    def get_labels(self, org: str, repo: str, number: int) -> list[str]:
        try:
            return [label.name for label in self._issue(org, repo, number).get_labels()]
        except GithubException as e:
            raise GitHubError(f"failed to list labels on {org}/{repo}#{number}: {e}") from e

    def get_pull_request(self, org: str, repo: str, number: int) -> PullRequestInfo:
        try:
            pr = self._repo(org, repo).get_pull(number)
        except GithubException as e:
            raise GitHubError(f"failed to get pull request {org}/{repo}#{number}: {e}") from e
        return PullRequestInfo(number=pr.number, base_ref=pr.base.ref, author=pr.user.login)

    def get_changed_files(self, org: str, repo: str, number: int) -> list[str]:
        try:
            return [f.filename for f in self._repo(org, repo).get_pull(number).get_files()]
        except GithubException as e:
            raise GitHubError(f"failed to list changed files on {org}/{repo}#{number}: {e}") from e

    def list_comments(self, org: str, repo: str, number: int) -> list[IssueComment]:
        try:
            return [
                IssueComment(id=c.id, author=c.user.login if c.user else "", body=c.body or "")
                for c in self._issue(org, repo, number).get_comments()
            ]
        except GithubException as e:
            raise GitHubError(f"failed to list comments on {org}/{repo}#{number}: {e}") from e

    def bot_login(self) -> str:
        if self._bot_login is None:
            try:
                self._bot_login = self._gh.get_user().login
            except GithubException as e:
                raise GitHubError(f"failed to resolve the authenticated user: {e}") from e
        return self._bot_login
