"""OWNERS file resolution.

An OWNERS file lists who may review and approve changes beneath its
directory:

    approvers:
      - alice
      - sig-leads        # alias, expanded via OWNERS_ALIASES
    reviewers:
      - bob
    options:
      no_parent_owners: true

Entries accumulate from a file's directory up to the repository root; a file
that sets ``no_parent_owners`` stops the walk after itself. A root
``OWNERS_ALIASES`` file maps alias names to login lists:

    aliases:
      sig-leads:
        - carol
        - dave

All logins are stored lower-cased.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field

import yaml
from github import Github, GithubException

from lgtm_core.events import norm_login

logger = logging.getLogger(__name__)

DEFAULT_OWNERS_FILE = "OWNERS"
ALIASES_FILE = "OWNERS_ALIASES"


class OwnersError(Exception):
    """OWNERS data could not be loaded or parsed."""


@dataclass(frozen=True)
class OwnersEntry:
    approvers: frozenset[str] = field(default_factory=frozenset)
    reviewers: frozenset[str] = field(default_factory=frozenset)
    no_parent_owners: bool = False


def _members(value, where: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise OwnersError(f"{where} must be a list of logins, got {type(value).__name__}")
    return value


def _expand(names: list, aliases: dict[str, frozenset[str]]) -> frozenset[str]:
    logins: set[str] = set()
    for name in names:
        key = norm_login(str(name))
        logins |= aliases.get(key, {key})
    return frozenset(login for login in logins if login)


def parse_aliases(data: dict | None) -> dict[str, frozenset[str]]:
    """Turn the parsed OWNERS_ALIASES mapping into alias → logins."""
    data = data or {}
    if not isinstance(data, dict):
        raise OwnersError(f"{ALIASES_FILE} content must be a mapping")
    raw = data.get("aliases") or {}
    if not isinstance(raw, dict):
        raise OwnersError(f"{ALIASES_FILE}: 'aliases' must be a mapping")
    result = {}
    for name, members in raw.items():
        logins = _members(members, f"{ALIASES_FILE}: alias {name!r}")
        result[norm_login(str(name))] = frozenset(norm_login(str(m)) for m in logins)
    return result


def parse_owners(data: dict | None, aliases: dict[str, frozenset[str]] | None = None) -> OwnersEntry:
    """Turn one parsed OWNERS mapping into an OwnersEntry, expanding aliases."""
    data = data or {}
    if not isinstance(data, dict):
        raise OwnersError("OWNERS content must be a mapping")
    aliases = aliases or {}
    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise OwnersError("OWNERS 'options' must be a mapping")
    return OwnersEntry(
        approvers=_expand(_members(data.get("approvers"), "OWNERS 'approvers'"), aliases),
        reviewers=_expand(_members(data.get("reviewers"), "OWNERS 'reviewers'"), aliases),
        no_parent_owners=bool(options.get("no_parent_owners", False)),
    )


class OwnersView:
    """Approvers and reviewers for every path of one repository at one ref."""

    def __init__(self, entries: dict[str, OwnersEntry]):
        # keyed by directory, "" being the repository root
        self._entries = entries

    @classmethod
    def from_files(cls, files: dict[str, dict | None], aliases: dict | None = None) -> OwnersView:
        """Build a view from parsed OWNERS contents keyed by the file's path."""
        alias_map = parse_aliases(aliases)
        entries = {}
        for path, data in files.items():
            try:
                entries[posixpath.dirname(path.strip("/"))] = parse_owners(data, alias_map)
            except OwnersError as e:
                raise OwnersError(f"{path}: {e}") from e
        return cls(entries)

    def _chain(self, path: str):
        directory = posixpath.dirname(path.strip("/"))
        while True:
            entry = self._entries.get(directory)
            if entry is not None:
                yield entry
                if entry.no_parent_owners:
                    return
            if not directory:
                return
            directory = posixpath.dirname(directory)

    def approvers(self, path: str) -> set[str]:
        result: set[str] = set()
        for entry in self._chain(path):
            result |= entry.approvers
        return result

    def reviewers(self, path: str) -> set[str]:
        result: set[str] = set()
        for entry in self._chain(path):
            result |= entry.reviewers
        return result


def _load_yaml(text: str, path: str):
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise OwnersError(f"cannot parse {path}: {e}") from e


class RepoOwnersLoader:
    """Loads an OwnersView for a repository ref through the GitHub API.

    The whole tree is fetched once per load; each OWNERS file then costs one
    content request. Nothing is cached between loads.
    """

    def __init__(self, token: str, owners_file: str = DEFAULT_OWNERS_FILE, gh: Github | None = None):
        self._gh = gh if gh is not None else Github(token)
        self._owners_file = owners_file

    def load(self, org: str, repo: str, ref: str) -> OwnersView:
        try:
            repository = self._gh.get_repo(f"{org}/{repo}")
            tree = repository.get_git_tree(ref, recursive=True)
        except GithubException as e:
            raise OwnersError(f"cannot read the tree of {org}/{repo}@{ref}: {e}") from e
        if tree.raw_data.get("truncated"):
            logger.warning(
                "Tree listing of %s/%s@%s was truncated by GitHub; OWNERS files beyond the cut are ignored.",
                org,
                repo,
                ref,
            )

        paths = [
            f.path
            for f in tree.tree
            if f.type == "blob" and posixpath.basename(f.path) in (self._owners_file, ALIASES_FILE)
        ]

        files: dict[str, dict | None] = {}
        aliases = None
        for path in paths:
            if posixpath.basename(path) == ALIASES_FILE and path != ALIASES_FILE:
                continue  # only the root aliases file applies
            try:
                text = repository.get_contents(path, ref=ref).decoded_content.decode("utf-8", errors="replace")
            except GithubException as e:
                raise OwnersError(f"cannot read {org}/{repo}@{ref}:{path}: {e}") from e
            if path == ALIASES_FILE:
                aliases = _load_yaml(text, path)
            else:
                files[path] = _load_yaml(text, path)

        logger.debug("Loaded %d OWNERS file(s) for %s/%s@%s", len(files), org, repo, ref)
        return OwnersView.from_files(files, aliases)
