"""Tests for OWNERS parsing, resolution, and loading through the GitHub API."""

import types
from unittest.mock import MagicMock

import pytest
from github import GithubException

from lgtm_core.owners import OwnersError, OwnersView, RepoOwnersLoader, parse_aliases, parse_owners


class TestParseOwners:
    def test_lowercases_logins(self):
        entry = parse_owners({"approvers": ["Alice"], "reviewers": ["@Bob"]})
        assert entry.approvers == {"alice"}
        assert entry.reviewers == {"bob"}

    def test_empty_file(self):
        entry = parse_owners(None)
        assert entry.approvers == set()
        assert entry.reviewers == set()
        assert entry.no_parent_owners is False

    def test_no_parent_owners_option(self):
        assert parse_owners({"options": {"no_parent_owners": True}}).no_parent_owners is True

    def test_aliases_expand(self):
        aliases = parse_aliases({"aliases": {"sig-leads": ["Carol", "dave"]}})
        entry = parse_owners({"approvers": ["sig-leads", "erin"]}, aliases)
        assert entry.approvers == {"carol", "dave", "erin"}

    def test_non_mapping_raises(self):
        with pytest.raises(OwnersError):
            parse_owners(["alice"])

    def test_bad_aliases_raise(self):
        with pytest.raises(OwnersError):
            parse_aliases({"aliases": ["not", "a", "mapping"]})

    def test_scalar_approvers_raise(self):
        with pytest.raises(OwnersError, match="'approvers' must be a list"):
            parse_owners({"approvers": "alice"})

    def test_scalar_reviewers_raise(self):
        with pytest.raises(OwnersError, match="'reviewers' must be a list"):
            parse_owners({"reviewers": "bob"})

    def test_non_mapping_options_raise(self):
        with pytest.raises(OwnersError, match="'options' must be a mapping"):
            parse_owners({"approvers": ["alice"], "options": ["no_parent_owners"]})

    def test_scalar_alias_members_raise(self):
        with pytest.raises(OwnersError, match="alias 'sig-leads'"):
            parse_aliases({"aliases": {"sig-leads": "carol"}})


class TestOwnersView:
    def _view(self):
        return OwnersView.from_files(
            {
                "OWNERS": {"approvers": ["root"], "reviewers": ["root-rev"]},
                "pkg/OWNERS": {"approvers": ["pkg"]},
                "pkg/sub/OWNERS": {"reviewers": ["sub-rev"]},
                "vendor/OWNERS": {"approvers": ["vendor"], "options": {"no_parent_owners": True}},
            }
        )

    def test_root_file(self):
        view = self._view()
        assert view.approvers("README.md") == {"root"}
        assert view.reviewers("README.md") == {"root-rev"}

    def test_inherits_from_ancestors(self):
        view = self._view()
        assert view.approvers("pkg/sub/deep/file.py") == {"root", "pkg"}
        assert view.reviewers("pkg/sub/deep/file.py") == {"root-rev", "sub-rev"}

    def test_no_parent_owners_stops_walk(self):
        view = self._view()
        assert view.approvers("vendor/lib/x.go") == {"vendor"}
        assert view.reviewers("vendor/lib/x.go") == set()

    def test_leading_slash_ignored(self):
        assert self._view().approvers("/pkg/a.py") == {"root", "pkg"}

    def test_no_owners_files(self):
        view = OwnersView.from_files({})
        assert view.approvers("a/b.py") == set()

    def test_scalar_login_is_rejected_with_path(self):
        with pytest.raises(OwnersError, match="^OWNERS: "):
            OwnersView.from_files({"OWNERS": {"approvers": "alice"}})


def _blob(path, kind="blob"):
    return types.SimpleNamespace(path=path, type=kind)


def _contents(text):
    return types.SimpleNamespace(decoded_content=text.encode())


class TestRepoOwnersLoader:
    def _repo(self, files, truncated=False):
        repo = MagicMock()
        repo.get_git_tree.return_value.tree = [_blob(p) for p in files] + [_blob("pkg", kind="tree")]
        repo.get_git_tree.return_value.raw_data = {"truncated": truncated}
        repo.get_contents.side_effect = lambda path, ref: _contents(files[path])
        return repo

    def test_loads_owners_at_ref(self):
        files = {
            "OWNERS": "approvers:\n  - leads\n",
            "OWNERS_ALIASES": "aliases:\n  leads:\n    - alice\n",
            "pkg/OWNERS": "reviewers:\n  - bob\n",
            "pkg/main.py": "print('hi')\n",
        }
        repo = self._repo(files)
        gh = MagicMock()
        gh.get_repo.return_value = repo

        view = RepoOwnersLoader("tok", gh=gh).load("org", "repo", "main")

        gh.get_repo.assert_called_once_with("org/repo")
        repo.get_git_tree.assert_called_once_with("main", recursive=True)
        fetched = {c.args[0] for c in repo.get_contents.call_args_list}
        assert fetched == {"OWNERS", "OWNERS_ALIASES", "pkg/OWNERS"}
        assert view.approvers("pkg/main.py") == {"alice"}
        assert view.reviewers("pkg/main.py") == {"bob"}

    def test_custom_owners_file_name(self):
        repo = self._repo({"CODE_OWNERS": "approvers: [alice]\n", "OWNERS": "approvers: [bob]\n"})
        gh = MagicMock()
        gh.get_repo.return_value = repo

        view = RepoOwnersLoader("tok", owners_file="CODE_OWNERS", gh=gh).load("org", "repo", "main")

        assert view.approvers("x.py") == {"alice"}

    def test_invalid_yaml_raises(self):
        gh = MagicMock()
        gh.get_repo.return_value = self._repo({"OWNERS": "approvers: [alice\n"})

        with pytest.raises(OwnersError, match="cannot parse OWNERS"):
            RepoOwnersLoader("tok", gh=gh).load("org", "repo", "main")

    def test_tree_failure_raises(self):
        gh = MagicMock()
        gh.get_repo.return_value.get_git_tree.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(OwnersError, match="org/repo@main"):
            RepoOwnersLoader("tok", gh=gh).load("org", "repo", "main")

    def test_truncated_tree_warns(self, caplog):
        gh = MagicMock()
        gh.get_repo.return_value = self._repo({"OWNERS": "approvers: [alice]\n"}, truncated=True)

        with caplog.at_level("WARNING", logger="lgtm_core.owners"):
            view = RepoOwnersLoader("tok", gh=gh).load("org", "repo", "main")

        assert view.approvers("x.py") == {"alice"}
        assert "truncated" in caplog.text

    def test_complete_tree_does_not_warn(self, caplog):
        gh = MagicMock()
        gh.get_repo.return_value = self._repo({"OWNERS": "approvers: [alice]\n"})

        with caplog.at_level("WARNING", logger="lgtm_core.owners"):
            RepoOwnersLoader("tok", gh=gh).load("org", "repo", "main")

        assert "truncated" not in caplog.text

    def test_malformed_owners_file_raises(self):
        gh = MagicMock()
        gh.get_repo.return_value = self._repo({"pkg/OWNERS": "options:\n  - no_parent_owners\n"})

        with pytest.raises(OwnersError, match="pkg/OWNERS"):
            RepoOwnersLoader("tok", gh=gh).load("org", "repo", "main")
