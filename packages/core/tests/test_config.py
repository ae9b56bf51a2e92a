"""Tests for configuration loading."""

from lgtm_core.config import load_config, skip_collaborators
from lgtm_core.responses import DEFAULT_ABOUT


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["skip_collaborators"] == []
    assert config["owners_file"] == "OWNERS"
    assert config["about"] == DEFAULT_ABOUT
    assert config["bot_login"] is None


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("owners_file: CODE_OWNERS\nbot_login: github-actions[bot]\n")
    config = load_config(config_path=str(cfg))
    assert config["owners_file"] == "CODE_OWNERS"
    assert config["bot_login"] == "github-actions[bot]"


def test_skip_collaborators_loaded(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("skip_collaborators:\n  - kubernetes\n  - org/repo\n")
    config = load_config(config_path=str(cfg))
    assert config["skip_collaborators"] == ["kubernetes", "org/repo"]


def test_null_skip_collaborators_becomes_empty_list(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("skip_collaborators:\n")
    assert load_config(config_path=str(cfg))["skip_collaborators"] == []


def test_empty_config_file(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("")
    assert load_config(config_path=str(cfg))["owners_file"] == "OWNERS"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("owners_file: CODE_OWNERS\n")
    config = load_config(config_path=str(cfg), cli_overrides={"owners_file": "OWNERS"})
    assert config["owners_file"] == "OWNERS"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("owners_file: CODE_OWNERS\n")
    config = load_config(config_path=str(cfg), cli_overrides={"owners_file": None})
    assert config["owners_file"] == "CODE_OWNERS"


def test_env_token_loaded(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path="nonexistent.yml")
    assert config["github_token"] == "gh-token"


def test_skip_list_is_not_shared_reference(tmp_path):
    """Mutating one config's skip list must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["skip_collaborators"].append("org")
    assert config_b["skip_collaborators"] == []


class TestSkipCollaborators:
    def test_org_match(self):
        assert skip_collaborators({"skip_collaborators": ["org"]}, "org", "repo")

    def test_full_name_match(self):
        assert skip_collaborators({"skip_collaborators": ["org/repo"]}, "org", "repo")

    def test_other_repo_in_same_org(self):
        assert not skip_collaborators({"skip_collaborators": ["org/other"]}, "org", "repo")

    def test_prefix_is_not_a_match(self):
        assert not skip_collaborators({"skip_collaborators": ["or", "org/rep"]}, "org", "repo")

    def test_missing_key(self):
        assert not skip_collaborators({}, "org", "repo")
