import os
from pathlib import Path
from typing import Optional

import yaml

from lgtm_core.owners import DEFAULT_OWNERS_FILE
from lgtm_core.responses import DEFAULT_ABOUT

DEFAULT_CONFIG: dict = {
    "skip_collaborators": [],  # "org" or "org/repo" entries that use OWNERS files instead of assignment
    "owners_file": DEFAULT_OWNERS_FILE,
    "about": DEFAULT_ABOUT,  # footer appended to every formatted reply
    "bot_login": None,  # None = ask GitHub for the authenticated user
}


def load_config(config_path: str = ".lgtm.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .lgtm.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "skip_collaborators": list(DEFAULT_CONFIG["skip_collaborators"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["skip_collaborators"] = [str(entry) for entry in config.get("skip_collaborators") or []]

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def skip_collaborators(config: dict, org: str, repo: str) -> bool:
    """Return True when org or org/repo is listed under skip_collaborators.

    Listed repositories authorize /lgtm through OWNERS files rather than
    through assignment.
    """
    full = f"{org}/{repo}"
    return any(entry == org or entry == full for entry in config.get("skip_collaborators") or [])
