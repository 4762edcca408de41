import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "rules_store": "file",  # "file" = local path, "repo" = file in the admin repository
    "rules_path": "approval-rules.yml",
    "admin_repo": None,  # "owner/name" of the admin repository (rules_store: repo)
    "admin_ref": "main",
    "org": None,  # organization owning the teams; None = owner of the checked repo
    "check_name": "Team approvals",
    "report": "check",  # "check" = check run, "status" = commit status
}


def _env_overrides() -> dict:
    """Admin repository settings from the environment, as the GitHub App deployment sets them."""
    overrides: dict = {}
    org = os.environ.get("ADMIN_REPO_ORG")
    name = os.environ.get("ADMIN_REPO_NAME")
    if org and name:
        overrides["admin_repo"] = f"{org}/{name}"
    if os.environ.get("ADMIN_REPO_PATH"):
        overrides["rules_path"] = os.environ["ADMIN_REPO_PATH"]
    if os.environ.get("ADMIN_REPO_REF"):
        overrides["admin_ref"] = os.environ["ADMIN_REPO_REF"]
    return overrides


def load_config(config_path: str = ".teamgate.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .teamgate.yml in the current directory
      3. ADMIN_REPO_* environment variables
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    config.update(_env_overrides())

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
