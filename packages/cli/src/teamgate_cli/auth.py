"""GitHub token resolution.

Resolution order (stops at first success):
  1. TEAMGATE_TOKEN — a dedicated token, typically a PAT with read:org so
     team membership is visible
  2. GITHUB_TOKEN / GH_TOKEN — what Actions and the gh CLI export
  3. `gh auth token` — an existing GitHub CLI session
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

_TOKEN_ENV_VARS = ("TEAMGATE_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")


def _token_from_gh_cli() -> str | None:
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no source provides one."""
    for name in _TOKEN_ENV_VARS:
        token = os.environ.get(name)
        if token:
            logger.debug("Using GitHub token from %s", name)
            return token

    token = _token_from_gh_cli()
    if token:
        logger.debug("Using GitHub token from gh CLI session")
    return token
