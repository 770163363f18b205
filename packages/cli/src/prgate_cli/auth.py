"""GitHub token resolution.

Resolution order (stops at first success):
  1. INPUT_TOKEN — the ``token`` input when prgate runs as a workflow step
  2. GITHUB_TOKEN environment variable
  3. `gh auth token` (GitHub CLI session, for local runs)
"""

from __future__ import annotations

import logging
import os
import subprocess

import click

logger = logging.getLogger(__name__)

_TOKEN_ENV_VARS = ("INPUT_TOKEN", "GITHUB_TOKEN")


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no valid source is available.

    Never raises — callers should check for None and emit a UsageError.
    """
    for var in _TOKEN_ENV_VARS:
        token = os.environ.get(var, "").strip()
        if token:
            logger.debug("Resolved GitHub token from %s.", var)
            return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh not installed or hung
        pass

    return None


def require_token(config: dict) -> str:
    """Return the resolved token from ``config`` or fail with a UsageError."""
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN (or the action's `token` input) "
            "or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return token
