import os
from pathlib import Path
from typing import Optional

import yaml

from prgate_core.policy import ALL_STAGES

DEFAULT_CONFIG: dict = {
    "automation_identity": "github-actions[bot]",  # login the automation's own reviews appear under
    "dedupe_approvals": False,  # True = only each reviewer's latest review counts
    "reviewer_count": 1,
    "codeowners_path": ".github/CODEOWNERS",
    "stages": list(ALL_STAGES),
}


def load_config(config_path: str = ".prgate.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prgate.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "stages": list(DEFAULT_CONFIG["stages"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def validate_config(config: dict) -> dict:
    """Reject settings the governor cannot act on. Returns the config unchanged."""
    count = config.get("reviewer_count")
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise ValueError(f"reviewer_count must be a positive integer, got {count!r}.")

    stages = config.get("stages") or []
    unknown = [s for s in stages if s not in ALL_STAGES]
    if unknown:
        raise ValueError(f"Unknown stage(s) in config: {', '.join(unknown)}. Choose from {', '.join(ALL_STAGES)}.")

    if not config.get("automation_identity"):
        raise ValueError("automation_identity must not be empty.")
    return config
