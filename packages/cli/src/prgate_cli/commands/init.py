"""init command — write .prgate.yml and a GitHub Actions workflow."""

from __future__ import annotations

import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

from prgate_core.config import DEFAULT_CONFIG

console = Console()

_WORKFLOW_TEMPLATE = """\
name: PR Gate

on:
  pull_request:
    types: [opened, labeled, unlabeled, edited]
  pull_request_review:
    types: [submitted, dismissed, edited]

jobs:
  gate:
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: write

    steps:
      - uses: actions/checkout@v4

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install prgate
        run: pip install "prgate=={version}"
{reviewers_step}
      - name: Apply PR policy
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
        run: prgate run
"""

_REVIEWERS_STEP = """
      - name: Request reviewers
        if: github.event_name == 'pull_request' && github.event.action == 'opened'
        env:
          GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}
        run: |
          prgate request-reviewers \\
            --repo ${{ github.repository }} \\
            --pr ${{ github.event.pull_request.number }}
"""


@click.command("init")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Auto-detected from git remote.")
def init_cmd(repo: str | None):
    """Set up prgate for a repository.

    Creates .prgate.yml and optionally a GitHub Actions workflow that runs
    `prgate run` on pull request and review events.
    """
    console.print("\n[bold cyan]prgate init[/bold cyan] — repository setup\n")

    if repo is None:
        repo = _detect_repo_from_git()
        if repo:
            console.print(f"[dim]Detected repository: {repo}[/dim]")
        else:
            repo = click.prompt("GitHub repository (owner/name)")

    identity = click.prompt(
        "Login the automation reviews as",
        default=DEFAULT_CONFIG["automation_identity"],
    )
    dedupe = click.confirm(
        "Count only each reviewer's latest review towards the approval threshold?",
        default=DEFAULT_CONFIG["dedupe_approvals"],
    )

    config: dict = {"automation_identity": identity, "dedupe_approvals": dedupe}

    use_codeowners = click.confirm("Request reviewers from CODEOWNERS when a PR is opened?", default=False)
    if use_codeowners:
        config["codeowners_path"] = click.prompt("CODEOWNERS path", default=DEFAULT_CONFIG["codeowners_path"])
        config["reviewer_count"] = click.prompt(
            "Reviewers per PR", type=click.IntRange(min=1), default=DEFAULT_CONFIG["reviewer_count"]
        )

    _write_config(config)
    console.print("[green]Created .prgate.yml[/green]")

    setup_ci = click.confirm("\nGenerate .github/workflows/prgate.yml for GitHub Actions?", default=True)
    if setup_ci:
        _write_workflow(with_reviewers=use_codeowners)
        console.print("[green]Created .github/workflows/prgate.yml[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print(f"Check a PR with: [bold]prgate status --repo {repo} --pr <number>[/bold]")


def _detect_repo_from_git() -> str | None:
    """Try to detect the GitHub repo slug from the git remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        # https://github.com/owner/repo.git  ->  owner/repo
        # git@github.com:owner/repo.git      ->  owner/repo
        if "github.com" not in url:
            return None
        slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
        return slug if "/" in slug else None
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def _write_config(config: dict) -> None:
    """Write or update .prgate.yml, preserving any existing keys."""
    path = Path(".prgate.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _get_version() -> str:
    try:
        from importlib.metadata import version

        return version("prgate")
    except Exception:
        return "0.1.0"


def _write_workflow(with_reviewers: bool = False) -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    (workflow_dir / "prgate.yml").write_text(
        _WORKFLOW_TEMPLATE.format(
            version=_get_version(),
            reviewers_step=_REVIEWERS_STEP if with_reviewers else "",
        )
    )
