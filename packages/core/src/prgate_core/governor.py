"""Governance run orchestration: fetch, decide, act."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from github import GithubException
from rich.console import Console

from prgate_core.codeowners import load_owners, select_reviewers
from prgate_core.gh.pull_request import (
    add_assignee,
    build_snapshot,
    get_pull,
    get_repo,
    request_reviewers,
    submit_approval,
)
from prgate_core.models import Action, Approve, Assign, Block, EventType, NoOp, PullRequestSnapshot
from prgate_core.policy import ALL_STAGES, count_approvals, plan, required_approvals

console = Console()
logger = logging.getLogger(__name__)

_ACTION_STYLE = {"assign": "cyan", "approve": "green", "block": "red", "noop": "dim"}


@dataclass
class GovernanceSummary:
    """Result of one governance run.

    ``executed`` lists the actions whose side effects were carried out;
    in dry-run mode it stays empty. A Block is never executed: the caller
    turns it into a failed run.
    """

    repo: str
    pr_number: int
    snapshot: PullRequestSnapshot
    actions: list[Action] = field(default_factory=list)
    executed: list[Action] = field(default_factory=list)
    dry_run: bool = False

    @property
    def block(self) -> Block | None:
        for action in self.actions:
            if isinstance(action, Block):
                return action
        return None

    @property
    def blocked(self) -> bool:
        return self.block is not None


def _fetch_pull(this_repo, repo: str, pr_number: int):
    try:
        return get_pull(this_repo, pr_number)
    except GithubException:
        raise ValueError(f"PR #{pr_number} not found in {repo}.")


def print_plan(actions: list[Action]) -> None:
    """Print planned actions to the terminal without executing them."""
    if not actions:
        console.print("[yellow]Dry run: no stages selected.[/yellow]")
        return
    console.print(f"\n[bold]Dry run — {len(actions)} planned action(s) (not executed)[/bold]\n")
    for action in actions:
        style = _ACTION_STYLE.get(action.kind, "white")
        console.print(f"  [{style}]{action.kind.upper():<8}[/{style}] {action.describe()}")


def execute_action(pr, action: Action) -> bool:
    """Carry out a single action against the PR. Returns True if the API was called."""
    if isinstance(action, Assign):
        add_assignee(pr, action.user)
        console.print(f"[cyan]Assigned {action.user} to PR #{pr.number}[/cyan]")
        return True
    if isinstance(action, Approve):
        submit_approval(pr, action.message)
        console.print(f"[green]Approved PR #{pr.number}: {action.message}[/green]")
        return True
    if isinstance(action, NoOp):
        logger.info("No action: %s", action.reason)
        console.print(f"[dim]{action.describe()}[/dim]")
        return False
    if isinstance(action, Block):
        # Reported by the caller; nothing to post.
        return False
    raise TypeError(f"Unknown action: {action!r}")


def run_governance(
    repo: str,
    pr_number: int,
    config: dict,
    event_type: EventType | str = EventType.OTHER,
    actor_login: str | None = None,
    stages=None,
    dry_run: bool = False,
    repo_obj=None,
) -> GovernanceSummary:
    """Run the governance stages for one PR and return a GovernanceSummary.

    Actions are executed in order; the first API failure propagates and
    aborts the run.
    """
    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=config["github_token"])
    this_pr = _fetch_pull(this_repo, repo, pr_number)

    snapshot = build_snapshot(this_pr, event_type, actor_login)
    identity = config.get("automation_identity", "github-actions[bot]")
    dedupe = bool(config.get("dedupe_approvals", False))
    if stages is None:
        stages = config.get("stages")
    if stages is None:
        stages = ALL_STAGES
    stages = list(stages)

    label_str = ", ".join(sorted(snapshot.labels)) or "(none)"
    console.print(
        f"[bold]PR #{pr_number}[/bold] in {repo}: event={snapshot.event.event_type.value}, "
        f"labels={label_str}, "
        f"approvals={count_approvals(snapshot.reviews, dedupe_by_reviewer=dedupe)}"
        f"/{required_approvals(snapshot.labels)}"
    )

    actions = plan(snapshot, identity, stages=stages, dedupe_by_reviewer=dedupe)
    summary = GovernanceSummary(repo=repo, pr_number=pr_number, snapshot=snapshot, actions=actions, dry_run=dry_run)

    if dry_run:
        print_plan(actions)
        return summary

    for action in actions:
        if execute_action(this_pr, action):
            summary.executed.append(action)

    return summary


def assign_reviewers(
    repo: str,
    pr_number: int,
    config: dict,
    rng: random.Random | None = None,
    dry_run: bool = False,
    repo_obj=None,
) -> list[str]:
    """Request reviews from randomly chosen CODEOWNERS, never the PR author.

    Returns the logins selected (requested, unless ``dry_run``).
    """
    owners = load_owners(config.get("codeowners_path", ".github/CODEOWNERS"))

    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=config["github_token"])
    this_pr = _fetch_pull(this_repo, repo, pr_number)

    author = this_pr.user.login if this_pr.user is not None else None
    selected = select_reviewers(owners, config.get("reviewer_count", 1), exclude=[author] if author else [], rng=rng)

    if not selected:
        console.print("[yellow]No eligible reviewers found in CODEOWNERS.[/yellow]")
        return []

    if dry_run:
        console.print(f"[bold]Dry run:[/bold] would request review from {', '.join(selected)}")
        return selected

    request_reviewers(this_pr, selected)
    console.print(f"[cyan]Requested review from {', '.join(selected)} on PR #{pr_number}[/cyan]")
    return selected
