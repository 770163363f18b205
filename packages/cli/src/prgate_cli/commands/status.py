"""status command — show a PR's approval state without changing anything."""

from __future__ import annotations

from collections import Counter

import click
from rich.console import Console
from rich.table import Table

from prgate_core.gh.pull_request import build_snapshot, get_pull, get_repo
from prgate_core.models import Approve, EventType, SnapshotError
from prgate_core.policy import (
    ALL_STAGES,
    STAGE_CHECK,
    count_approvals,
    has_sufficient_approvals,
    plan,
    required_approvals,
)

console = Console()

_STATE_STYLE = {
    "APPROVED": "green",
    "CHANGES_REQUESTED": "red",
    "COMMENTED": "yellow",
    "DISMISSED": "dim",
    "PENDING": "dim",
}


@click.command("status")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option(
    "--event",
    type=click.Choice([e.value for e in EventType]),
    default=EventType.OTHER.value,
    show_default=True,
    help="Event action to plan for.",
)
@click.pass_context
def status_cmd(ctx, repo: str, pr_number: int, event: str):
    """Show labels, reviews, the approval threshold and what `prgate run` would do."""
    from prgate_cli.auth import require_token

    config = ctx.obj["config"]
    token = require_token(config)
    dedupe = bool(config.get("dedupe_approvals", False))
    stages = config.get("stages")
    if stages is None:
        stages = ALL_STAGES

    pr = get_pull(get_repo(repo, token=token), pr_number)
    try:
        snapshot = build_snapshot(pr, event)
    except SnapshotError as e:
        raise click.UsageError(str(e))

    actions = plan(
        snapshot,
        config.get("automation_identity", "github-actions[bot]"),
        stages=stages,
        dedupe_by_reviewer=dedupe,
    )
    # The planned auto-approval is counted by the gate, so the header counts it too.
    pending = any(isinstance(a, Approve) for a in actions)

    required = required_approvals(snapshot.labels)
    actual = count_approvals(snapshot.reviews, dedupe_by_reviewer=dedupe)
    ok = has_sufficient_approvals(required, actual + (1 if pending else 0))

    console.print(f"\n[bold]PR #{pr_number}[/bold] in [cyan]{repo}[/cyan] by {snapshot.event.actor_login}")
    console.print(f"  Labels:    {', '.join(sorted(snapshot.labels)) or '(none)'}")
    verdict = "[green]satisfied[/green]" if ok else "[red]insufficient[/red]"
    pending_note = " (+1 pending auto-approval)" if pending else ""
    console.print(f"  Approvals: {actual} of {required} required{pending_note} ({verdict})")

    if snapshot.reviews:
        table = Table(title="Reviews", show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right", width=4)
        table.add_column("Reviewer")
        table.add_column("State")
        for i, review in enumerate(snapshot.reviews, 1):
            style = _STATE_STYLE.get(review.state.value, "white")
            table.add_row(str(i), review.author_login, f"[{style}]{review.state.value}[/{style}]")
        console.print(table)

        by_state = Counter(r.state.value for r in snapshot.reviews)
        console.print("  " + ", ".join(f"{state}: {n}" for state, n in sorted(by_state.items())))
    else:
        console.print("[yellow]No reviews yet.[/yellow]")

    if not actions:
        console.print("[yellow]No stages selected.[/yellow]")
        return

    plan_table = Table(title=f"Planned actions (event: {snapshot.event.event_type.value})", show_header=True)
    plan_table.add_column("Action", style="bold")
    plan_table.add_column("Detail")
    gate = actions[-1] if STAGE_CHECK in stages else None
    for action in actions:
        detail = action.describe()
        if pending and action is gate:
            detail += " (includes pending auto-approval)"
        plan_table.add_row(action.kind, detail)
    console.print(plan_table)
