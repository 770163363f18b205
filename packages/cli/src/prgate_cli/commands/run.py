"""run command — apply assignment and approval policy to a pull request."""

from __future__ import annotations

import click
from rich.console import Console

from prgate_core.events import EventError, load_event
from prgate_core.gh.pull_request import get_repo
from prgate_core.governor import run_governance
from prgate_core.models import EventType, SnapshotError
from prgate_core.policy import ALL_STAGES

console = Console()

_EVENT_CHOICES = [e.value for e in EventType]


def resolve_target(
    repo: str | None,
    pr_number: int | None,
    event: str | None,
    event_path: str | None,
) -> tuple[str, int, EventType, str | None]:
    """Work out which PR to govern: explicit options, else the Actions event payload.

    Returns ``(repo, pr_number, event_type, actor_login)``.
    """
    if pr_number is not None:
        if not repo:
            raise click.UsageError("--repo is required when --pr is given.")
        return repo, pr_number, EventType.parse(event), None

    try:
        ctx = load_event(event_path)
    except EventError as e:
        raise click.UsageError(str(e))

    event_type = EventType.parse(event) if event else ctx.event_type
    return repo or ctx.repo, ctx.pr_number, event_type, ctx.actor_login


@click.command("run")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Read from the event payload if omitted.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number. Read from the event payload if omitted.")
@click.option(
    "--event",
    type=click.Choice(_EVENT_CHOICES),
    default=None,
    help="Event action to evaluate (e.g. opened). Defaults to the payload's action, or 'other'.",
)
@click.option(
    "--event-path",
    default=None,
    help="Path to a webhook payload JSON file. Defaults to $GITHUB_EVENT_PATH.",
)
@click.option(
    "--stage",
    "stages",
    type=click.Choice(list(ALL_STAGES)),
    multiple=True,
    help="Stage to run (repeatable). Defaults to the stages in the config file.",
)
@click.option("--dry-run", is_flag=True, help="Print the planned actions without calling GitHub.")
@click.pass_context
def run_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    event: str | None,
    event_path: str | None,
    stages: tuple[str, ...],
    dry_run: bool,
):
    """Apply assignment and approval policy to a pull request.

    \b
    Stages, always evaluated in this order:
      assign   assign the PR author when the PR is opened
      approve  approve PRs labeled documentation or hotfix (once)
      check    fail unless the PR has enough approvals
               (1 with the documentation label, otherwise 2)

    Exits non-zero when the check stage finds too few approvals.
    """
    from prgate_cli.auth import require_token

    config = ctx.obj["config"]
    token = require_token(config)

    repo, pr_number, event_type, actor = resolve_target(repo, pr_number, event, event_path)

    this_repo = get_repo(repo, token=token)

    try:
        summary = run_governance(
            repo=repo,
            pr_number=pr_number,
            config=config,
            event_type=event_type,
            actor_login=actor,
            stages=stages or None,
            dry_run=dry_run,
            repo_obj=this_repo,
        )
    except SnapshotError as e:
        raise click.UsageError(str(e))
    except ValueError as e:
        raise click.ClickException(str(e))

    block = summary.block
    if block is not None:
        raise click.ClickException(block.describe())

    console.print("[bold green]Done.[/bold green]")
