"""request-reviewers command — request reviews from CODEOWNERS."""

from __future__ import annotations

import click

from prgate_core.gh.pull_request import get_repo
from prgate_core.governor import assign_reviewers


@click.command("request-reviewers")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--count", type=click.IntRange(min=1), default=None, help="Number of reviewers. Overrides config file.")
@click.option("--codeowners", "codeowners_path", default=None, help="Path to a CODEOWNERS file. Overrides config file.")
@click.option("--seed", type=int, default=None, hidden=True)
@click.option("--dry-run", is_flag=True, help="Print the chosen reviewers without requesting them.")
@click.pass_context
def request_reviewers_cmd(
    ctx,
    repo: str,
    pr_number: int,
    count: int | None,
    codeowners_path: str | None,
    seed: int | None,
    dry_run: bool,
):
    """Request reviews from owners listed in CODEOWNERS.

    Owners are drawn uniformly at random; the PR author is never picked.
    """
    import random

    from prgate_cli.auth import require_token

    config = dict(ctx.obj["config"])
    if count is not None:
        config["reviewer_count"] = count
    if codeowners_path is not None:
        config["codeowners_path"] = codeowners_path

    token = require_token(config)
    rng = random.Random(seed) if seed is not None else None

    try:
        assign_reviewers(
            repo=repo,
            pr_number=pr_number,
            config=config,
            rng=rng,
            dry_run=dry_run,
            repo_obj=get_repo(repo, token=token),
        )
    except FileNotFoundError as e:
        raise click.UsageError(str(e))
    except ValueError as e:
        raise click.ClickException(str(e))
