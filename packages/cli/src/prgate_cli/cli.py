"""CLI entry point for prgate.

Commands:
  run                — assign, auto-approve and check approvals for a PR
  status             — show a PR's approval state and planned actions
  request-reviewers  — request reviews from CODEOWNERS
  init               — write .prgate.yml and a GitHub Actions workflow
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prgate_cli.commands.init import init_cmd
from prgate_cli.commands.reviewers import request_reviewers_cmd
from prgate_cli.commands.run import run_cmd
from prgate_cli.commands.status import status_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prgate"),
    prog_name="prgate",
)
@click.option(
    "--config",
    "config_path",
    default=".prgate.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRGATE_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Pull request governance for GitHub: assignment, approvals and auto-approval."""
    from prgate_core.config import load_config, validate_config
    from prgate_cli.auth import resolve_github_token

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)
    try:
        validate_config(config)
    except ValueError as e:
        raise click.UsageError(f"{config_path}: {e}")

    # Resolve token once so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(run_cmd)
main.add_command(status_cmd)
main.add_command(request_reviewers_cmd)
main.add_command(init_cmd)
