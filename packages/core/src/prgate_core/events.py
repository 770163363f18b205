"""GitHub Actions event context.

When prgate runs inside a workflow, GitHub writes the triggering webhook
payload to the file named by GITHUB_EVENT_PATH. This module turns that
payload into the handful of fields a governance run needs and rejects
anything that did not come from a pull request.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from prgate_core.models import EventType

logger = logging.getLogger(__name__)

# Workflow events that carry a pull_request object in their payload.
_PR_EVENTS = {"pull_request", "pull_request_target", "pull_request_review"}


class EventError(ValueError):
    """Raised when the triggering event cannot drive a governance run."""


@dataclass(frozen=True)
class EventContext:
    repo: str  # owner/name
    pr_number: int
    event_type: EventType
    actor_login: str | None  # PR author, when the payload includes it


def parse_event(payload: dict, event_name: str | None = None) -> EventContext:
    """Extract an EventContext from a decoded webhook payload."""
    if event_name and event_name not in _PR_EVENTS:
        raise EventError(f"Not triggered from a pull request (event: {event_name}), aborting.")

    pull_request = payload.get("pull_request")
    if not pull_request:
        raise EventError("Not triggered from a pull request, aborting.")

    number = pull_request.get("number") or payload.get("number")
    if not isinstance(number, int) or number <= 0:
        raise EventError("Pull request number is missing from the event payload.")

    repo = (payload.get("repository") or {}).get("full_name")
    if not repo:
        raise EventError("Repository name is missing from the event payload.")

    user = pull_request.get("user") or {}
    return EventContext(
        repo=repo,
        pr_number=number,
        event_type=EventType.parse(payload.get("action")),
        actor_login=user.get("login") or None,
    )


def load_event(event_path: str | None = None, event_name: str | None = None) -> EventContext:
    """Read the event payload GitHub Actions provides for the current job.

    Falls back to GITHUB_EVENT_PATH / GITHUB_EVENT_NAME when no explicit
    values are passed.
    """
    event_path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    event_name = event_name or os.environ.get("GITHUB_EVENT_NAME")
    if not event_path:
        raise EventError("GITHUB_EVENT_PATH is not set. Pass --repo and --pr when running outside GitHub Actions.")

    path = Path(event_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise EventError(f"Event payload not found: {event_path}")
    except json.JSONDecodeError as e:
        raise EventError(f"Event payload is not valid JSON: {e}")

    if not isinstance(payload, dict):
        raise EventError("Event payload must be a JSON object.")
    logger.debug("Loaded %s event payload from %s", event_name or "unknown", event_path)
    return parse_event(payload, event_name)
