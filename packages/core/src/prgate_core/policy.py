"""Approval policy engine.

Pure decision logic over a PullRequestSnapshot: how many approvals a PR
needs, whether it has them, whether the author should be assigned and
whether the automation should cast its own approving review. Nothing in
this module talks to GitHub; the governor executes whatever it returns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from prgate_core.models import (
    Action,
    Approve,
    Assign,
    AssignmentDecision,
    AutoApprovalDecision,
    Block,
    EventType,
    NoOp,
    PullRequestSnapshot,
    Review,
    ReviewState,
)

logger = logging.getLogger(__name__)

DOCUMENTATION_LABEL = "documentation"
HOTFIX_LABEL = "hotfix"
AUTO_APPROVE_LABELS = frozenset({DOCUMENTATION_LABEL, HOTFIX_LABEL})

DEFAULT_REQUIRED_APPROVALS = 2
DOCUMENTATION_REQUIRED_APPROVALS = 1

REASON_SUFFICIENT = "sufficient approvals already present"
REASON_BOT_APPROVED = "bot already approved"

STAGE_ASSIGN = "assign"
STAGE_APPROVE = "approve"
STAGE_CHECK = "check"
ALL_STAGES = (STAGE_ASSIGN, STAGE_APPROVE, STAGE_CHECK)


def required_approvals(labels: Iterable[str]) -> int:
    """Documentation-only changes need one approval; everything else needs two."""
    if DOCUMENTATION_LABEL in set(labels):
        return DOCUMENTATION_REQUIRED_APPROVALS
    return DEFAULT_REQUIRED_APPROVALS


def count_approvals(reviews: Iterable[Review], dedupe_by_reviewer: bool = False) -> int:
    """Count APPROVED reviews.

    By default every APPROVED review counts, including repeat approvals from
    the same reviewer and approvals that predate later pushes. With
    ``dedupe_by_reviewer`` only each reviewer's latest review is considered.
    """
    if not dedupe_by_reviewer:
        return sum(1 for r in reviews if r.state is ReviewState.APPROVED)

    latest: dict[str, ReviewState] = {}
    for r in reviews:
        # COMMENTED reviews don't change a reviewer's standing verdict on GitHub.
        if r.state is ReviewState.COMMENTED and r.author_login in latest:
            continue
        latest[r.author_login] = r.state
    return sum(1 for state in latest.values() if state is ReviewState.APPROVED)


def has_sufficient_approvals(required: int, actual: int) -> bool:
    return actual >= required


def decide_assignment(event_type: EventType | str) -> AssignmentDecision:
    """Assign the author exactly once, when the PR is opened."""
    return AssignmentDecision(perform_assignment=EventType.parse(event_type) is EventType.OPENED)


def decide_auto_approval(
    labels: Iterable[str],
    reviews: Iterable[Review],
    bot_identity: str,
) -> AutoApprovalDecision:
    """Decide whether the automation should submit its own approving review.

    Rules are checked in order and the first match wins:

    1. Two or more approvals already present: nothing to add.
    2. No ``documentation``/``hotfix`` label: no policy applies.
    3. ``bot_identity`` has already approved: don't approve twice.
    4. Otherwise approve, citing the matched labels.
    """
    reviews = tuple(reviews)

    if count_approvals(reviews) >= DEFAULT_REQUIRED_APPROVALS:
        return AutoApprovalDecision(should_approve=False, reason=REASON_SUFFICIENT)

    matched = sorted(AUTO_APPROVE_LABELS & set(labels))
    if not matched:
        return AutoApprovalDecision(should_approve=False)

    if any(r.author_login == bot_identity and r.state is ReviewState.APPROVED for r in reviews):
        return AutoApprovalDecision(should_approve=False, reason=REASON_BOT_APPROVED)

    label_str = ", ".join(f"`{name}`" for name in matched)
    return AutoApprovalDecision(
        should_approve=True,
        message=f"Auto-approved: PR is labeled {label_str}.",
    )


# ---------------------------------------------------------------------------
# Snapshot -> action
# ---------------------------------------------------------------------------


def assignment_action(snapshot: PullRequestSnapshot) -> Assign | NoOp:
    event = snapshot.event
    if decide_assignment(event.event_type).perform_assignment:
        return Assign(user=event.actor_login)
    return NoOp(reason=f"assignment only happens on opened (event: {event.event_type.value})")


def auto_approval_action(snapshot: PullRequestSnapshot, bot_identity: str) -> Approve | NoOp:
    decision = decide_auto_approval(snapshot.labels, snapshot.reviews, bot_identity)
    if decision.should_approve:
        return Approve(message=decision.message or "Auto-approved.")
    return NoOp(reason=decision.reason or "no auto-approval policy applies")


def approval_gate_action(snapshot: PullRequestSnapshot, dedupe_by_reviewer: bool = False) -> Block | NoOp:
    required = required_approvals(snapshot.labels)
    actual = count_approvals(snapshot.reviews, dedupe_by_reviewer=dedupe_by_reviewer)
    if has_sufficient_approvals(required, actual):
        return NoOp(reason=f"approvals satisfied ({actual} of {required} required)")
    return Block(required=required, actual=actual)


def plan(
    snapshot: PullRequestSnapshot,
    bot_identity: str,
    stages: Iterable[str] = ALL_STAGES,
    dedupe_by_reviewer: bool = False,
) -> list[Action]:
    """Return the actions for the requested stages, in assign → approve → check order.

    If the approve stage decides to approve, the check stage sees the
    automation's approval as already submitted, since the governor posts it
    before the gate is reported.
    """
    requested = set(stages)
    unknown = requested - set(ALL_STAGES)
    if unknown:
        raise ValueError(f"Unknown stage(s): {', '.join(sorted(unknown))}")

    actions: list[Action] = []
    effective = snapshot

    if STAGE_ASSIGN in requested:
        actions.append(assignment_action(snapshot))

    if STAGE_APPROVE in requested:
        action = auto_approval_action(snapshot, bot_identity)
        actions.append(action)
        if isinstance(action, Approve):
            effective = PullRequestSnapshot(
                event=snapshot.event,
                labels=snapshot.labels,
                reviews=snapshot.reviews + (Review(author_login=bot_identity, state=ReviewState.APPROVED),),
            )

    if STAGE_CHECK in requested:
        actions.append(approval_gate_action(effective, dedupe_by_reviewer=dedupe_by_reviewer))

    for action in actions:
        logger.debug("Planned action: %s", action.describe())
    return actions
