from __future__ import annotations

import logging

from github import Github

from prgate_core.models import (
    EventType,
    PullRequestEvent,
    PullRequestSnapshot,
    Review,
    ReviewState,
    SnapshotError,
)

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_label_names(pr) -> frozenset[str]:
    return frozenset(label.name for label in pr.get_labels())


def get_reviews(pr) -> tuple[Review, ...]:
    """Return the PR's reviews in submission order.

    Reviews from deleted accounts (no user) or with a state prgate doesn't
    know are left out rather than failing the run.
    """
    reviews = []
    for r in pr.get_reviews():
        login = r.user.login if r.user is not None else None
        if not login:
            logger.debug("Skipping review %s with no author.", getattr(r, "id", "?"))
            continue
        try:
            state = ReviewState.parse(r.state)
        except ValueError:
            logger.debug("Skipping review by %s with unknown state %r.", login, r.state)
            continue
        reviews.append(Review(author_login=login, state=state))
    return tuple(reviews)


def build_snapshot(pr, event_type: EventType | str, actor_login: str | None = None) -> PullRequestSnapshot:
    """Fetch labels and reviews and freeze them into a snapshot.

    The actor is the PR author; when the event payload didn't carry it the
    PR's own ``user`` is used.
    """
    if not actor_login:
        user = pr.user
        actor_login = user.login if user is not None else None
    if not actor_login:
        raise SnapshotError(f"Could not read the author of PR #{pr.number}.")

    labels = get_label_names(pr)
    reviews = get_reviews(pr)
    return PullRequestSnapshot(
        event=PullRequestEvent(event_type=EventType.parse(event_type), actor_login=actor_login),
        labels=labels,
        reviews=reviews,
    )


def add_assignee(pr, login: str) -> None:
    pr.add_to_assignees(login)


def submit_approval(pr, message: str) -> None:
    pr.create_review(body=message, event="APPROVE")


def request_reviewers(pr, logins: list[str]) -> None:
    pr.create_review_request(reviewers=logins)
