"""Tests for GitHub pull request helper functions."""

from unittest.mock import MagicMock

import pytest

from prgate_core.gh.pull_request import (
    add_assignee,
    build_snapshot,
    get_label_names,
    get_reviews,
    request_reviewers,
    submit_approval,
)
from prgate_core.models import EventType, Review, ReviewState, SnapshotError


def _label(name):
    label = MagicMock()
    label.name = name
    return label


def _review(login, state):
    r = MagicMock()
    r.user.login = login
    r.state = state
    return r


def _make_pr(labels=(), reviews=(), author="octocat"):
    pr = MagicMock()
    pr.number = 7
    pr.get_labels.return_value = [_label(n) for n in labels]
    pr.get_reviews.return_value = list(reviews)
    if author is None:
        pr.user = None
    else:
        pr.user.login = author
    return pr


class TestGetLabelNames:
    def test_returns_names(self):
        pr = _make_pr(labels=["hotfix", "documentation"])
        assert get_label_names(pr) == frozenset({"hotfix", "documentation"})

    def test_no_labels(self):
        assert get_label_names(_make_pr()) == frozenset()


class TestGetReviews:
    def test_preserves_order(self):
        pr = _make_pr(reviews=[_review("a", "APPROVED"), _review("b", "CHANGES_REQUESTED")])
        assert get_reviews(pr) == (
            Review("a", ReviewState.APPROVED),
            Review("b", ReviewState.CHANGES_REQUESTED),
        )

    def test_skips_unknown_state(self):
        pr = _make_pr(reviews=[_review("a", "SOMETHING_NEW"), _review("b", "APPROVED")])
        assert get_reviews(pr) == (Review("b", ReviewState.APPROVED),)

    def test_skips_review_without_user(self):
        ghost = MagicMock()
        ghost.user = None
        ghost.state = "APPROVED"
        pr = _make_pr(reviews=[ghost])
        assert get_reviews(pr) == ()


class TestBuildSnapshot:
    def test_uses_pr_author_when_no_actor(self):
        pr = _make_pr(labels=["hotfix"], reviews=[_review("a", "APPROVED")])
        snap = build_snapshot(pr, "opened")
        assert snap.event.actor_login == "octocat"
        assert snap.event.event_type is EventType.OPENED
        assert snap.labels == frozenset({"hotfix"})
        assert len(snap.reviews) == 1

    def test_explicit_actor_wins(self):
        snap = build_snapshot(_make_pr(), EventType.LABELED, actor_login="someone")
        assert snap.event.actor_login == "someone"

    def test_missing_author_raises(self):
        with pytest.raises(SnapshotError, match="author"):
            build_snapshot(_make_pr(author=None), "opened")


class TestSideEffects:
    def test_add_assignee(self):
        pr = MagicMock()
        add_assignee(pr, "octocat")
        pr.add_to_assignees.assert_called_once_with("octocat")

    def test_submit_approval(self):
        pr = MagicMock()
        submit_approval(pr, "LGTM")
        pr.create_review.assert_called_once_with(body="LGTM", event="APPROVE")

    def test_request_reviewers(self):
        pr = MagicMock()
        request_reviewers(pr, ["alice", "bob"])
        pr.create_review_request.assert_called_once_with(reviewers=["alice", "bob"])
