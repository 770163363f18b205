"""Tests for snapshot parsing and action types."""

import pytest

from prgate_core.models import (
    Approve,
    Assign,
    Block,
    EventType,
    NoOp,
    PullRequestSnapshot,
    Review,
    ReviewState,
    SnapshotError,
)


class TestEventTypeParse:
    @pytest.mark.parametrize("raw", ["opened", "labeled", "unlabeled", "submitted", "edited", "dismissed"])
    def test_known_actions(self, raw):
        assert EventType.parse(raw).value == raw

    def test_case_and_whitespace_insensitive(self):
        assert EventType.parse(" Opened ") is EventType.OPENED

    @pytest.mark.parametrize("raw", ["synchronize", "reopened", "closed", "", None])
    def test_unknown_becomes_other(self, raw):
        assert EventType.parse(raw) is EventType.OTHER

    @pytest.mark.parametrize("raw", [5, ["opened"], object()])
    def test_non_string_becomes_other(self, raw):
        assert EventType.parse(raw) is EventType.OTHER

    def test_passes_enum_through(self):
        assert EventType.parse(EventType.LABELED) is EventType.LABELED


class TestReviewStateParse:
    def test_lowercase_accepted(self):
        assert ReviewState.parse("approved") is ReviewState.APPROVED

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown review state"):
            ReviewState.parse("LGTM")


class TestSnapshotFromDict:
    def test_builds_snapshot(self):
        snap = PullRequestSnapshot.from_dict(
            {
                "event_type": "opened",
                "actor_login": "octocat",
                "labels": ["hotfix", "hotfix", "backend"],
                "reviews": [
                    {"author_login": "alice", "state": "APPROVED"},
                    {"author_login": "bob", "state": "COMMENTED"},
                ],
            }
        )
        assert snap.event.event_type is EventType.OPENED
        assert snap.event.actor_login == "octocat"
        assert snap.labels == frozenset({"hotfix", "backend"})
        assert snap.reviews == (
            Review("alice", ReviewState.APPROVED),
            Review("bob", ReviewState.COMMENTED),
        )

    def test_missing_lists_default_empty(self):
        snap = PullRequestSnapshot.from_dict({"event_type": "labeled", "actor_login": "octocat"})
        assert snap.labels == frozenset()
        assert snap.reviews == ()

    def test_unknown_event_is_other(self):
        snap = PullRequestSnapshot.from_dict({"event_type": "synchronize", "actor_login": "octocat"})
        assert snap.event.event_type is EventType.OTHER

    def test_missing_actor_raises(self):
        with pytest.raises(SnapshotError, match="actor_login"):
            PullRequestSnapshot.from_dict({"event_type": "opened", "labels": []})

    def test_review_without_author_raises(self):
        with pytest.raises(SnapshotError):
            PullRequestSnapshot.from_dict({"actor_login": "o", "reviews": [{"state": "APPROVED"}]})

    def test_review_with_bad_state_raises(self):
        with pytest.raises(SnapshotError, match="Unknown review state"):
            PullRequestSnapshot.from_dict({"actor_login": "o", "reviews": [{"author_login": "a", "state": "meh"}]})

    def test_string_labels_rejected(self):
        with pytest.raises(SnapshotError, match="labels"):
            PullRequestSnapshot.from_dict({"actor_login": "o", "labels": "documentation"})

    def test_non_string_label_rejected(self):
        with pytest.raises(SnapshotError, match="labels"):
            PullRequestSnapshot.from_dict({"actor_login": "o", "labels": ["hotfix", 3]})

    def test_tuple_labels_accepted(self):
        snap = PullRequestSnapshot.from_dict({"actor_login": "o", "labels": ("documentation",)})
        assert snap.labels == frozenset({"documentation"})

    def test_non_dict_review_rejected(self):
        with pytest.raises(SnapshotError, match="Review must be a dict"):
            PullRequestSnapshot.from_dict({"actor_login": "o", "reviews": ["APPROVED"]})

    def test_reviews_not_a_list_rejected(self):
        with pytest.raises(SnapshotError, match="reviews"):
            PullRequestSnapshot.from_dict({"actor_login": "o", "reviews": {"author_login": "a", "state": "APPROVED"}})

    @pytest.mark.parametrize("event_type", [5, ["opened"], {"action": "opened"}])
    def test_non_string_event_type_rejected(self, event_type):
        with pytest.raises(SnapshotError, match="event_type"):
            PullRequestSnapshot.from_dict({"actor_login": "o", "event_type": event_type})

    def test_missing_event_type_is_other(self):
        snap = PullRequestSnapshot.from_dict({"actor_login": "o", "event_type": None})
        assert snap.event.event_type is EventType.OTHER

    def test_non_dict_snapshot_rejected(self):
        with pytest.raises(SnapshotError):
            PullRequestSnapshot.from_dict(["actor_login", "o"])

    def test_snapshot_error_is_value_error(self):
        assert issubclass(SnapshotError, ValueError)


class TestActions:
    def test_kinds(self):
        assert Assign("a").kind == "assign"
        assert Block(2, 1).kind == "block"
        assert Approve("ok").kind == "approve"
        assert NoOp("why").kind == "noop"

    def test_actions_are_immutable(self):
        action = Assign("a")
        with pytest.raises(AttributeError):
            action.user = "b"

    def test_describe(self):
        assert "octocat" in Assign("octocat").describe()
        assert "2 required" in Block(required=2, actual=0).describe()
        assert "why" in NoOp("why").describe()
