"""PR snapshot and decision data models.

Everything here is immutable: a snapshot is built once per run from the
triggering event and the platform's current label/review state, and the
policy engine only ever reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class EventType(str, Enum):
    """The triggering event's action, as GitHub reports it."""

    OPENED = "opened"
    LABELED = "labeled"
    UNLABELED = "unlabeled"
    SUBMITTED = "submitted"
    EDITED = "edited"
    DISMISSED = "dismissed"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> EventType:
        """Map a raw action string to an EventType.

        Unknown or missing actions (``synchronize``, ``reopened``, ...) become
        OTHER rather than being mistaken for one of the handled actions.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.OTHER
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER


class ReviewState(str, Enum):
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"

    @classmethod
    def parse(cls, value: str) -> ReviewState:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown review state: {value!r}")


class SnapshotError(ValueError):
    """Raised when a PR snapshot cannot be built from the supplied data."""


@dataclass(frozen=True)
class PullRequestEvent:
    event_type: EventType
    actor_login: str  # PR author


@dataclass(frozen=True)
class Review:
    author_login: str
    state: ReviewState


@dataclass(frozen=True)
class PullRequestSnapshot:
    """Everything the policy engine needs to know about a PR for one run.

    ``reviews`` keeps submission order; ``labels`` is a set of label names.
    """

    event: PullRequestEvent
    labels: frozenset[str] = field(default_factory=frozenset)
    reviews: tuple[Review, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> PullRequestSnapshot:
        """Build a snapshot from the plain-dict input contract.

        Expected keys: ``event_type`` (str or None), ``actor_login``,
        ``labels`` (list of names) and ``reviews`` (list of
        ``{"author_login", "state"}`` dicts). Invalid input is rejected here
        so the engine never sees it.
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot must be a dict, got {type(data).__name__}.")

        actor = data.get("actor_login")
        if not actor or not isinstance(actor, str):
            raise SnapshotError("Snapshot is missing the PR author (actor_login).")

        event_type = data.get("event_type")
        if event_type is not None and not isinstance(event_type, str):
            raise SnapshotError(f"event_type must be a string, got {event_type!r}")

        raw_labels = data.get("labels")
        if raw_labels is None:
            raw_labels = []
        # A bare string would otherwise turn into a set of its characters.
        if not isinstance(raw_labels, (list, tuple)) or not all(isinstance(name, str) for name in raw_labels):
            raise SnapshotError(f"labels must be a list of label names, got {raw_labels!r}")

        raw_reviews = data.get("reviews")
        if raw_reviews is None:
            raw_reviews = []
        if not isinstance(raw_reviews, (list, tuple)):
            raise SnapshotError(f"reviews must be a list, got {raw_reviews!r}")

        reviews = []
        for raw in raw_reviews:
            if not isinstance(raw, dict):
                raise SnapshotError(f"Review must be a dict, got {raw!r}")
            author = raw.get("author_login")
            if not author or not isinstance(author, str):
                raise SnapshotError(f"Review is missing author_login: {raw!r}")
            try:
                state = ReviewState.parse(raw.get("state", ""))
            except ValueError as e:
                raise SnapshotError(str(e)) from e
            reviews.append(Review(author_login=author, state=state))

        return cls(
            event=PullRequestEvent(event_type=EventType.parse(event_type), actor_login=actor),
            labels=frozenset(raw_labels),
            reviews=tuple(reviews),
        )


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AssignmentDecision:
    perform_assignment: bool


@dataclass(frozen=True)
class AutoApprovalDecision:
    should_approve: bool
    reason: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class Assign:
    user: str
    kind = "assign"

    def describe(self) -> str:
        return f"assign {self.user}"


@dataclass(frozen=True)
class Block:
    required: int
    actual: int
    kind = "block"

    def describe(self) -> str:
        return f"Insufficient approvals: {self.actual} of {self.required} required"


@dataclass(frozen=True)
class Approve:
    message: str
    kind = "approve"

    def describe(self) -> str:
        return f"approve ({self.message})"


@dataclass(frozen=True)
class NoOp:
    reason: str
    kind = "noop"

    def describe(self) -> str:
        return f"no action: {self.reason}"


Action = Union[Assign, Block, Approve, NoOp]
