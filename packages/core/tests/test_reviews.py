"""Tests for review resolution."""

import itertools
from datetime import datetime, timedelta, timezone

from teamgate_core.reviews import Disposition, ReviewEvent, resolve_reviews

APPROVED = Disposition.APPROVED
CHANGES = Disposition.CHANGES_REQUESTED
COMMENTED = Disposition.COMMENTED


def test_empty_input():
    assert resolve_reviews([]) == {}


def test_single_review():
    assert resolve_reviews([ReviewEvent("alice", APPROVED, 1)]) == {"alice": APPROVED}


def test_later_change_request_overrides_approval_in_any_order():
    reviews = [ReviewEvent("A", APPROVED, 1), ReviewEvent("A", CHANGES, 2)]
    for ordering in itertools.permutations(reviews):
        assert resolve_reviews(ordering) == {"A": CHANGES}


def test_later_approval_overrides_change_request():
    reviews = [ReviewEvent("A", APPROVED, 3), ReviewEvent("A", CHANGES, 2)]
    assert resolve_reviews(reviews) == {"A": APPROVED}


def test_later_comment_overrides_approval():
    reviews = [ReviewEvent("A", COMMENTED, 5), ReviewEvent("A", APPROVED, 4)]
    assert resolve_reviews(reviews)["A"] == COMMENTED


def test_one_entry_per_reviewer():
    reviews = [
        ReviewEvent("alice", APPROVED, 1),
        ReviewEvent("bob", COMMENTED, 2),
        ReviewEvent("alice", COMMENTED, 3),
        ReviewEvent("bob", APPROVED, 4),
        ReviewEvent("carol", CHANGES, 5),
    ]
    assert resolve_reviews(reviews) == {"alice": COMMENTED, "bob": APPROVED, "carol": CHANGES}


def test_equal_sequence_resolves_to_later_input():
    reviews = [ReviewEvent("A", APPROVED, 7), ReviewEvent("A", CHANGES, 7)]
    assert resolve_reviews(reviews) == {"A": CHANGES}


def test_tuple_sequences_of_timestamp_and_id():
    t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
    reviews = [
        ReviewEvent("A", CHANGES, (t0 + timedelta(minutes=5), 11)),
        ReviewEvent("A", APPROVED, (t0, 10)),
        ReviewEvent("A", APPROVED, (t0 + timedelta(minutes=5), 12)),
    ]
    assert resolve_reviews(reviews) == {"A": APPROVED}


def test_accepts_generator():
    reviews = (ReviewEvent(name, APPROVED, i) for i, name in enumerate(["a", "b"]))
    assert resolve_reviews(reviews) == {"a": APPROVED, "b": APPROVED}
