"""Reduction of review events to one current disposition per reviewer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class Disposition(str, Enum):
    """A reviewer's stance. Values are GitHub's review states."""

    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class ReviewEvent:
    reviewer_id: str
    disposition: Disposition
    sequence: Any  # any totally ordered value: submission time, (time, id), API index


def resolve_reviews(reviews: Iterable[ReviewEvent]) -> dict[str, Disposition]:
    """Return the latest disposition of every reviewer.

    A reviewer may re-review; only the stance with the highest ``sequence``
    counts, so an approval followed by a change request is not an approval.
    Input order is not trusted — events are sorted before folding. The sort is
    stable, so events with equal sequences resolve to the later one in input.
    """
    latest: dict[str, Disposition] = {}
    for review in sorted(reviews, key=lambda r: r.sequence):
        latest[review.reviewer_id] = review.disposition
    return latest
