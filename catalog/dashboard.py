"""
Manager dashboard over mock artist submissions.

There is no submission store: the dashboard universe is generated from the
artist dataset. Status cycles pending → approved → rejected by position and
timestamps are random offsets back from a reference time (seeded, so the
same seed always yields the same universe).

Stats are computed over the whole universe, never over the filtered view.
Status changes are validated and logged but not applied; callers receive a
StatusChange with persisted=False.

Public API:
    build_submissions(artists, seed, now)                     → list[Submission]
    filter_submissions(submissions, search, status, category) → list[Submission]
    compute_stats(submissions)                                → SubmissionStats
    request_status_change(submission, new_status)             → StatusChange
"""

import logging
import os
import random
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone

from catalog.models import (
    STATUSES,
    Artist,
    StatusChange,
    Submission,
    SubmissionStats,
    SubmissionStatus,
)

log = logging.getLogger(__name__)

SUBMISSION_SEED = int(os.getenv("SUBMISSION_SEED", "7"))

SUBMITTED_WINDOW = timedelta(days=30)
UPDATED_WINDOW   = timedelta(days=7)

ALL = "all"

# Only pending submissions can be decided.
TRANSITIONS: dict[str, frozenset[str]] = {
    "pending":  frozenset({"approved", "rejected"}),
    "approved": frozenset(),
    "rejected": frozenset(),
}


class InvalidStatusTransition(ValueError):
    pass


def build_submissions(
    artists: Iterable[Artist],
    seed: int = SUBMISSION_SEED,
    now: datetime | None = None,
) -> list[Submission]:
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)

    submissions = []
    for i, artist in enumerate(artists):
        submissions.append(Submission(
            **artist.model_dump(),
            status=STATUSES[i % len(STATUSES)],
            submitted_at=now - rng.random() * SUBMITTED_WINDOW,
            last_updated=now - rng.random() * UPDATED_WINDOW,
        ))
    return submissions


def filter_submissions(
    submissions: Iterable[Submission],
    search: str = "",
    status: str = ALL,
    category: str = ALL,
) -> list[Submission]:
    """
    Filter the submissions table.

    search:   case-insensitive substring of name or location
    status:   "all" or an exact status
    category: "all" or a case-insensitive substring of any category
    """
    term = search.lower()
    cat = category.lower()

    results = []
    for s in submissions:
        if term and term not in s.name.lower() and term not in s.location.lower():
            continue
        if status != ALL and s.status != status:
            continue
        if category != ALL and not any(cat in c.lower() for c in s.categories):
            continue
        results.append(s)
    return results


def approval_rate(approved: int, total: int) -> float:
    """Approved share as a percentage with one decimal; 0.0 for an empty universe."""
    if total == 0:
        return 0.0
    return round(approved / total * 100, 1)


def compute_stats(submissions: Sequence[Submission]) -> SubmissionStats:
    counts = dict.fromkeys(STATUSES, 0)
    for s in submissions:
        counts[s.status] += 1

    total = len(submissions)
    return SubmissionStats(
        total=total,
        pending=counts["pending"],
        approved=counts["approved"],
        rejected=counts["rejected"],
        approval_rate=approval_rate(counts["approved"], total),
    )


def request_status_change(submission: Submission, new_status: SubmissionStatus) -> StatusChange:
    if new_status not in TRANSITIONS[submission.status]:
        raise InvalidStatusTransition(
            f"Cannot change submission {submission.id} from {submission.status} to {new_status}"
        )

    # TODO: route through a submission store once one exists; until then nothing is written.
    log.info("Status change requested: %s %s → %s (not persisted)",
             submission.id, submission.status, new_status)
    return StatusChange(
        submission_id=submission.id,
        previous=submission.status,
        requested=new_status,
        persisted=False,
    )
