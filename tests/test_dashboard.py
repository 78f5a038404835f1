from datetime import datetime, timedelta, timezone

import pytest

from catalog.dashboard import (
    InvalidStatusTransition,
    approval_rate,
    build_submissions,
    compute_stats,
    filter_submissions,
    request_status_change,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def submissions(five_artists):
    return build_submissions(five_artists, seed=1, now=NOW)


class TestBuildSubmissions:
    """Test the mock submission universe."""

    def test_status_cycles_by_position(self, submissions):
        """Test that statuses cycle pending, approved, rejected by position."""
        assert [s.status for s in submissions] == ["pending", "approved", "rejected", "pending", "approved"]

    def test_keeps_artist_fields_and_order(self, five_artists, submissions):
        """Test that submissions keep the artist fields and dataset order."""
        assert [s.id for s in submissions] == [a.id for a in five_artists]
        assert submissions[1].categories == five_artists[1].categories

    def test_timestamps_within_windows(self, submissions):
        """Test that timestamps fall inside the submitted and updated windows."""
        for s in submissions:
            assert NOW - timedelta(days=30) <= s.submitted_at <= NOW
            assert NOW - timedelta(days=7) <= s.last_updated <= NOW

    def test_same_seed_same_universe(self, five_artists, submissions):
        """Test that the same seed builds the same universe."""
        again = build_submissions(five_artists, seed=1, now=NOW)
        assert [s.submitted_at for s in again] == [s.submitted_at for s in submissions]


class TestFilterSubmissions:
    """Test the dashboard filters."""

    def test_no_filters(self, submissions):
        """Test that the default filters return everything."""
        assert filter_submissions(submissions) == submissions

    def test_status_exact(self, submissions):
        """Test that status is matched exactly."""
        result = filter_submissions(submissions, status="approved")
        assert [s.id for s in result] == ["a2", "a5"]

    def test_search_name_or_location(self, submissions):
        """Test that search matches name or location only."""
        assert [s.id for s in filter_submissions(submissions, search="delhi")] == ["a3"]
        assert [s.id for s in filter_submissions(submissions, search="ravi")] == ["a4"]

    def test_search_ignores_bio(self, submissions):
        """Test that the dashboard search does not look at bios."""
        assert filter_submissions(submissions, search="jazz") == []

    def test_category_substring_case_insensitive(self, submissions):
        """Test that the category filter is a case-insensitive substring."""
        result = filter_submissions(submissions, category="dj")
        assert [s.id for s in result] == ["a2", "a3", "a5"]

    def test_filters_combine(self, submissions):
        """Test that search, status and category filters all apply."""
        result = filter_submissions(submissions, search="mumbai", status="approved", category="singer")
        assert [s.id for s in result] == ["a5"]


class TestStats:
    """Test the aggregate counters."""

    def test_counts(self, submissions):
        """Test per-status counts and the approval rate."""
        stats = compute_stats(submissions)
        assert (stats.total, stats.pending, stats.approved, stats.rejected) == (5, 2, 2, 1)
        assert stats.approval_rate == 40.0

    def test_stats_ignore_filter(self, submissions):
        """Test that stats describe the whole universe, not a filtered view."""
        before = compute_stats(submissions)
        filtered = filter_submissions(submissions, status="rejected")
        assert len(filtered) == 1
        assert len(submissions) == 5
        assert compute_stats(submissions) == before
        assert compute_stats(filtered) != before
        assert compute_stats(filtered).total == 1
        assert before.total == 5

    def test_empty_universe(self):
        """Test that no submissions gives a 0.0 approval rate."""
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.approval_rate == 0.0

    def test_approval_rate_rounding(self):
        """Test that the rate is rounded to one decimal place."""
        assert approval_rate(1, 3) == 33.3
        assert approval_rate(0, 0) == 0.0


class TestStatusChange:
    """Test requested status changes."""

    def test_pending_can_be_approved(self, submissions):
        """Test that a pending submission may be approved or rejected."""
        change = request_status_change(submissions[0], "approved")
        assert change.previous == "pending"
        assert change.requested == "approved"
        assert change.persisted is False

    def test_change_is_not_applied(self, submissions):
        """Test that a requested change leaves the submission untouched."""
        request_status_change(submissions[0], "rejected")
        assert submissions[0].status == "pending"

    @pytest.mark.parametrize("index,new_status", [(1, "rejected"), (2, "approved"), (0, "pending")])
    def test_illegal_transitions(self, submissions, index, new_status):
        """Test that only pending submissions may change status."""
        with pytest.raises(InvalidStatusTransition):
            request_status_change(submissions[index], new_status)
