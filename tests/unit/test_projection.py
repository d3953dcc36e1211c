"""
Unit tests for the level-completion projector.

Tests:
- Expected / fast-track / conservative dates and their ordering
- No-history defaults and the level 60 short-circuit
- Averaging method and "all levels" date
- Level milestone dates
"""

from datetime import timedelta

import pytest

from srs_insight.pace.analyzer import PaceOptions
from srs_insight.pace.projection import project_level_completion, project_level_milestones


class TestLevelCompletion:
    """Tests for project_level_completion."""

    def test_end_to_end_example(self, make_progressions, now):
        """Learner at level 10 with [10, 11, 12, 9, 40]: 10.5 days/level over 50 levels."""
        projection = project_level_completion(10, make_progressions([10, 11, 12, 9, 40]), now=now)

        assert projection.days_per_level == 10.5
        assert projection.expected == now + timedelta(days=525)
        assert projection.fast_track == now + timedelta(days=8 * 50)
        assert projection.conservative == now + timedelta(days=18 * 50)
        assert [e.level for e in projection.excluded_levels] == [5]
        assert projection.excluded_levels[0].reason == "Auto-detected break (statistical outlier)"
        assert projection.fastest_level.days == 9
        assert projection.slowest_level.days == 12

    def test_all_levels_date_ignores_exclusions(self, make_progressions, now):
        """The all-levels pace uses every level, breaks included."""
        projection = project_level_completion(10, make_progressions([10, 11, 12, 9, 40]), now=now)

        assert projection.all_levels_days_per_level == pytest.approx(16.4)
        assert projection.expected_all_levels == now + timedelta(days=round(16.4 * 50))

    @pytest.mark.parametrize(
        "days",
        [[3, 4, 5], [7, 8, 9, 7, 8], [10, 11, 12, 9, 40], [20, 25, 30], [60, 90, 120]],
    )
    def test_scenario_ordering(self, make_progressions, now, days):
        """Fast track <= expected <= conservative for any pace."""
        projection = project_level_completion(5, make_progressions(days), now=now)

        assert projection.fast_track <= projection.expected <= projection.conservative

    def test_conservative_multiplier(self, make_progressions, now):
        """Slow learners get 1.5x their pace."""
        projection = project_level_completion(40, make_progressions([20, 20, 20]), now=now)

        assert projection.conservative == now + timedelta(days=round(30 * 20))

    def test_median_averaging(self, make_progressions, now):
        options = PaceOptions(auto_exclude_breaks=False, averaging_method="median")
        projection = project_level_completion(10, make_progressions([8, 10, 30]), options, now=now)

        assert projection.days_per_level == 10
        assert projection.expected == now + timedelta(days=500)

    def test_no_history_defaults(self, now):
        projection = project_level_completion(1, [], now=now)

        assert projection.expected == now + timedelta(days=12 * 59)
        assert projection.fast_track == now + timedelta(days=8 * 59)
        assert projection.conservative == now + timedelta(days=18 * 59)
        assert projection.excluded_levels == []

    def test_already_complete(self, make_progressions, now):
        projection = project_level_completion(60, make_progressions([10, 11]), now=now)

        assert projection.is_complete
        assert projection.expected == now
        assert projection.fast_track == projection.conservative == now


class TestLevelMilestones:
    """Tests for project_level_milestones."""

    def test_completed_and_upcoming(self, now):
        milestones = project_level_milestones(35, 10, now=now)

        assert [m.level for m in milestones] == [30, 40, 50, 60]
        assert milestones[0].status == "completed"
        assert milestones[0].date == now
        assert milestones[1].status == "upcoming"
        assert milestones[1].date == now + timedelta(days=50)
        assert milestones[3].date == now + timedelta(days=250)

    def test_fractional_pace_rounded(self, now):
        milestones = project_level_milestones(29, 7.5, now=now)

        assert milestones[0].date == now + timedelta(days=8)

    def test_half_day_rounds_up(self, now):
        """2.5 days to level 30 is 3 days, not the even neighbour 2."""
        milestones = project_level_milestones(29, 2.5, now=now)

        assert milestones[0].date == now + timedelta(days=3)
        assert milestones[1].date == now + timedelta(days=28)  # 27.5
