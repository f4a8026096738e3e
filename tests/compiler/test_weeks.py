"""Tests for ISO week grouping."""

from daterange_marks.compiler.weeks import group_days_by_week, is_multi_week
from daterange_marks.utils.dates import enumerate_days


def groups_for(start: str, end: str):
    return group_days_by_week(enumerate_days(start, end))


class TestWeekGrouping:
    """Test grouping of a range's days by ISO week."""

    def test_friday_to_tuesday_has_two_groups(self):
        groups = groups_for("2024-08-02", "2024-08-06")

        assert len(groups) == 2
        assert groups[0].dates == ("2024-08-02", "2024-08-03", "2024-08-04")
        assert groups[1].dates == ("2024-08-05", "2024-08-06")
        assert groups[0].is_first_week and not groups[0].is_last_week
        assert groups[1].is_last_week and not groups[1].is_first_week

    def test_fifteen_days_from_thursday_has_three_groups(self):
        groups = groups_for("2024-08-01", "2024-08-15")

        assert [g.days for g in groups] == [4, 7, 4]
        assert [g.week_start_date for g in groups] == ["2024-08-01", "2024-08-05", "2024-08-12"]
        assert [g.week_end_date for g in groups] == ["2024-08-04", "2024-08-11", "2024-08-15"]
        assert [g.bucket for g in groups] == ["2024-07-29", "2024-08-05", "2024-08-12"]
        assert [g.week_index for g in groups] == [0, 1, 2]
        assert groups[0].start_day_of_week == 4
        assert groups[1].start_day_of_week == 1
        assert not groups[1].is_first_week and not groups[1].is_last_week

    def test_single_week_group_is_first_and_last(self):
        groups = groups_for("2024-08-05", "2024-08-09")

        assert len(groups) == 1
        assert groups[0].is_first_week and groups[0].is_last_week
        assert not is_multi_week(groups)

    def test_sunday_closes_the_week(self):
        groups = groups_for("2024-08-04", "2024-08-05")

        assert len(groups) == 2
        assert groups[0].bucket == "2024-07-29"
        assert groups[0].start_day_of_week == 0
        assert is_multi_week(groups)

    def test_groups_cover_every_day_once(self):
        days = list(enumerate_days("2024-12-20", "2025-01-14"))
        groups = group_days_by_week(days)

        flattened = [day for group in groups for day in group.dates]
        assert flattened == days
        assert sum(g.days for g in groups) == len(days)

    def test_empty_input(self):
        assert group_days_by_week([]) == []
