"""
Week grouping of a range's days.

Days are bucketed by their ISO Monday in ascending order, so the first
bucket encountered is the first week and the last one is the last week.
Each group is clipped to the days the range actually covers.
"""

from typing import Iterable

from ..data.models import DateRange, WeekGroup
from ..utils.dates import day_of_week, format_date, iso_week_bucket


def group_days_by_week(days: Iterable[str]) -> list[WeekGroup]:
    """
    Group ascending date keys into contiguous ISO weeks.

    Args:
        days: Canonical date keys in ascending order

    Returns:
        Week groups in encounter order
    """
    buckets: list[tuple[str, list[str]]] = []
    for day in days:
        bucket = format_date(iso_week_bucket(day))
        if buckets and buckets[-1][0] == bucket:
            buckets[-1][1].append(day)
        else:
            buckets.append((bucket, [day]))

    last = len(buckets) - 1
    return [
        WeekGroup(
            week_index=index,
            week_start_date=dates[0],
            week_end_date=dates[-1],
            days=len(dates),
            start_day_of_week=day_of_week(dates[0]),
            is_first_week=index == 0,
            is_last_week=index == last,
            dates=tuple(dates),
            bucket=bucket,
        )
        for index, (bucket, dates) in enumerate(buckets)
    ]


def week_groups_for(record: DateRange) -> list[WeekGroup]:
    """Week groups of every day a range covers."""
    return group_days_by_week(record.days)


def is_multi_week(groups: list[WeekGroup]) -> bool:
    return len(groups) > 1
