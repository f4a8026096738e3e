"""
Calendar-agnostic date arithmetic for range expansion.

All functions work on local calendar fields: a ``datetime`` is reduced to
its ``date()`` without any timezone conversion, and canonical keys are
zero-padded ``YYYY-MM-DD`` strings.

Weekday numbering follows the host calendar convention (0=Sunday ..
6=Saturday) while week buckets follow the ISO Monday-start convention.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Union

from ..errors import InvalidRangeError

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    """
    Coerce a date-like value into a ``date``.

    Accepts ``date``/``datetime`` instances and ISO strings
    (``2024-03-01``, ``2024/03/01``, unpadded ``2024-3-1`` and full ISO
    timestamps).

    Raises:
        InvalidRangeError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip().replace("/", "-")
        try:
            return datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise InvalidRangeError(f"Unparsable date: {value!r}", value=value)


def format_date(value: DateLike) -> str:
    """Format a date as its canonical zero-padded ``YYYY-MM-DD`` key."""
    d = parse_date(value)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def day_of_week(value: DateLike) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return (parse_date(value).weekday() + 1) % 7


def iso_week_bucket(value: DateLike) -> date:
    """
    Monday on or before the given date.

    Sunday belongs to the previous Monday's week (offset -6); every other
    day is shifted by ``1 - day_of_week``.
    """
    d = parse_date(value)
    dow = day_of_week(d)
    offset = -6 if dow == 0 else 1 - dow
    return d + timedelta(days=offset)


def span_days(start: DateLike, end: DateLike) -> int:
    """Inclusive number of days between start and end."""
    return (parse_date(end) - parse_date(start)).days + 1


class DaySpan:
    """
    Lazy, restartable sequence of canonical date keys from start to end.

    Iterating twice yields the same keys; nothing is materialized until
    iteration.
    """

    __slots__ = ("start", "end")

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[str]:
        # Never steps past ``end``: the day after date.max overflows.
        for offset in range(len(self)):
            yield format_date(self.start + timedelta(days=offset))

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, value: object) -> bool:
        try:
            d = parse_date(value)  # type: ignore[arg-type]
        except InvalidRangeError:
            return False
        return self.start <= d <= self.end

    def __repr__(self) -> str:
        return f"DaySpan({format_date(self.start)}..{format_date(self.end)})"


def enumerate_days(start: DateLike, end: DateLike) -> DaySpan:
    """
    Enumerate every day in ``[start, end]`` as canonical date keys.

    Raises:
        InvalidRangeError: If either date fails to parse or start > end
    """
    start_d = parse_date(start)
    end_d = parse_date(end)
    if start_d > end_d:
        raise InvalidRangeError(
            f"Start date {format_date(start_d)} is after end date {format_date(end_d)}",
            start=start,
            end=end,
        )
    return DaySpan(start_d, end_d)
