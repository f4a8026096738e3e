"""
Canonical data models for date ranges and the marks derived from them.

Ranges are immutable records owned by the range store; an update replaces
the record in place. Marks, week groups and span info are recomputed on
every refresh and never persisted.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from ..utils.dates import DaySpan, enumerate_days, format_date, parse_date


class MarkFamily(str, Enum):
    """Visual families of compiled marks."""
    RANGE = "range"
    CONTENT = "content"
    SPAN_CONTENT = "span-content"


class MarkPosition(str, Enum):
    """Position of a day inside its range."""
    SINGLE = "single"
    START = "start"
    MIDDLE = "middle"
    END = "end"


class ContentKind(str, Enum):
    """Discriminator of the content union."""
    TEXT = "text"
    STYLED = "styled"


@dataclass(frozen=True)
class ContentItem:
    """Styled text shown over the days of a range."""
    text: str
    color: Optional[str] = None
    bg_color: Optional[str] = None
    style: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TextContent:
    """Plain text content; styling comes entirely from defaults."""
    text: str

    kind: ClassVar[ContentKind] = ContentKind.TEXT

    @property
    def color(self) -> Optional[str]:
        return None

    @property
    def bg_color(self) -> Optional[str]:
        return None

    @property
    def style(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class StyledContent:
    """Content carrying its own colors and style map."""
    item: ContentItem

    kind: ClassVar[ContentKind] = ContentKind.STYLED

    @property
    def text(self) -> str:
        return self.item.text

    @property
    def color(self) -> Optional[str]:
        return self.item.color

    @property
    def bg_color(self) -> Optional[str]:
        return self.item.bg_color

    @property
    def style(self) -> dict[str, Any]:
        return self.item.style


Content = Union[TextContent, StyledContent]


@dataclass(frozen=True)
class PositionStyle:
    """Overrides applied to range marks at one position (start/middle/end)."""
    mark_as: Optional[str] = None
    color: Optional[str] = None
    bg_color: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.mark_as is None and self.color is None and self.bg_color is None


@dataclass(frozen=True)
class DateRange:
    """A named, colored span of calendar days, keyed by a unique code."""
    code: str
    name: str
    start_date: date
    end_date: date

    # Range-level styling
    color: Optional[str] = None
    bg_color: Optional[str] = None
    mark_as: Optional[str] = None
    start_style: PositionStyle = PositionStyle()
    middle_style: PositionStyle = PositionStyle()
    end_style: PositionStyle = PositionStyle()

    # Interaction
    clickable: bool = True
    data: Any = None

    # Content shown over the range, in display order
    contents: tuple[Content, ...] = ()
    content_color: Optional[str] = None
    content_bg_color: Optional[str] = None
    content_mark_as: Optional[str] = None
    content_style: dict[str, Any] = field(default_factory=dict)

    @property
    def days(self) -> DaySpan:
        """Every covered day as canonical date keys."""
        return enumerate_days(self.start_date, self.end_date)

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def is_single_day(self) -> bool:
        return self.start_date == self.end_date

    @property
    def has_content(self) -> bool:
        return bool(self.contents)

    def covers(self, value: Any) -> bool:
        """True if the date falls inside ``[start_date, end_date]``."""
        d = parse_date(value)
        return self.start_date <= d <= self.end_date

    def position_of(self, value: Any) -> MarkPosition:
        """Classify a covered day as single, start, middle or end."""
        d = parse_date(value)
        if self.is_single_day:
            return MarkPosition.SINGLE
        if d == self.start_date:
            return MarkPosition.START
        if d == self.end_date:
            return MarkPosition.END
        return MarkPosition.MIDDLE

    def style_for(self, position: MarkPosition) -> PositionStyle:
        """Position-specific overrides; single-day ranges have none."""
        if position == MarkPosition.START:
            return self.start_style
        if position == MarkPosition.MIDDLE:
            return self.middle_style
        if position == MarkPosition.END:
            return self.end_style
        return PositionStyle()

    def describe(self) -> dict[str, Any]:
        """Compact description used in logs and event payloads."""
        return {
            "code": self.code,
            "name": self.name,
            "start_date": format_date(self.start_date),
            "end_date": format_date(self.end_date),
            "contents": len(self.contents),
        }


@dataclass(frozen=True)
class WeekGroup:
    """Contiguous days of one range that share an ISO week."""
    week_index: int
    week_start_date: str       # First covered day in this week
    week_end_date: str         # Last covered day in this week
    days: int
    start_day_of_week: int     # 0=Sunday .. 6=Saturday of week_start_date
    is_first_week: bool
    is_last_week: bool
    dates: tuple[str, ...]
    bucket: str                # ISO Monday of the week


@dataclass(frozen=True)
class SpanInfo:
    """Position of a span-content mark within its range's weeks."""
    total_weeks: int
    current_week: int          # 1-based
    is_multi_week: bool
    total_days: int


@dataclass(frozen=True)
class Mark:
    """A visual descriptor installed on one host calendar day cell."""
    key: str
    date: str
    family: MarkFamily
    text: str
    style: dict[str, Any]
    clickable: bool
    range_code: str
    range_data: Any = None
    mark_as: Optional[str] = None
    position: Optional[MarkPosition] = None
    content_index: Optional[int] = None
    week_group: Optional[WeekGroup] = None
    span_info: Optional[SpanInfo] = None

    def to_dict(self) -> dict[str, Any]:
        """Host-facing payload with the calendar's camelCase keys."""
        payload: dict[str, Any] = {
            "key": self.key,
            "date": self.date,
            "markType": self.family.value,
            "markAs": self.mark_as,
            "text": self.text,
            "style": dict(self.style),
            "clickable": self.clickable,
            "rangeCode": self.range_code,
            "rangeData": self.range_data,
        }
        if self.position is not None:
            payload["position"] = self.position.value
        if self.content_index is not None:
            payload["contentIndex"] = self.content_index
        if self.week_group is not None:
            group = self.week_group
            payload["weekGroup"] = {
                "weekIndex": group.week_index,
                "weekStartDate": group.week_start_date,
                "weekEndDate": group.week_end_date,
                "days": group.days,
                "startDayOfWeek": group.start_day_of_week,
                "isFirstWeek": group.is_first_week,
                "isLastWeek": group.is_last_week,
                "dates": list(group.dates),
            }
        if self.span_info is not None:
            payload["spanInfo"] = {
                "totalWeeks": self.span_info.total_weeks,
                "currentWeek": self.span_info.current_week,
                "isMultiWeek": self.span_info.is_multi_week,
                "totalDays": self.span_info.total_days,
            }
        return payload
