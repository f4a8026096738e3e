"""
Mark compilation from stored ranges.

Turns the full range collection into a flat, ordered list of mark
descriptors. Three families are produced:

- range marks: one per covered day, styled by its position in the range
- content marks (``single`` mode): one per covered day and content item
- span-content marks (``span`` mode): one per ISO week and content item

Output order is reproducible: ranges in insertion order, then each range's
day marks, then its content marks by day/week ascending and content index
ascending. Compilation is a pure function of the ranges and the options;
nothing is cached between calls.
"""

import time
from typing import Any, Iterable, Optional

from ..config.defaults import PluginOptions
from ..data.models import (
    Content,
    DateRange,
    Mark,
    MarkFamily,
    MarkPosition,
    SpanInfo,
    WeekGroup,
)
from ..logging.config import get_compiler_logger
from .weeks import is_multi_week, week_groups_for

logger = get_compiler_logger(__name__)

ELLIPSIS = "..."
LAST_WEEK_TAIL_CHARS = 15

CONTINUITY_BORDER = "2px dashed rgba(0, 0, 0, 0.25)"
MIDDLE_WEEK_OPACITY = 0.8
MULTI_WEEK_SHADOW = "0 2px 6px rgba(0, 0, 0, 0.12)"


def range_mark_key(code: str, day: str) -> str:
    return f"{code}_{day}"


def content_mark_key(code: str, day: str, index: int) -> str:
    return f"{code}_{day}_content_{index}"


def span_content_mark_key(code: str, week_start: str, index: int, week_index: int) -> str:
    return f"{code}_{week_start}_span_content_{index}_week_{week_index}"


def truncate_span_text(text: str, group: WeekGroup, multi_week: bool) -> str:
    """
    Text shown for one week of a span.

    The first week shows the full text, the last week the tail of it and
    middle weeks only an ellipsis. Single-week spans are never truncated.
    """
    if not multi_week or group.is_first_week:
        return text
    if group.is_last_week:
        return ELLIPSIS + text[-LAST_WEEK_TAIL_CHARS:]
    return ELLIPSIS


def continuity_cues(group: WeekGroup, multi_week: bool) -> dict[str, Any]:
    """Border, opacity and shadow cues linking the weeks of one span."""
    if not multi_week:
        return {}

    cues: dict[str, Any] = {"boxShadow": MULTI_WEEK_SHADOW}
    if group.is_first_week:
        cues["borderRight"] = CONTINUITY_BORDER
    elif group.is_last_week:
        cues["borderLeft"] = CONTINUITY_BORDER
    else:
        cues["borderLeft"] = CONTINUITY_BORDER
        cues["borderRight"] = CONTINUITY_BORDER
        cues["opacity"] = MIDDLE_WEEK_OPACITY
    return cues


def _item_overrides(content: Content) -> dict[str, Any]:
    style: dict[str, Any] = {}
    if content.color:
        style["color"] = content.color
    if content.bg_color:
        style["backgroundColor"] = content.bg_color
    style.update(content.style)
    return style


def _range_content_overrides(record: DateRange) -> dict[str, Any]:
    style: dict[str, Any] = {}
    if record.content_color:
        style["color"] = record.content_color
    if record.content_bg_color:
        style["backgroundColor"] = record.content_bg_color
    style.update(record.content_style)
    return style


class MarkCompiler:
    """Compiles ranges into mark descriptors under one option set."""

    def __init__(self, options: PluginOptions):
        self.options = options
        self.logger = logger

    def compile(self, ranges: Iterable[DateRange]) -> list[Mark]:
        """Compile every range; the result is fully recomputed on each call."""
        started = time.perf_counter()
        marks: list[Mark] = []
        range_count = 0

        for record in ranges:
            marks.extend(self.compile_range(record))
            range_count += 1

        self.logger.debug(
            "Compiled marks",
            ranges=range_count,
            marks=len(marks),
            content_mode=self.options.content_span_mode if self.options.show_content else None,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
        )
        return marks

    def compile_range(self, record: DateRange) -> list[Mark]:
        """Range marks followed by the content marks of one range."""
        marks = self.range_marks(record)

        if self.options.show_content and record.has_content:
            if self.options.content_span_mode == "span":
                marks.extend(self.span_content_marks(record))
            else:
                marks.extend(self.single_content_marks(record))

        return marks

    def visible_contents(self, record: DateRange) -> tuple[Content, ...]:
        """Content items kept after truncation to ``max_content_lines``."""
        return record.contents[:self.options.max_content_lines]

    def range_marks(self, record: DateRange) -> list[Mark]:
        """One mark per covered day, styled by position."""
        marks = []
        clickable = self._clickable(record)

        for day in record.days:
            position = record.position_of(day)
            override = record.style_for(position)

            marks.append(Mark(
                key=range_mark_key(record.code, day),
                date=day,
                family=MarkFamily.RANGE,
                text=record.name,
                style={
                    "color": override.color or record.color or self.options.default_color,
                    "backgroundColor": override.bg_color or record.bg_color or self.options.default_bg_color,
                },
                clickable=clickable,
                range_code=record.code,
                range_data=record.data,
                mark_as=override.mark_as or record.mark_as or self.options.mark_as,
                position=position,
            ))

        return marks

    def single_content_marks(self, record: DateRange) -> list[Mark]:
        """One mark per covered day and visible content item."""
        contents = self.visible_contents(record)
        if not contents:
            return []

        base_style = self.options.content_defaults()
        base_style["textAlign"] = self.options.content_alignment
        base_style.update(_range_content_overrides(record))

        mark_as = record.content_mark_as or self.options.content_mark_as
        clickable = self._clickable(record)
        marks = []

        for day in record.days:
            position = record.position_of(day)
            for index, content in enumerate(contents):
                style = dict(base_style)
                style.update(_item_overrides(content))

                marks.append(Mark(
                    key=content_mark_key(record.code, day, index),
                    date=day,
                    family=MarkFamily.CONTENT,
                    text=content.text,
                    style=style,
                    clickable=clickable,
                    range_code=record.code,
                    range_data=record.data,
                    mark_as=mark_as,
                    position=position,
                    content_index=index,
                ))

        return marks

    def span_content_marks(self, record: DateRange, groups: Optional[list[WeekGroup]] = None) -> list[Mark]:
        """One mark per ISO week and visible content item, anchored on the week's first covered day."""
        contents = self.visible_contents(record)
        if not contents:
            return []

        if groups is None:
            groups = week_groups_for(record)
        multi_week = is_multi_week(groups)

        base_style = dict(self.options.span_content_style)
        base_style["textAlign"] = self.options.content_alignment
        base_style.update(_range_content_overrides(record))

        mark_as = record.content_mark_as or self.options.content_mark_as
        clickable = self._clickable(record)
        marks = []

        for group in groups:
            span_info = SpanInfo(
                total_weeks=len(groups),
                current_week=group.week_index + 1,
                is_multi_week=multi_week,
                total_days=record.day_count,
            )
            for index, content in enumerate(contents):
                style = dict(base_style)
                style.update(_item_overrides(content))
                style.update(self._span_layout(group))
                style.update(continuity_cues(group, multi_week))

                marks.append(Mark(
                    key=span_content_mark_key(record.code, group.week_start_date, index, group.week_index),
                    date=group.week_start_date,
                    family=MarkFamily.SPAN_CONTENT,
                    text=truncate_span_text(content.text, group, multi_week),
                    style=style,
                    clickable=clickable,
                    range_code=record.code,
                    range_data=record.data,
                    mark_as=mark_as,
                    position=self._group_position(group, multi_week),
                    content_index=index,
                    week_group=group,
                    span_info=span_info,
                ))

        return marks

    def _span_layout(self, group: WeekGroup) -> dict[str, Any]:
        return {
            "width": f"{group.days * 100}%",
            "position": "absolute",
            "left": "0",
            "top": "50%",
            "transform": "translateY(-50%)",
        }

    def _group_position(self, group: WeekGroup, multi_week: bool) -> MarkPosition:
        if not multi_week:
            return MarkPosition.SINGLE
        if group.is_first_week:
            return MarkPosition.START
        if group.is_last_week:
            return MarkPosition.END
        return MarkPosition.MIDDLE

    def _clickable(self, record: DateRange) -> bool:
        return self.options.clickable and record.clickable
