"""
Range payload normalization into canonical ``DateRange`` records.

Raw ranges arrive as mappings using either the calendar's camelCase keys
(``startDate``, ``bgColor``, ``middleBgColor``) or snake_case keys. The
normalizer validates required fields and dates, resolves the content union
once, and folds per-position overrides into ``PositionStyle`` values.
"""

import dataclasses
from typing import Any, Mapping, Optional, Sequence

import structlog

from ..errors import InvalidRangeError, ValidationError
from ..utils.dates import format_date, parse_date
from .models import (
    Content,
    ContentItem,
    DateRange,
    PositionStyle,
    StyledContent,
    TextContent,
)

logger = structlog.get_logger(__name__)

# camelCase payload key -> DateRange field
FIELD_ALIASES = {
    "startDate": "start_date",
    "endDate": "end_date",
    "bgColor": "bg_color",
    "markAs": "mark_as",
    "contentColor": "content_color",
    "contentBgColor": "content_bg_color",
    "contentMarkAs": "content_mark_as",
    "contentStyle": "content_style",
}

# Shorthand content style keys folded into content_style
CONTENT_STYLE_SHORTHANDS = {
    "contentFontSize": "fontSize",
    "content_font_size": "fontSize",
    "contentPadding": "padding",
    "content_padding": "padding",
    "contentBorderRadius": "borderRadius",
    "content_border_radius": "borderRadius",
    "contentLineHeight": "lineHeight",
    "content_line_height": "lineHeight",
}

POSITIONS = ("start", "middle", "end")
POSITION_ATTRS = {"MarkAs": "mark_as", "Color": "color", "BgColor": "bg_color"}

SIMPLE_FIELDS = (
    "name", "color", "bg_color", "mark_as", "clickable", "data",
    "content_color", "content_bg_color", "content_mark_as",
)


def make_content(raw: Any, index: Optional[int] = None) -> Content:
    """
    Resolve one raw content entry into the content union.

    Strings (and other scalars) become ``TextContent``; mappings with a
    ``text`` key and ``ContentItem`` instances become ``StyledContent``.
    """
    if isinstance(raw, (TextContent, StyledContent)):
        return raw
    if isinstance(raw, ContentItem):
        return StyledContent(raw)
    if isinstance(raw, str):
        return TextContent(raw)
    if isinstance(raw, Mapping):
        if "text" not in raw:
            raise ValidationError(
                "Content item must have a text property",
                field="content", index=index, value=raw,
            )
        style = raw.get("style") or {}
        if not isinstance(style, Mapping):
            raise ValidationError(
                "Content style must be a mapping",
                field="content.style", index=index, value=style,
            )
        return StyledContent(ContentItem(
            text=str(raw["text"]),
            color=raw.get("color"),
            bg_color=raw.get("bgColor", raw.get("bg_color")),
            style=dict(style),
        ))
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return TextContent(str(raw))
    raise ValidationError(
        f"Unsupported content type: {type(raw).__name__}",
        field="content", index=index, value=raw,
    )


def make_contents(raw_contents: Any, raw_content: Any, index: Optional[int] = None) -> tuple[Content, ...]:
    """Build the ordered content tuple; ``contents`` wins over ``content``."""
    source = raw_contents if raw_contents else raw_content
    if source is None or source == "":
        return ()
    if isinstance(source, (list, tuple)):
        return tuple(make_content(entry, index) for entry in source if entry is not None)
    return (make_content(source, index),)


class RangeNormalizer:
    """
    Range payload normalization pipeline.

    Produces validated ``DateRange`` records from raw mappings and applies
    partial patches to existing records.
    """

    def __init__(self) -> None:
        self.logger = logger

    def normalize(self, raw: Any, index: Optional[int] = None) -> DateRange:
        """
        Normalize a raw range payload.

        Args:
            raw: Mapping payload or an existing ``DateRange``
            index: Position of the payload in a batch, used in error messages

        Raises:
            ValidationError: If required fields are missing, dates are
                unparsable or the start date is after the end date
        """
        if isinstance(raw, DateRange):
            self._check_identity(raw.code, raw.name, index)
            self._check_order(raw.start_date, raw.end_date, index)
            return raw

        if not isinstance(raw, Mapping):
            raise ValidationError(
                f"Range at index {index} must be a mapping, got {type(raw).__name__}",
                index=index, value=raw,
            )

        fields = self._canonical_fields(raw)

        self._check_identity(fields.get("code"), fields.get("name"), index)
        if not fields.get("start_date") or not fields.get("end_date"):
            raise ValidationError(
                f"Range at index {index} must have startDate and endDate properties",
                field="start_date" if not fields.get("start_date") else "end_date",
                index=index,
            )

        start = self._parse(fields["start_date"], "start_date", index)
        end = self._parse(fields["end_date"], "end_date", index)
        self._check_order(start, end, index)

        kwargs = self._build_kwargs(fields, raw, index)
        kwargs.update(code=fields["code"], start_date=start, end_date=end)
        kwargs.setdefault("clickable", True)
        return DateRange(**kwargs)

    def apply_patch(self, existing: DateRange, patch: Any) -> DateRange:
        """
        Merge a partial payload into an existing range.

        The code of the existing range is always retained.

        Raises:
            ValidationError: If patched fields are invalid
        """
        if isinstance(patch, DateRange):
            patched = dataclasses.replace(patch, code=existing.code)
            self._check_identity(patched.code, patched.name, None)
            self._check_order(patched.start_date, patched.end_date, None)
            return patched

        if not isinstance(patch, Mapping):
            raise ValidationError(
                f"Patch for range '{existing.code}' must be a mapping",
                field="patch", value=patch,
            )

        fields = self._canonical_fields(patch)
        fields.pop("code", None)

        if "name" in fields and not fields["name"]:
            raise ValidationError(f"Range '{existing.code}' must have a name property", field="name")

        start = existing.start_date
        end = existing.end_date
        if "start_date" in fields:
            start = self._parse(fields["start_date"], "start_date", None)
        if "end_date" in fields:
            end = self._parse(fields["end_date"], "end_date", None)
        self._check_order(start, end, None)

        kwargs = self._build_kwargs(fields, patch, None, base=existing)
        kwargs.update(start_date=start, end_date=end)
        return dataclasses.replace(existing, **kwargs)

    def _canonical_fields(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        """Rename camelCase keys to field names, keeping unknown keys as-is."""
        return {FIELD_ALIASES.get(key, key): value for key, value in raw.items()}

    def _build_kwargs(
        self,
        fields: dict[str, Any],
        raw: Mapping[str, Any],
        index: Optional[int],
        base: Optional[DateRange] = None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}

        for name in SIMPLE_FIELDS:
            if name in fields:
                kwargs[name] = fields[name]
        if "clickable" in kwargs:
            kwargs["clickable"] = bool(kwargs["clickable"])

        for position in POSITIONS:
            overrides = {}
            for suffix, attr in POSITION_ATTRS.items():
                camel = f"{position}{suffix}"
                snake = f"{position}_{attr}"
                if camel in raw:
                    overrides[attr] = raw[camel]
                elif snake in raw:
                    overrides[attr] = raw[snake]
            if overrides:
                current = getattr(base, f"{position}_style") if base else PositionStyle()
                kwargs[f"{position}_style"] = dataclasses.replace(current, **overrides)

        if "contents" in fields or "content" in fields:
            kwargs["contents"] = make_contents(fields.get("contents"), fields.get("content"), index)

        style: Optional[dict[str, Any]] = None
        if "content_style" in fields:
            raw_style = fields["content_style"] or {}
            if not isinstance(raw_style, Mapping):
                raise ValidationError("contentStyle must be a mapping",
                                      field="content_style", index=index, value=raw_style)
            style = dict(raw_style)
        for key, css_key in CONTENT_STYLE_SHORTHANDS.items():
            if key in raw:
                if style is None:
                    style = dict(base.content_style) if base else {}
                style.setdefault(css_key, raw[key])
        if style is not None:
            kwargs["content_style"] = style

        return kwargs

    def _check_identity(self, code: Any, name: Any, index: Optional[int]) -> None:
        if code is None or code == "":
            raise ValidationError(f"Range at index {index} must have a code property",
                                  field="code", index=index)
        if not isinstance(code, str):
            raise ValidationError(
                f"Range at index {index} code must be a string, got {type(code).__name__}",
                field="code", index=index, value=code,
            )
        if not name:
            raise ValidationError(f"Range at index {index} must have a name property",
                                  field="name", index=index)

    def _parse(self, value: Any, field: str, index: Optional[int]):
        try:
            return parse_date(value)
        except InvalidRangeError as e:
            raise InvalidRangeError(
                f"Range at index {index} has invalid date format: {value!r}",
                field=field, index=index, value=value,
            ) from e

    def _check_order(self, start, end, index: Optional[int]) -> None:
        if start > end:
            raise InvalidRangeError(
                f"Range at index {index}: startDate {format_date(start)} "
                f"must be before or equal to endDate {format_date(end)}",
                field="start_date", index=index, start=start, end=end,
            )

    def normalize_batch(self, raws: Sequence[Any]) -> list[DateRange]:
        """
        Normalize every payload of a batch before any of them is committed.

        Raises:
            ValidationError: On the first invalid entry; nothing is returned
        """
        normalized = [self.normalize(raw, index) for index, raw in enumerate(raws)]
        self.logger.debug("Normalized range batch", count=len(normalized))
        return normalized
