"""Tests for range payload normalization."""

import pytest
from datetime import date

from daterange_marks.data.models import (
    ContentItem,
    ContentKind,
    DateRange,
    MarkPosition,
    StyledContent,
    TextContent,
)
from daterange_marks.data.normalizer import RangeNormalizer, make_content, make_contents
from daterange_marks.data.parsers import coerce_range_batch, parse_json_payload
from daterange_marks.errors import InvalidRangeError, ValidationError


class TestContentUnion:
    """Test resolution of raw content into the content union."""

    def test_string_becomes_text_content(self):
        content = make_content("Kickoff")
        assert isinstance(content, TextContent)
        assert content.kind == ContentKind.TEXT
        assert content.color is None
        assert content.style == {}

    def test_mapping_becomes_styled_content(self):
        content = make_content({"text": "Owner", "color": "#fff", "bgColor": "#000", "style": {"fontWeight": "bold"}})
        assert isinstance(content, StyledContent)
        assert content.kind == ContentKind.STYLED
        assert content.text == "Owner"
        assert content.color == "#fff"
        assert content.bg_color == "#000"
        assert content.style == {"fontWeight": "bold"}

    def test_content_item_is_wrapped(self):
        content = make_content(ContentItem(text="Review"))
        assert isinstance(content, StyledContent)
        assert content.item.text == "Review"

    def test_mapping_without_text_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            make_content({"color": "red"}, index=2)
        assert exc_info.value.index == 2

    def test_contents_take_precedence_over_content(self):
        contents = make_contents(["a", "b"], "ignored")
        assert [c.text for c in contents] == ["a", "b"]

    def test_single_content_is_wrapped_in_tuple(self):
        contents = make_contents(None, "only")
        assert len(contents) == 1
        assert contents[0].text == "only"

    def test_empty_content_yields_nothing(self):
        assert make_contents(None, None) == ()
        assert make_contents([], "") == ()


class TestRangeNormalizer:
    """Test validation and normalization of range payloads."""

    def setup_method(self):
        self.normalizer = RangeNormalizer()

    def test_normalize_camel_case_payload(self, sample_range):
        record = self.normalizer.normalize(sample_range, index=0)

        assert record.code == "sprint-1"
        assert record.start_date == date(2024, 8, 2)
        assert record.end_date == date(2024, 8, 6)
        assert record.bg_color == "#f0fff4"
        assert record.data == {"owner": "team-a"}
        assert record.clickable is True

    def test_normalize_snake_case_payload(self):
        record = self.normalizer.normalize({
            "code": "x", "name": "X", "start_date": "2024-01-01", "end_date": "2024-01-02",
            "bg_color": "#eee",
        })
        assert record.bg_color == "#eee"
        assert record.day_count == 2

    def test_missing_code(self):
        with pytest.raises(ValidationError, match="index 3 must have a code property") as exc_info:
            self.normalizer.normalize({"name": "x", "startDate": "2024-01-01", "endDate": "2024-01-01"}, index=3)
        assert exc_info.value.field == "code"

    def test_missing_name(self):
        with pytest.raises(ValidationError, match="must have a name property"):
            self.normalizer.normalize({"code": "x", "startDate": "2024-01-01", "endDate": "2024-01-01"}, index=0)

    def test_missing_dates(self):
        with pytest.raises(ValidationError, match="must have startDate and endDate"):
            self.normalizer.normalize({"code": "x", "name": "X", "startDate": "2024-01-01"}, index=0)

    def test_invalid_date_format(self):
        with pytest.raises(InvalidRangeError, match="invalid date format"):
            self.normalizer.normalize({"code": "x", "name": "X", "startDate": "soon", "endDate": "2024-01-01"}, index=0)

    def test_start_after_end(self):
        with pytest.raises(InvalidRangeError, match="must be before or equal to endDate"):
            self.normalizer.normalize({"code": "x", "name": "X", "startDate": "2024-01-02", "endDate": "2024-01-01"}, index=0)

    def test_non_mapping_payload(self):
        with pytest.raises(ValidationError):
            self.normalizer.normalize("x", index=0)

    def test_position_overrides(self):
        record = self.normalizer.normalize({
            "code": "p", "name": "P", "startDate": "2024-01-01", "endDate": "2024-01-03",
            "startColor": "#111", "middleBgColor": "#222", "endMarkAs": "deadline",
        })
        assert record.start_style.color == "#111"
        assert record.middle_style.bg_color == "#222"
        assert record.end_style.mark_as == "deadline"
        assert record.style_for(MarkPosition.SINGLE).is_empty

    def test_content_shorthands_fold_into_content_style(self):
        record = self.normalizer.normalize({
            "code": "c", "name": "C", "startDate": "2024-01-01", "endDate": "2024-01-01",
            "content": "Note", "contentFontSize": "14px", "contentStyle": {"fontWeight": "600"},
        })
        assert record.content_style == {"fontWeight": "600", "fontSize": "14px"}
        assert record.has_content

    def test_date_range_passthrough(self):
        record = DateRange(code="d", name="D", start_date=date(2024, 1, 1), end_date=date(2024, 1, 1))
        assert self.normalizer.normalize(record) is record

    @pytest.mark.parametrize("code", [7, 1.5, True])
    def test_non_string_code_rejected(self, code):
        with pytest.raises(ValidationError, match="code must be a string") as exc_info:
            self.normalizer.normalize({"code": code, "name": "X", "startDate": "2024-01-01", "endDate": "2024-01-01"}, index=0)
        assert exc_info.value.field == "code"

    def test_unpadded_dates_accepted(self):
        record = self.normalizer.normalize({"code": "u", "name": "U", "startDate": "2024-3-1", "endDate": "2024/3/9"})
        assert record.start_date == date(2024, 3, 1)
        assert record.end_date == date(2024, 3, 9)

    @pytest.mark.parametrize("code, name, message", [
        ("", "D", "must have a code property"),
        ("d", "", "must have a name property"),
    ])
    def test_date_range_instance_requires_code_and_name(self, code, name, message):
        record = DateRange(code=code, name=name, start_date=date(2024, 1, 1), end_date=date(2024, 1, 1))
        with pytest.raises(ValidationError, match=message):
            self.normalizer.normalize(record, index=0)

    def test_callable_content_rejected(self):
        with pytest.raises(ValidationError, match="Unsupported content type"):
            self.normalizer.normalize({
                "code": "f", "name": "F", "startDate": "2024-01-01", "endDate": "2024-01-01",
                "content": lambda record: record.name,
            })

    def test_batch_fails_on_first_invalid_entry(self, sample_batch):
        batch = sample_batch + [{"code": "bad", "name": "Bad"}]
        with pytest.raises(ValidationError, match="index 3"):
            self.normalizer.normalize_batch(batch)


class TestApplyPatch:
    """Test partial updates of existing ranges."""

    def setup_method(self):
        self.normalizer = RangeNormalizer()
        self.existing = self.normalizer.normalize({
            "code": "r", "name": "Original", "startDate": "2024-01-01", "endDate": "2024-01-05",
            "color": "#123456", "startColor": "#111",
        })

    def test_patch_keeps_code(self):
        patched = self.normalizer.apply_patch(self.existing, {"code": "other", "name": "Renamed"})
        assert patched.code == "r"
        assert patched.name == "Renamed"
        assert patched.color == "#123456"

    def test_patch_dates(self):
        patched = self.normalizer.apply_patch(self.existing, {"endDate": "2024-01-10"})
        assert patched.start_date == date(2024, 1, 1)
        assert patched.end_date == date(2024, 1, 10)

    def test_patch_cannot_invert_dates(self):
        with pytest.raises(InvalidRangeError):
            self.normalizer.apply_patch(self.existing, {"startDate": "2024-02-01"})

    def test_patch_with_date_range_requires_name(self):
        replacement = DateRange(code="other", name="", start_date=date(2024, 1, 1), end_date=date(2024, 1, 2))
        with pytest.raises(ValidationError, match="must have a name property"):
            self.normalizer.apply_patch(self.existing, replacement)

    def test_patch_merges_position_overrides(self):
        patched = self.normalizer.apply_patch(self.existing, {"startBgColor": "#222"})
        assert patched.start_style.color == "#111"
        assert patched.start_style.bg_color == "#222"


class TestRangeBatchParsing:
    """Test batch shape coercion and JSON decoding."""

    def test_single_mapping_becomes_list(self, sample_range):
        assert coerce_range_batch(sample_range) == [sample_range]

    def test_tuple_becomes_list(self, sample_batch):
        assert coerce_range_batch(tuple(sample_batch)) == sample_batch

    def test_json_document(self):
        batch = coerce_range_batch(b'[{"code": "j", "name": "J", "startDate": "2024-01-01", "endDate": "2024-01-01"}]')
        assert batch[0]["code"] == "j"

    def test_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON"):
            parse_json_payload("[{")

    def test_unsupported_shape(self):
        with pytest.raises(ValidationError):
            coerce_range_batch(42)
