"""Plugin option validation utilities."""

from dataclasses import dataclass
from typing import Any, Mapping

CONTENT_SPAN_MODES = ("single", "span")
CONTENT_ALIGNMENTS = ("left", "center", "right")
BOOLEAN_OPTIONS = ("clickable", "show_content", "chunked_loading")
CALLBACK_OPTIONS = ("on_range_click", "on_date_click", "on_range_add", "on_range_remove")


@dataclass(frozen=True)
class OptionIssue:
    """Represents a single invalid plugin option."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class OptionsValidator:
    """Validates plugin options expressed with field names."""

    @staticmethod
    def validate_display_options(options: Mapping[str, Any]) -> list[OptionIssue]:
        """Validate content display options."""
        issues = []

        if "content_span_mode" in options:
            value = options["content_span_mode"]
            if value not in CONTENT_SPAN_MODES:
                issues.append(OptionIssue(
                    field="content_span_mode",
                    message=f"Must be one of {', '.join(CONTENT_SPAN_MODES)}",
                    value=value
                ))

        if "content_alignment" in options:
            value = options["content_alignment"]
            if value not in CONTENT_ALIGNMENTS:
                issues.append(OptionIssue(
                    field="content_alignment",
                    message=f"Must be one of {', '.join(CONTENT_ALIGNMENTS)}",
                    value=value
                ))

        if "max_content_lines" in options:
            value = options["max_content_lines"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                issues.append(OptionIssue(
                    field="max_content_lines",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "span_content_style" in options:
            value = options["span_content_style"]
            if not isinstance(value, Mapping):
                issues.append(OptionIssue(
                    field="span_content_style",
                    message="Must be a mapping of style properties",
                    value=value
                ))

        for name in BOOLEAN_OPTIONS:
            if name in options and not isinstance(options[name], bool):
                issues.append(OptionIssue(
                    field=name,
                    message="Must be a boolean",
                    value=options[name]
                ))

        return issues

    @staticmethod
    def validate_scheduling_options(options: Mapping[str, Any]) -> list[OptionIssue]:
        """Validate debounce and batching options."""
        issues = []

        if "batch_update_delay" in options:
            value = options["batch_update_delay"]
            if not _is_number(value) or value < 0:
                issues.append(OptionIssue(
                    field="batch_update_delay",
                    message="Must be a non-negative number of milliseconds",
                    value=value
                ))

        if "max_ranges_per_batch" in options:
            value = options["max_ranges_per_batch"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                issues.append(OptionIssue(
                    field="max_ranges_per_batch",
                    message="Must be a positive integer",
                    value=value
                ))

        return issues

    @staticmethod
    def validate_callbacks(options: Mapping[str, Any]) -> list[OptionIssue]:
        """Validate callback options."""
        issues = []

        for name in CALLBACK_OPTIONS:
            value = options.get(name)
            if value is not None and not callable(value):
                issues.append(OptionIssue(
                    field=name,
                    message="Must be callable or None",
                    value=value
                ))

        return issues

    @staticmethod
    def validate_options(options: Mapping[str, Any]) -> list[OptionIssue]:
        """Validate a complete or partial option mapping."""
        issues = []
        issues.extend(OptionsValidator.validate_display_options(options))
        issues.extend(OptionsValidator.validate_scheduling_options(options))
        issues.extend(OptionsValidator.validate_callbacks(options))
        return issues
