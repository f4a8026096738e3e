"""Default configuration parameters for the date range plugin."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

DEFAULT_SPAN_CONTENT_STYLE: dict[str, Any] = {
    "backgroundColor": "rgba(255, 255, 255, 0.95)",
    "border": "1px solid #e0e0e0",
    "borderRadius": "4px",
    "padding": "4px 8px",
    "fontSize": "12px",
    "color": "#333",
    "boxShadow": "0 1px 3px rgba(0,0,0,0.1)",
    "zIndex": 10,
}

CALLBACK_FIELDS = ("on_range_click", "on_date_click", "on_range_add", "on_range_remove")
STYLE_MAP_FIELDS = ("span_content_style",)

# camelCase option name -> PluginOptions field
OPTION_ALIASES = {
    "markAs": "mark_as",
    "defaultColor": "default_color",
    "defaultBgColor": "default_bg_color",
    "showContent": "show_content",
    "contentMarkAs": "content_mark_as",
    "contentDefaultColor": "content_default_color",
    "contentDefaultBgColor": "content_default_bg_color",
    "contentDefaultFontSize": "content_default_font_size",
    "contentDefaultPadding": "content_default_padding",
    "contentDefaultBorderRadius": "content_default_border_radius",
    "contentDefaultLineHeight": "content_default_line_height",
    "maxContentLines": "max_content_lines",
    "contentSpanMode": "content_span_mode",
    "contentAlignment": "content_alignment",
    "spanContentStyle": "span_content_style",
    "batchUpdateDelay": "batch_update_delay",
    "maxRangesPerBatch": "max_ranges_per_batch",
    "chunkedLoading": "chunked_loading",
    "onRangeClick": "on_range_click",
    "onDateClick": "on_date_click",
    "onRangeAdd": "on_range_add",
    "onRangeRemove": "on_range_remove",
}


@dataclass(frozen=True)
class PluginOptions:
    """Complete option set of one plugin instance."""
    # Range marks
    ranges: tuple = ()                               # Initial ranges loaded on construction
    mark_as: str = "schedule"                        # Host visual family for range marks
    default_color: str = "#667eea"
    default_bg_color: str = "#f0f2ff"
    clickable: bool = True                           # Bind host click events

    # Content display
    show_content: bool = False
    content_mark_as: str = "schedule"
    content_default_color: str = "#666666"
    content_default_bg_color: str = "#ffffff"
    content_default_font_size: str = "12px"
    content_default_padding: str = "4px 8px"
    content_default_border_radius: str = "4px"
    content_default_line_height: str = "1.4"
    max_content_lines: int = 3

    # Cross-day content
    content_span_mode: str = "single"                # single | span
    content_alignment: str = "left"                  # left | center | right
    span_content_style: dict[str, Any] = field(
        default_factory=lambda: dict(DEFAULT_SPAN_CONTENT_STYLE)
    )

    # Callbacks
    on_range_click: Optional[Callable[..., Any]] = None
    on_date_click: Optional[Callable[..., Any]] = None
    on_range_add: Optional[Callable[..., Any]] = None
    on_range_remove: Optional[Callable[..., Any]] = None

    # Scheduling
    batch_update_delay: float = 100                  # Debounce delay in ms
    max_ranges_per_batch: int = 50                   # Ranges per chunk on chunked load
    chunked_loading: bool = False                    # Install large loads in chunks

    def to_dict(self) -> dict[str, Any]:
        """Shallow dict view; style maps are copied."""
        result = {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}
        for name in STYLE_MAP_FIELDS:
            result[name] = dict(result[name])
        return result

    def content_defaults(self) -> dict[str, Any]:
        """Global content style defaults as a style map."""
        return {
            "color": self.content_default_color,
            "backgroundColor": self.content_default_bg_color,
            "fontSize": self.content_default_font_size,
            "padding": self.content_default_padding,
            "borderRadius": self.content_default_border_radius,
            "lineHeight": self.content_default_line_height,
        }


def get_default_options() -> PluginOptions:
    """Get the default option set."""
    return PluginOptions()


def canonical_option_keys(options: dict[str, Any]) -> dict[str, Any]:
    """Rename camelCase option keys to their field names."""
    return {OPTION_ALIASES.get(key, key): value for key, value in options.items()}
