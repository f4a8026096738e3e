"""
Named option presets for common calendar scenarios.

Presets are plain option bundles. Each one also ships a color palette of
``{color, bg_color}`` pairs that callers can splice into their range
payloads.
"""

from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)

PROJECT_MANAGEMENT_PRESET: dict[str, Any] = {
    "show_content": True,
    "content_span_mode": "span",
    "content_alignment": "left",
    "max_content_lines": 3,
    "content_default_color": "#333333",
    "content_default_bg_color": "rgba(255, 255, 255, 0.95)",
    "content_default_font_size": "12px",
    "content_default_padding": "4px 8px",
    "content_default_border_radius": "6px",
    "span_content_style": {
        "backgroundColor": "rgba(255, 255, 255, 0.95)",
        "border": "1px solid #e0e0e0",
        "borderRadius": "6px",
        "padding": "4px 8px",
        "fontSize": "12px",
        "color": "#333",
        "boxShadow": "0 2px 8px rgba(0,0,0,0.1)",
        "zIndex": 10,
        "fontWeight": "500",
    },
    "default_color": "#667eea",
    "default_bg_color": "#f0f2ff",
}

SCHEDULE_PRESET: dict[str, Any] = {
    "show_content": True,
    "content_span_mode": "single",
    "content_alignment": "center",
    "max_content_lines": 2,
    "content_default_color": "#2d3436",
    "content_default_bg_color": "#ffffff",
    "content_default_font_size": "11px",
    "content_default_padding": "3px 6px",
    "content_default_border_radius": "4px",
    "default_color": "#0984e3",
    "default_bg_color": "#e3f2fd",
}

HOLIDAY_PRESET: dict[str, Any] = {
    "show_content": True,
    "content_span_mode": "single",
    "content_alignment": "center",
    "max_content_lines": 1,
    "mark_as": "festival",
    "content_default_color": "#ffffff",
    "content_default_bg_color": "#e74c3c",
    "content_default_font_size": "10px",
    "content_default_padding": "2px 4px",
    "content_default_border_radius": "3px",
    "default_color": "#ffffff",
    "default_bg_color": "#e74c3c",
}

PHASE_COLORS = {
    "planning": {"color": "#6c5ce7", "bg_color": "#f4f3ff"},
    "design": {"color": "#667eea", "bg_color": "#f0f2ff"},
    "development": {"color": "#00b894", "bg_color": "#f0fff4"},
    "testing": {"color": "#f39c12", "bg_color": "#fffbf0"},
    "deployment": {"color": "#e17055", "bg_color": "#fff5f5"},
    "maintenance": {"color": "#636e72", "bg_color": "#f8f9fa"},
}

SCHEDULE_COLORS = {
    "meeting": {"color": "#0984e3", "bg_color": "#e3f2fd"},
    "event": {"color": "#00b894", "bg_color": "#e8f5e8"},
    "deadline": {"color": "#d63031", "bg_color": "#ffebee"},
    "reminder": {"color": "#f39c12", "bg_color": "#fff8e1"},
    "holiday": {"color": "#6c5ce7", "bg_color": "#f3e5f5"},
    "personal": {"color": "#636e72", "bg_color": "#f5f6fa"},
}

HOLIDAY_COLORS = {
    "national": {"color": "#ffffff", "bg_color": "#e74c3c"},
    "traditional": {"color": "#ffffff", "bg_color": "#f39c12"},
    "international": {"color": "#ffffff", "bg_color": "#9b59b6"},
    "workday": {"color": "#ffffff", "bg_color": "#34495e"},
    "weekend": {"color": "#ffffff", "bg_color": "#95a5a6"},
    "vacation": {"color": "#ffffff", "bg_color": "#3498db"},
}

PRESETS = {
    "project": PROJECT_MANAGEMENT_PRESET,
    "schedule": SCHEDULE_PRESET,
    "holiday": HOLIDAY_PRESET,
}

PALETTES = {
    "project": PHASE_COLORS,
    "schedule": SCHEDULE_COLORS,
    "holiday": HOLIDAY_COLORS,
}


def get_preset(name: str) -> dict[str, Any]:
    """Copy of a named preset; unknown names fall back to the project preset."""
    preset = PRESETS.get(name)
    if preset is None:
        logger.warning("Unknown preset, using project preset", preset=name)
        preset = PROJECT_MANAGEMENT_PRESET
    return merge_preset_with_options(preset, {})


def get_palette(preset_name: str, key: str) -> Optional[dict[str, str]]:
    """``{color, bg_color}`` pair for a palette entry, or None."""
    entry = PALETTES.get(preset_name, {}).get(key)
    return dict(entry) if entry else None


def merge_preset_with_options(preset: dict[str, Any], overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Shallow-merge overrides into a preset, deep-merging style maps."""
    overrides = overrides or {}
    merged = {**preset, **overrides}
    if "span_content_style" in preset or "span_content_style" in overrides:
        merged["span_content_style"] = {
            **preset.get("span_content_style", {}),
            **(overrides.get("span_content_style") or {}),
        }
    return merged
