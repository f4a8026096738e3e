"""Pytest configuration and shared fixtures."""

import pytest
from typing import Dict, Any, List

from daterange_marks.config.defaults import PluginOptions
from daterange_marks.dispatch.host import InMemoryCalendar
from daterange_marks.dispatch.plugin import DateRangePlugin
from daterange_marks.dispatch.scheduler import ManualScheduler


@pytest.fixture
def sample_range() -> Dict[str, Any]:
    """Sample multi-day range spanning a week boundary."""
    return {
        "code": "sprint-1",
        "name": "Sprint 1",
        "startDate": "2024-08-02",
        "endDate": "2024-08-06",
        "color": "#00b894",
        "bgColor": "#f0fff4",
        "data": {"owner": "team-a"},
    }


@pytest.fixture
def single_day_range() -> Dict[str, Any]:
    """Sample single-day range."""
    return {
        "code": "a",
        "name": "Release",
        "startDate": "2024-03-01",
        "endDate": "2024-03-01",
    }


@pytest.fixture
def content_range() -> Dict[str, Any]:
    """Sample range with one text and one styled content item."""
    return {
        "code": "phase-1",
        "name": "Design phase",
        "startDate": "2024-08-01",
        "endDate": "2024-08-15",
        "contents": [
            "Wireframes and visual design review",
            {"text": "Owner: Dana", "color": "#d63031", "style": {"fontWeight": "bold"}},
        ],
    }


@pytest.fixture
def sample_batch() -> List[Dict[str, Any]]:
    """Three overlapping ranges."""
    return [
        {"code": "r1", "name": "Planning", "startDate": "2024-08-01", "endDate": "2024-08-03"},
        {"code": "r2", "name": "Build", "startDate": "2024-08-03", "endDate": "2024-08-09"},
        {"code": "r3", "name": "Launch", "startDate": "2024-08-12", "endDate": "2024-08-12"},
    ]


@pytest.fixture
def options() -> PluginOptions:
    """Default plugin options."""
    return PluginOptions()


@pytest.fixture
def calendar() -> InMemoryCalendar:
    """In-memory host calendar."""
    return InMemoryCalendar()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock scheduler."""
    return ManualScheduler()


@pytest.fixture
def plugin(calendar: InMemoryCalendar, scheduler: ManualScheduler) -> DateRangePlugin:
    """Plugin bound to an in-memory calendar and a manual scheduler."""
    return DateRangePlugin(calendar, scheduler=scheduler, plugin_id="test-plugin")
