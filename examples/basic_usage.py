#!/usr/bin/env python3
"""
Basic Usage Example - Daterange Marks

This script demonstrates the basic usage of the date range plugin on an
in-memory calendar. It shows how to:
- Initialize the plugin with a preset
- Add, update and remove ranges
- Drive debounced refreshes with a manual clock
- Resolve clicks on installed marks back to their ranges

Run: python examples/basic_usage.py
"""

from typing import Dict, Any, List

from daterange_marks.config.presets import get_palette
from daterange_marks.dispatch.events import RangeClickEvent
from daterange_marks.dispatch.host import InMemoryCalendar
from daterange_marks.dispatch.plugin import DateRangePlugin
from daterange_marks.dispatch.scheduler import ManualScheduler
from daterange_marks.logging import configure_logging


def create_sample_range(code: str, name: str, start: str, end: str, kind: str,
                        contents: List[Any]) -> Dict[str, Any]:
    """Create a sample range colored from the schedule palette."""
    palette = get_palette("schedule", kind) or {}
    return {
        "code": code,
        "name": name,
        "startDate": start,
        "endDate": end,
        "color": palette.get("color"),
        "bgColor": palette.get("bg_color"),
        "contents": contents,
        "data": {"kind": kind},
    }


def print_day(calendar: InMemoryCalendar, day: str) -> None:
    """Print every mark installed on one day."""
    marks = calendar.marks_on(day)
    print(f"📅 {day}: {len(marks)} marks")
    for mark in marks:
        print(f"    {mark.family.value:<12} {mark.text!r:<40} key={mark.key}")


def print_click(event: RangeClickEvent) -> None:
    """Print a resolved range click."""
    print(f"🖱️  Clicked {event.code} on {event.date} (data: {event.data})")


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")

    print("🚀 Daterange Marks - Basic Usage Demo")
    print("=" * 60)

    # Initialize the plugin
    print("1. Initializing the plugin with the project preset...")
    calendar = InMemoryCalendar()
    scheduler = ManualScheduler()
    plugin = DateRangePlugin(calendar, preset="project", scheduler=scheduler, onRangeClick=print_click)
    print(f"   Plugin initialized ({plugin.options.content_span_mode} content mode)")
    print()

    # Add ranges
    print("2. Adding ranges...")
    ranges = [
        create_sample_range("offsite", "Team offsite", "2024-08-01", "2024-08-15", "event",
                            ["Quarterly planning offsite", {"text": "Bring laptops", "color": "#d63031"}]),
        create_sample_range("review", "Design review", "2024-08-07", "2024-08-07", "meeting", ["Room 4B"]),
        create_sample_range("release", "Release freeze", "2024-08-12", "2024-08-16", "deadline", []),
    ]
    for raw in ranges:
        plugin.add(raw)
        print(f"   Added {raw['code']} from {raw['startDate']} to {raw['endDate']}")
    print(f"   Refresh pending: {plugin.get_info()['refresh_pending']}")
    print()

    # Let the debounce delay elapse
    print("3. Advancing the clock past the debounce delay...")
    scheduler.advance(plugin.options.batch_update_delay)
    info = plugin.get_info()
    print(f"   Ranges: {info['range_count']}, covered days: {info['date_count']}, marks: {info['mark_count']}")
    print()

    for day in ("2024-08-01", "2024-08-07", "2024-08-12"):
        print_day(calendar, day)
    print()

    # Clicks
    print("4. Simulating clicks...")
    calendar.click_mark("offsite_2024-08-05")
    calendar.click_mark("review_2024-08-07")
    calendar.click_mark("ghost_2024-01-01")
    print()

    # Update and remove
    print("5. Updating and removing ranges...")
    plugin.update("release", {"endDate": "2024-08-14", "name": "Short freeze"})
    plugin.remove("review")
    plugin.flush()
    print(f"   Ranges on 2024-08-07: {[r.code for r in plugin.get_ranges_for_date('2024-08-07')]}")
    print(f"   2024-08-16 in release: {plugin.is_date_in_range('2024-08-16', 'release')}")
    print()

    # Teardown
    print("6. Destroying the plugin...")
    plugin.destroy()
    print(f"   Installed marks left on the host: {len(calendar.marks)}")
    print("✅ Demo complete")


if __name__ == "__main__":
    main()
