#!/usr/bin/env python3
"""Refresh performance benchmark script for Daterange Marks."""

import time
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Any, List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from daterange_marks.dispatch.host import InMemoryCalendar
from daterange_marks.dispatch.plugin import DateRangePlugin
from daterange_marks.dispatch.scheduler import ManualScheduler
from daterange_marks.logging import configure_logging


def generate_sample_ranges(count: int) -> List[Dict[str, Any]]:
    """Generate overlapping ranges of 1 to 21 days with one content item each."""
    base = date(2024, 1, 1)

    ranges = []
    for i in range(count):
        start = base + timedelta(days=i % 300)
        end = start + timedelta(days=i % 21)
        ranges.append({
            "code": f"range-{i}",
            "name": f"Range {i}",
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "content": f"Content for range {i}",
        })

    return ranges


def benchmark_refresh(range_count: int = 100, content_mode: str = "span", rounds: int = 10) -> Dict[str, float]:
    """Benchmark full-recompute refreshes."""
    print(f"🏃 Benchmarking refresh with {range_count} ranges ({content_mode} mode)...")

    calendar = InMemoryCalendar()
    plugin = DateRangePlugin(
        calendar,
        scheduler=ManualScheduler(),
        showContent=True,
        contentSpanMode=content_mode,
    )
    plugin.load(generate_sample_ranges(range_count))

    start_time = time.perf_counter()

    for _ in range(rounds):
        plugin.refresh()

    total_time = time.perf_counter() - start_time
    mark_count = plugin.get_info()["mark_count"]

    return {
        "total_time": total_time,
        "avg_time_per_refresh": total_time / rounds,
        "marks": mark_count,
        "marks_per_second": mark_count * rounds / total_time,
    }


def main():
    """Main benchmark function."""
    configure_logging(level="WARNING")

    print("⚡ Daterange Marks Refresh Benchmark")
    print("=" * 40)

    test_sizes = [10, 100, 500, 1000]

    for size in test_sizes:
        for mode in ("single", "span"):
            results = benchmark_refresh(size, mode)

            print(f"\n📊 Results for {size} ranges ({mode}):")
            print(f"   Marks per refresh: {results['marks']}")
            print(f"   Avg per refresh: {results['avg_time_per_refresh']*1000:.3f}ms")
            print(f"   Marks/second: {results['marks_per_second']:.1f}")

            if results['avg_time_per_refresh'] <= 0.1:
                print(f"   ✅ Refresh fits in one debounce window")
            else:
                print(f"   ⚠️  Refresh exceeds one debounce window, consider chunked loading")


if __name__ == "__main__":
    main()
