"""
Daterange Marks - Date Range Marking for Calendar Widgets

Decorates a host calendar with named, colored date ranges. Ranges are
validated into a keyed store, compiled into per-day and per-week mark
descriptors, and reinstalled on the host on every (debounced) refresh.
Clicks on installed marks resolve back to the owning range.
"""

__version__ = "0.1.0"
__author__ = "Daterange Marks Team"
