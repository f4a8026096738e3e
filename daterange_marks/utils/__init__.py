"""
Utility functions module.

Date semantics:
- Canonical date keys are zero-padded YYYY-MM-DD strings
- Datetimes are reduced to their local calendar date, never converted
- Weekdays are numbered 0=Sunday .. 6=Saturday
- Week buckets start on the ISO Monday; Sunday closes the previous week
"""
