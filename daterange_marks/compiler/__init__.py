"""
Mark compilation module.

Expands ranges into per-day range marks and content marks, and groups
multi-week spans by ISO week.
"""
