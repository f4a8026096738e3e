"""
Structured error classification for the date range marking layer.

Range errors are raised synchronously by mutating operations and are never
partially applied. Dispatch errors describe refresh-time failures and are
caught at the plugin boundary, where they are reported as ``error`` events.
"""

from .range_errors import (
    RangeError,
    ValidationError,
    InvalidRangeError,
    DuplicateCodeError,
    NotFoundError,
)
from .dispatch_failures import (
    DispatchError,
    HostCalendarError,
    RefreshError,
    LifecycleError,
)

__all__ = [
    # Range Errors
    "RangeError",
    "ValidationError",
    "InvalidRangeError",
    "DuplicateCodeError",
    "NotFoundError",
    # Dispatch Failures
    "DispatchError",
    "HostCalendarError",
    "RefreshError",
    "LifecycleError",
]
