"""
Range record error classifications.

These exceptions are raised by the range store and the payload normalizer
when a caller submits data that cannot be committed.
"""

from typing import Any, Optional, Dict


class RangeError(Exception):
    """Base class for rejected range mutations."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = True


class ValidationError(RangeError):
    """Missing required field, unparsable date or inverted range."""

    def __init__(self, message: str, field: Optional[str] = None,
                 index: Optional[int] = None, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.index = index
        self.value = value


class InvalidRangeError(ValidationError):
    """Start and end dates do not describe a valid, ordered span."""

    def __init__(self, message: str, start: Any = None, end: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.start = start
        self.end = end


class DuplicateCodeError(RangeError):
    """A range with the same code is already stored."""

    def __init__(self, message: str, code: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.code = code


class NotFoundError(RangeError):
    """No range is stored under the requested code."""

    def __init__(self, message: str, code: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.code = code
