"""
Dispatch failure classifications for refresh-time errors.

These never escape the plugin facade: they are logged and forwarded as
``error`` events so a single bad mark cannot corrupt plugin state.
"""

from typing import Optional, Dict, Any


class DispatchError(Exception):
    """Base class for failures while talking to the host calendar."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class HostCalendarError(DispatchError):
    """The host calendar rejected a mark installation or removal."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 mark_key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.mark_key = mark_key


class RefreshError(DispatchError):
    """Mark compilation or installation failed during a refresh."""

    def __init__(self, message: str, phase: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.phase = phase


class LifecycleError(DispatchError):
    """Lifecycle transition not allowed from the current state."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
