"""
Plugin event channel and click event payloads.

Every plugin event fans out to local subscribers and, when the host
calendar exposes ``trigger``, is forwarded to it as ``dateRange:<name>``.
A failing listener is logged and skipped; it never aborts the operation
that emitted the event.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

import structlog

from ..data.models import DateRange

logger = structlog.get_logger(__name__)

EVENT_PREFIX = "dateRange"

Listener = Callable[[Any], Any]


@dataclass(frozen=True)
class RangeClickEvent:
    """A click on an installed mark resolved back to its range."""
    range: DateRange
    date: str
    code: str
    data: Any
    mark_key: str
    original_event: Any = None


@dataclass(frozen=True)
class DateClickEvent:
    """A click on a day cell with every range covering that day."""
    date: str
    ranges: tuple[DateRange, ...]
    original_event: Any = None


class EventChannel:
    """Named-event fan-out to local listeners and the host calendar."""

    def __init__(self, forward: Optional[Callable[[str, Any], Any]] = None):
        self.forward = forward
        self.logger = logger
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, name: str, listener: Listener) -> None:
        self._listeners.setdefault(name, []).append(listener)

    def unsubscribe(self, name: str, listener: Optional[Listener] = None) -> None:
        if listener is None:
            self._listeners.pop(name, None)
            return
        listeners = self._listeners.get(name, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, []))

    def emit(self, name: str, payload: Any = None) -> None:
        """Deliver an event to local listeners, then forward it to the host."""
        for listener in list(self._listeners.get(name, [])):
            self.call_safely(listener, payload, source=name)

        if self.forward is not None:
            try:
                self.forward(f"{EVENT_PREFIX}:{name}", payload)
            except Exception as e:
                self.logger.error(
                    "Host event forwarding failed",
                    event_name=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def call_safely(self, listener: Callable[..., Any], *args: Any, source: str) -> None:
        """Invoke a listener or callback, logging instead of raising."""
        try:
            listener(*args)
        except Exception as e:
            self.logger.error(
                "Event listener failed",
                event_name=source,
                error=str(e),
                error_type=type(e).__name__,
            )

    def clear(self) -> None:
        self._listeners.clear()
        self.forward = None
