"""
Host calendar collaborator.

The plugin only needs five operations from the calendar it decorates:
``add_marks``, ``remove_mark``, ``on``, ``off`` and, optionally,
``trigger`` for forwarding custom events.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ..data.models import Mark

Handler = Callable[[Any], Any]


@runtime_checkable
class HostCalendar(Protocol):
    """Operations consumed from the host calendar."""

    def add_marks(self, marks: list[Mark]) -> None:
        ...

    def remove_mark(self, key: str) -> None:
        ...

    def on(self, event_name: str, handler: Handler) -> None:
        ...

    def off(self, event_name: str, handler: Optional[Handler] = None) -> None:
        ...


class InMemoryCalendar:
    """
    Reference host that keeps installed marks in memory.

    Installed marks are keyed by mark key; events are dispatched
    synchronously to registered handlers in registration order.
    """

    def __init__(self) -> None:
        self.marks: dict[str, Mark] = {}
        self.handlers: dict[str, list[Handler]] = {}
        self.triggered: list[tuple[str, Any]] = []
        self.add_calls = 0

    def add_marks(self, marks: list[Mark]) -> None:
        self.add_calls += 1
        for mark in marks:
            self.marks[mark.key] = mark

    def remove_mark(self, key: str) -> None:
        self.marks.pop(key, None)

    def on(self, event_name: str, handler: Handler) -> None:
        self.handlers.setdefault(event_name, []).append(handler)

    def off(self, event_name: str, handler: Optional[Handler] = None) -> None:
        if handler is None:
            self.handlers.pop(event_name, None)
            return
        handlers = self.handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def trigger(self, event_name: str, payload: Any = None) -> None:
        self.triggered.append((event_name, payload))
        for handler in list(self.handlers.get(event_name, [])):
            handler(payload)

    def marks_on(self, day: str) -> list[Mark]:
        """Installed marks for one date key."""
        return [mark for mark in self.marks.values() if mark.date == day]

    def click_mark(self, key: str) -> None:
        """Simulate a user clicking an installed mark."""
        mark = self.marks.get(key)
        self.trigger("markClick", {"mark": mark if mark is not None else {"key": key}})

    def click_date(self, day: str) -> None:
        """Simulate a user clicking a day cell."""
        self.trigger("dateClick", {"date": day})
