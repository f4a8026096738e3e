"""
Error handling tests for the date range marking layer.

Tests cover error classification, synchronous rejection of invalid
mutations, and containment of refresh-time failures.
"""

import pytest
from unittest.mock import Mock

from daterange_marks.errors import (
    RangeError,
    ValidationError,
    InvalidRangeError,
    DuplicateCodeError,
    NotFoundError,
    DispatchError,
    HostCalendarError,
    RefreshError,
    LifecycleError,
)
from daterange_marks.dispatch.host import InMemoryCalendar
from daterange_marks.dispatch.plugin import DateRangePlugin
from daterange_marks.dispatch.scheduler import ManualScheduler
from daterange_marks.dispatch.state import PluginState, can_transition, check_transition


class TestErrorClassification:
    """Test error classification system."""

    def test_range_error_hierarchy(self):
        """Test that range errors are recoverable and carry context."""
        base_error = RangeError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}

        validation_error = ValidationError("missing code", field="code", index=2)
        assert isinstance(validation_error, RangeError)
        assert validation_error.field == "code"
        assert validation_error.index == 2

        invalid_range = InvalidRangeError("inverted", start="2024-01-02", end="2024-01-01", field="start_date")
        assert isinstance(invalid_range, ValidationError)
        assert invalid_range.start == "2024-01-02"
        assert invalid_range.field == "start_date"

        assert DuplicateCodeError("dup", code="x").code == "x"
        assert NotFoundError("missing", code="y").code == "y"

    def test_dispatch_error_hierarchy(self):
        """Test that dispatch failures are not recoverable."""
        host_error = HostCalendarError("rejected", operation="add_marks", mark_key="k")
        assert isinstance(host_error, DispatchError)
        assert host_error.recoverable is False
        assert host_error.operation == "add_marks"
        assert host_error.mark_key == "k"

        refresh_error = RefreshError("compile failed", phase="compile", context={"ranges": 3})
        assert refresh_error.phase == "compile"
        assert refresh_error.context == {"ranges": 3}

        lifecycle_error = LifecycleError("invalid", current_state="destroyed", attempted_transition="active")
        assert lifecycle_error.current_state == "destroyed"


class TestLifecycleTransitions:
    """Test the lifecycle state model."""

    def test_allowed_transitions(self):
        assert can_transition(PluginState.ACTIVE, PluginState.PAUSED)
        assert can_transition(PluginState.PAUSED, PluginState.ACTIVE)
        assert can_transition(PluginState.PAUSED, PluginState.DESTROYED)

    def test_destroyed_is_terminal(self):
        for target in PluginState:
            assert not can_transition(PluginState.DESTROYED, target)

        with pytest.raises(LifecycleError) as exc_info:
            check_transition(PluginState.DESTROYED, PluginState.ACTIVE)
        assert exc_info.value.attempted_transition == "active"


class TestPluginErrorHandling:
    """Test error containment in the plugin facade."""

    def setup_method(self):
        self.calendar = InMemoryCalendar()
        self.scheduler = ManualScheduler()
        self.plugin = DateRangePlugin(self.calendar, scheduler=self.scheduler)

    def test_invalid_add_is_not_applied(self):
        """Test invalid payloads raise synchronously and change nothing."""
        with pytest.raises(ValidationError):
            self.plugin.add({"name": "no code", "startDate": "2024-01-01", "endDate": "2024-01-01"})

        assert self.plugin.get_info()["range_count"] == 0
        assert self.scheduler.pending_count == 0
        assert self.calendar.triggered == []

    def test_compile_failure_is_reported(self):
        """Test a compiler exception becomes an error event, not a raise."""
        errors = []
        self.plugin.on("error", errors.append)
        self.plugin.add({"code": "x", "name": "X", "startDate": "2024-01-01", "endDate": "2024-01-01"})
        self.plugin.compiler = Mock()
        self.plugin.compiler.compile.side_effect = RuntimeError("boom")

        self.scheduler.advance(100)

        assert len(errors) == 1
        assert isinstance(errors[0]["error"], RefreshError)
        assert errors[0]["error"].phase == "compile"
        assert self.calendar.marks == {}

    def test_recovers_after_failed_refresh(self):
        """Test the next refresh succeeds once the cause is gone."""
        original = self.plugin.compiler
        self.plugin.compiler = Mock()
        self.plugin.compiler.compile.side_effect = RuntimeError("boom")
        self.plugin.add({"code": "x", "name": "X", "startDate": "2024-01-01", "endDate": "2024-01-02"})
        self.scheduler.advance(100)

        self.plugin.compiler = original
        self.plugin.refresh()
        assert len(self.calendar.marks) == 2

    def test_failing_mark_removal_is_logged_and_skipped(self):
        """Test a host that rejects removals does not block refreshes."""
        self.plugin.load([{"code": "x", "name": "X", "startDate": "2024-01-01", "endDate": "2024-01-02"}])
        self.calendar.remove_mark = Mock(side_effect=KeyError("gone"))

        self.plugin.load([{"code": "y", "name": "Y", "startDate": "2024-02-01", "endDate": "2024-02-01"}])

        assert self.calendar.remove_mark.call_count == 2
        assert "y_2024-02-01" in self.calendar.marks

    def test_failing_listener_does_not_abort_mutation(self):
        """Test listener exceptions are contained."""
        self.plugin.on("rangeAdded", Mock(side_effect=RuntimeError("listener bug")))
        record = self.plugin.add({"code": "x", "name": "X", "startDate": "2024-01-01", "endDate": "2024-01-01"})

        assert record.code == "x"
        assert self.plugin.get_info()["range_count"] == 1

    def test_failing_host_forwarding_is_contained(self):
        """Test a broken host trigger does not break dispatch."""
        self.calendar.trigger = Mock(side_effect=RuntimeError("no trigger"))
        plugin = DateRangePlugin(self.calendar, scheduler=self.scheduler)

        assert plugin.add({"code": "z", "name": "Z", "startDate": "2024-01-01", "endDate": "2024-01-01"}) is not None
