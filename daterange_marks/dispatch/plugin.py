"""
Date range plugin facade.

Orchestrates the range store, the mark compiler and the host calendar:

    mutation -> range store -> (debounced) refresh -> mark compiler
             -> remove previously installed marks -> install new marks
             -> host click -> mark key index -> range -> callbacks/events

Every refresh recompiles the whole collection; marks are never patched
incrementally. All work happens on the caller's thread. The only deferred
work is the debounced refresh and chunked installation, both expressed as
cancellable tasks from the injected scheduler.
"""

import time
from collections.abc import Mapping
from typing import Any, Optional

from ..compiler.marks import MarkCompiler
from ..config.defaults import PluginOptions
from ..config.loader import OptionsLoader
from ..data.models import DateRange, Mark
from ..data.parsers import RangeBatch, coerce_range_batch
from ..errors import HostCalendarError, InvalidRangeError, RefreshError
from ..logging.config import get_dispatch_logger, log_lifecycle_transition, log_refresh
from ..store.range_store import RangeStore
from ..utils.dates import DateLike, format_date
from .events import DateClickEvent, EventChannel, Listener, RangeClickEvent
from .host import HostCalendar
from .scheduler import ScheduledTask, Scheduler, default_scheduler
from .state import PluginState, check_transition

DATE_RANGE_PLUGIN_KEY = "dateRange"

logger = get_dispatch_logger(__name__)


class DateRangePlugin:
    """
    Marks named date ranges on a host calendar.

    Lifecycle: ACTIVE <-> PAUSED -> DESTROYED. While paused, mutations are
    applied to the store but no refresh runs until ``resume``. After
    ``destroy`` every operation is an inert no-op.
    """

    def __init__(
        self,
        calendar: HostCalendar,
        options: Optional[dict[str, Any]] = None,
        *,
        preset: Optional[str] = None,
        scheduler: Optional[Scheduler] = None,
        loader: Optional[OptionsLoader] = None,
        options_file: Optional[str] = None,
        plugin_id: Optional[str] = None,
        **overrides: Any,
    ) -> None:
        """
        Initialize the plugin and install initial ranges.

        Args:
            calendar: Host calendar collaborator
            options: Option overrides (camelCase or snake_case keys)
            preset: Name of an option preset (project, schedule, holiday)
            scheduler: Source of delayed tasks; defaults to the running
                asyncio loop, or immediate execution outside of one
            loader: Option loader, for custom config directories
            options_file: YAML options file in the loader's config directory
            plugin_id: Identifier used in logs
            **overrides: Further option overrides, applied last

        Raises:
            ValidationError: If options or initial ranges are invalid
        """
        self.logger = logger
        self.calendar = calendar
        self.plugin_id = plugin_id or f"{DATE_RANGE_PLUGIN_KEY}-{id(self):x}"

        self.loader = loader or OptionsLoader.create()
        self.options: PluginOptions = self.loader.build(
            preset=preset,
            overrides={**(options or {}), **overrides},
            options_file=options_file,
        )

        self.scheduler = scheduler or default_scheduler()
        self.store = RangeStore()
        self.compiler = MarkCompiler(self.options)
        self.events = EventChannel(forward=self._host_trigger())

        self.state = PluginState.ACTIVE
        self._marks: list[Mark] = []
        self._marks_by_key: dict[str, Mark] = {}
        self._installed_keys: list[str] = []
        self._refresh_task: Optional[ScheduledTask] = None
        self._chunk_task: Optional[ScheduledTask] = None
        self._visible_limit: Optional[int] = None
        self._refresh_deferred = False
        self._bound_handlers: list[tuple[str, Any]] = []

        self._bind_events()

        if self.options.ranges:
            self._load_batch(list(self.options.ranges))

        self.logger.info(
            "Date range plugin initialized",
            plugin_id=self.plugin_id,
            ranges=len(self.store),
            content_mode=self.options.content_span_mode,
        )

    @property
    def is_destroyed(self) -> bool:
        return self.state == PluginState.DESTROYED

    @property
    def is_paused(self) -> bool:
        return self.state == PluginState.PAUSED

    @property
    def refresh_pending(self) -> bool:
        task_pending = self._refresh_task is not None and self._refresh_task.pending
        return task_pending or self._refresh_deferred

    @property
    def marks(self) -> list[Mark]:
        """Marks produced by the last successful refresh."""
        return list(self._marks)

    def add(self, raw: Any) -> Optional[DateRange]:
        """
        Add a range and schedule a refresh.

        Raises:
            ValidationError: If the payload is invalid
            DuplicateCodeError: If the code is already present
        """
        if self.is_destroyed:
            return None

        record = self.store.add(raw)
        self._schedule_refresh()

        self.events.emit("rangeAdded", {"range": record})
        if self.options.on_range_add:
            self.events.call_safely(self.options.on_range_add, record, source="on_range_add")

        return record

    def remove(self, code: str) -> bool:
        """Remove a range; returns False if the code is unknown."""
        if self.is_destroyed:
            return False

        record = self.store.get_by_code(code)
        if not self.store.remove(code):
            return False

        self._schedule_refresh()

        self.events.emit("rangeRemoved", {"code": code, "range": record})
        if self.options.on_range_remove:
            self.events.call_safely(self.options.on_range_remove, code, record, source="on_range_remove")

        return True

    def update(self, code: str, patch: Any) -> Optional[DateRange]:
        """
        Merge a patch into a stored range, keeping its code.

        Raises:
            NotFoundError: If the code is unknown
            ValidationError: If the patched range is invalid
        """
        if self.is_destroyed:
            return None

        record = self.store.update(code, patch)
        self._schedule_refresh()

        self.events.emit("rangeUpdated", {"code": code, "range": record})
        return record

    def clear(self) -> int:
        """Remove every range and refresh immediately."""
        if self.is_destroyed:
            return 0

        self._cancel_chunks()
        count = self.store.clear()
        self._refresh_now()

        self.events.emit("rangesCleared", {"count": count})
        return count

    def load(self, ranges: RangeBatch) -> int:
        """
        Replace every range with a validated batch.

        Accepts a mapping, a sequence of mappings or ``DateRange`` records,
        or a JSON document. Nothing is committed unless every entry is valid.

        Returns:
            Number of ranges loaded

        Raises:
            ValidationError: If any entry is invalid
            DuplicateCodeError: If the batch repeats a code
        """
        if self.is_destroyed:
            return 0

        return self._load_batch(coerce_range_batch(ranges))

    def update_options(self, **overrides: Any) -> None:
        """
        Merge new options into the live instance and refresh.

        Raises:
            ValidationError: If the merged options are invalid
        """
        if self.is_destroyed:
            return

        options = self.loader.apply(self.options, overrides)
        clickable_changed = options.clickable != self.options.clickable

        self.options = options
        self.compiler = MarkCompiler(options)
        if clickable_changed:
            self._unbind_events()
            self._bind_events()

        self.logger.info("Updated plugin options", plugin_id=self.plugin_id, options=sorted(overrides))
        self._refresh_now()

    def refresh(self) -> None:
        """
        Recompile every mark and reinstall them on the host.

        Failures are reported through the ``error`` event and never raised.
        """
        if self.is_destroyed or self.is_paused:
            return

        self._cancel_refresh_task()
        self._refresh_deferred = False
        started = time.perf_counter()

        try:
            removed = self._remove_installed()
            marks = self._compile()
            self._install(marks)
        except Exception as e:
            self.logger.error(
                "Refresh failed",
                plugin_id=self.plugin_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            self.events.emit("error", {"error": e, "action": "refresh"})
            return

        log_refresh(
            self.logger,
            plugin_id=self.plugin_id,
            removed=removed,
            installed=len(marks),
            duration_ms=(time.perf_counter() - started) * 1000,
            context={"visible_ranges": self._visible_limit} if self._visible_limit is not None else None,
        )
        self.events.emit("refreshed", {"marks_count": len(marks)})

    def flush(self) -> bool:
        """Run a pending debounced refresh now; returns True if one ran."""
        if self.is_destroyed or self.is_paused or not self.refresh_pending:
            return False
        self.refresh()
        return True

    def _compile(self) -> list[Mark]:
        try:
            ranges = self.store.ranges
            if self._visible_limit is not None:
                ranges = ranges[:self._visible_limit]
            marks = self.compiler.compile(ranges)
            self.store.rebuild_indices()
            self.store.index_marks(marks)
        except Exception as e:
            raise RefreshError(f"Mark compilation failed: {e}", phase="compile") from e

        self._marks = marks
        self._marks_by_key = {mark.key: mark for mark in marks}
        return marks

    def _remove_installed(self) -> int:
        keys, self._installed_keys = self._installed_keys, []
        for key in keys:
            try:
                self.calendar.remove_mark(key)
            except Exception as e:
                self.logger.warning(
                    "Host rejected mark removal",
                    plugin_id=self.plugin_id,
                    mark_key=key,
                    error=str(e),
                )
        return len(keys)

    def _install(self, marks: list[Mark]) -> None:
        self._installed_keys = [mark.key for mark in marks]
        if not marks:
            return
        try:
            self.calendar.add_marks(marks)
        except Exception as e:
            raise HostCalendarError(
                f"Host rejected {len(marks)} marks: {e}",
                operation="add_marks",
                context={"marks": len(marks)},
            ) from e

    def _schedule_refresh(self) -> None:
        """Debounce: replace any pending refresh with one after the configured delay."""
        if self.is_destroyed:
            return
        if self.is_paused:
            self._refresh_deferred = True
            return

        self._cancel_refresh_task()
        self._refresh_task = self.scheduler.call_later(
            self.options.batch_update_delay, self._run_scheduled_refresh
        )

    def _run_scheduled_refresh(self) -> None:
        self._refresh_task = None
        self.refresh()

    def _refresh_now(self) -> None:
        if self.is_paused:
            self._cancel_refresh_task()
            self._refresh_deferred = True
            return
        self.refresh()

    def _cancel_refresh_task(self) -> None:
        if self._refresh_task is not None:
            self._refresh_task.cancel()
            self._refresh_task = None

    def _load_batch(self, batch: list[Any]) -> int:
        self._cancel_chunks()
        count = self.store.load(batch)

        batch_size = self.options.max_ranges_per_batch
        if self.options.chunked_loading and count > batch_size:
            self._visible_limit = batch_size
            self.logger.info(
                "Installing ranges in chunks",
                plugin_id=self.plugin_id,
                ranges=count,
                batch_size=batch_size,
            )
            self._refresh_now()
            self._schedule_next_chunk()
        else:
            self._refresh_now()

        self.events.emit("rangesLoaded", {"count": count})
        return count

    def _schedule_next_chunk(self) -> None:
        if self._visible_limit is None or self.is_destroyed or self.is_paused:
            return
        self._chunk_task = self.scheduler.call_later(
            self.options.batch_update_delay, self._install_next_chunk
        )

    def _install_next_chunk(self) -> None:
        self._chunk_task = None
        if self._visible_limit is None or self.is_destroyed:
            return

        self._visible_limit += self.options.max_ranges_per_batch
        if self._visible_limit >= len(self.store):
            self._visible_limit = None

        self.refresh()
        self._schedule_next_chunk()

    def _cancel_chunks(self) -> None:
        if self._chunk_task is not None:
            self._chunk_task.cancel()
            self._chunk_task = None
        self._visible_limit = None

    def pause(self) -> None:
        """Suspend refreshes; pending mutations are kept for ``resume``."""
        if self.state != PluginState.ACTIVE:
            return

        if self._refresh_task is not None and self._refresh_task.pending:
            self._refresh_deferred = True
        self._cancel_refresh_task()
        if self._chunk_task is not None:
            self._cancel_chunks()
            self._refresh_deferred = True

        self._transition(PluginState.PAUSED, trigger="pause")
        self.events.emit("paused", {})

    def resume(self) -> None:
        """Leave the paused state and run one refresh."""
        if self.state != PluginState.PAUSED:
            return

        self._transition(PluginState.ACTIVE, trigger="resume")
        self.refresh()
        self.events.emit("resumed", {})

    def destroy(self) -> None:
        """Tear down: cancel timers, remove marks, unbind events, release indices."""
        if self.is_destroyed:
            return

        self._cancel_refresh_task()
        self._cancel_chunks()
        self._refresh_deferred = False
        self._remove_installed()
        self._unbind_events()

        self.store.release()
        self._marks = []
        self._marks_by_key = {}

        self._transition(PluginState.DESTROYED, trigger="destroy")
        self.events.emit("destroyed", {})
        self.events.clear()

    def _transition(self, target: PluginState, trigger: str) -> None:
        check_transition(self.state, target)
        log_lifecycle_transition(
            self.logger,
            plugin_id=self.plugin_id,
            from_state=self.state.value,
            to_state=target.value,
            trigger=trigger,
        )
        self.state = target

    def on(self, event_name: str, listener: Listener) -> None:
        """Subscribe to a plugin event (``rangeClick``, ``refreshed``, ...)."""
        if self.is_destroyed:
            return
        self.events.subscribe(event_name, listener)

    def off(self, event_name: str, listener: Optional[Listener] = None) -> None:
        self.events.unsubscribe(event_name, listener)

    def handle_mark_click(self, event: Any) -> None:
        """Resolve a clicked mark back to its range and emit ``rangeClick``."""
        if self.is_destroyed:
            return

        key = _extract_mark_key(event)
        if not key:
            return

        record = self.store.resolve_mark(key)
        if record is None:
            self.logger.debug("Ignoring click on stale mark", plugin_id=self.plugin_id, mark_key=key)
            return
        if not record.clickable:
            return

        mark = self._marks_by_key.get(key)
        click = RangeClickEvent(
            range=record,
            date=mark.date if mark is not None else format_date(record.start_date),
            code=record.code,
            data=record.data,
            mark_key=key,
            original_event=event,
        )

        self.events.emit("rangeClick", click)
        if self.options.on_range_click:
            self.events.call_safely(self.options.on_range_click, click, source="on_range_click")

    def handle_date_click(self, event: Any) -> None:
        """Emit ``dateClick`` with every range covering the clicked day."""
        if self.is_destroyed:
            return

        raw_date = event.get("date") if isinstance(event, Mapping) else event
        try:
            day = format_date(raw_date)
        except InvalidRangeError:
            self.logger.debug("Ignoring click on unparsable date", plugin_id=self.plugin_id, date=raw_date)
            return

        click = DateClickEvent(
            date=day,
            ranges=tuple(self.store.get_by_date(day)),
            original_event=event,
        )

        self.events.emit("dateClick", click)
        if self.options.on_date_click:
            self.events.call_safely(self.options.on_date_click, click, source="on_date_click")

    def _bind_events(self) -> None:
        if not self.options.clickable:
            return
        for event_name, handler in (("markClick", self.handle_mark_click),
                                    ("dateClick", self.handle_date_click)):
            self.calendar.on(event_name, handler)
            self._bound_handlers.append((event_name, handler))

    def _unbind_events(self) -> None:
        for event_name, handler in self._bound_handlers:
            try:
                self.calendar.off(event_name, handler)
            except Exception as e:
                self.logger.warning(
                    "Host rejected event unbinding",
                    plugin_id=self.plugin_id,
                    event_name=event_name,
                    error=str(e),
                )
        self._bound_handlers = []

    def _host_trigger(self):
        trigger = getattr(self.calendar, "trigger", None)
        return trigger if callable(trigger) else None

    def get_info(self) -> dict[str, Any]:
        return {
            "range_count": len(self.store),
            "date_count": self.store.date_count,
            "mark_count": len(self._installed_keys),
            "options": self.options.to_dict(),
            "is_destroyed": self.is_destroyed,
            "is_paused": self.is_paused,
            "state": self.state.value,
            "refresh_pending": self.refresh_pending,
            "ranges": self.store.ranges,
        }

    def get_ranges_for_date(self, value: DateLike) -> list[DateRange]:
        """Ranges covering a date; unparsable dates cover nothing."""
        if self.is_destroyed:
            return []
        try:
            return self.store.get_by_date(value)
        except InvalidRangeError:
            return []

    def get_range(self, code: str) -> Optional[DateRange]:
        if self.is_destroyed:
            return None
        return self.store.get_by_code(code)

    def is_date_in_range(self, value: DateLike, code: str) -> bool:
        record = self.get_range(code)
        if record is None:
            return False
        try:
            return record.covers(value)
        except InvalidRangeError:
            return False


def _extract_mark_key(event: Any) -> Optional[str]:
    """Mark key from a host click payload, a Mark, a mapping or a bare key."""
    if isinstance(event, str):
        return event
    if isinstance(event, Mapping) and "mark" in event:
        event = event["mark"]
    if isinstance(event, Mark):
        return event.key
    if isinstance(event, Mapping):
        return event.get("key")
    return getattr(event, "key", None)
