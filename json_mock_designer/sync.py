"""Two-way synchronization between the form view and the JSON text view.

The form layer owns a `MockSchema`; the text editor owns a string. The
coordinator turns schema edits into text (via the mock generator) and text
edits into schemas (via the parser, debounced), using an explicit `origin`
window so a change is never echoed back to the side it came from.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import threading
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .json_parser import parse_json_to_schema
from .models import MockSchema, ValidationResult, schema_fingerprint
from .serializer import schema_to_json_with_mock_generator

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_ORIGIN_WINDOW_SECONDS = 0.05


class TimerHandle:
    def __init__(self, cancel: Callable[[], None]):
        self._cancel = cancel
        self.cancelled = False

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._cancel()


class ThreadingScheduler:
    """Runs callbacks on `threading.Timer` threads."""

    def schedule(self, delay: float, fn: Callable[[], Any]) -> TimerHandle:
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        timer.start()
        return TimerHandle(timer.cancel)


class ManualScheduler:
    """Virtual clock: callbacks only run when `advance` moves time past them."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, Callable[[], Any], TimerHandle]] = []
        self._counter = itertools.count()

    def schedule(self, delay: float, fn: Callable[[], Any]) -> TimerHandle:
        handle = TimerHandle(lambda: None)
        heapq.heappush(self._queue, (self.now + max(0.0, delay), next(self._counter), fn, handle))
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, fn, handle = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                fn()
        self.now = target

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[3].cancelled)


class Debouncer:
    """Deferred call where each new call replaces the pending one."""

    def __init__(self, scheduler, delay: float, fn: Callable[..., Any]):
        self._scheduler = scheduler
        self._delay = delay
        self._fn = fn
        self._lock = threading.Lock()
        self._handle: Optional[TimerHandle] = None
        self._args: Optional[tuple] = None
        self._generation = 0

    def __call__(self, *args: Any) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                logger.debug("Superseded pending debounced call")
            self._generation += 1
            generation = self._generation
            self._args = args
            self._handle = self._scheduler.schedule(self._delay, lambda: self._fire(generation))

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._handle is not None

    def _take(self, generation: Optional[int]) -> Optional[tuple]:
        with self._lock:
            if self._handle is None or (generation is not None and generation != self._generation):
                return None
            args, self._args, self._handle = self._args, None, None
            return args

    def _fire(self, generation: int) -> None:
        args = self._take(generation)
        if args is not None:
            self._fn(*args)

    def flush(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
        args = self._take(None)
        if args is not None:
            self._fn(*args)

    def cancel(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._handle = None
            self._args = None


class SyncOrigin(Enum):
    NONE = 'none'
    FROM_SCHEMA = 'from_schema'
    FROM_EDITOR = 'from_editor'


@dataclass
class EditorSyncState:
    editor_text: str = ''
    origin: SyncOrigin = SyncOrigin.NONE
    sync_in_progress: bool = False
    last_valid_text: str = ''
    validation: ValidationResult = field(default_factory=lambda: ValidationResult(is_valid=True))
    parse_error: Optional[str] = None
    editor_mode: bool = False


class EditorSyncCoordinator:
    def __init__(
        self,
        initial_schema: MockSchema,
        on_schema_change: Callable[[MockSchema], None],
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        origin_window_seconds: float = DEFAULT_ORIGIN_WINDOW_SECONDS,
        scheduler=None,
    ):
        self._scheduler = scheduler or ThreadingScheduler()
        self._on_schema_change = on_schema_change
        self._origin_window = origin_window_seconds
        self._lock = threading.RLock()
        self._debouncer = Debouncer(self._scheduler, debounce_seconds, self._reconcile)
        self._origin_handle: Optional[TimerHandle] = None

        self._last_schema = deepcopy(initial_schema)
        self._last_fingerprint = schema_fingerprint(initial_schema)
        text = schema_to_json_with_mock_generator(initial_schema)
        self._state = EditorSyncState(editor_text=text, last_valid_text=text)

    @property
    def state(self) -> EditorSyncState:
        with self._lock:
            return deepcopy(self._state)

    @property
    def schema(self) -> MockSchema:
        with self._lock:
            return deepcopy(self._last_schema)

    @property
    def has_pending_sync(self) -> bool:
        return self._debouncer.pending

    def _set_origin(self, origin: SyncOrigin) -> None:
        if self._origin_handle is not None:
            self._origin_handle.cancel()
            self._origin_handle = None
        self._state.origin = origin
        if origin is not SyncOrigin.NONE:
            self._origin_handle = self._scheduler.schedule(
                self._origin_window, lambda: self._expire_origin(origin)
            )

    def _expire_origin(self, origin: SyncOrigin) -> None:
        with self._lock:
            if self._state.origin is origin:
                self._state.origin = SyncOrigin.NONE
                self._origin_handle = None

    def update_from_schema(self, schema: MockSchema) -> None:
        """Regenerate the editor text after the form changed the schema."""
        with self._lock:
            if self._state.origin is SyncOrigin.FROM_EDITOR:
                logger.debug("Ignoring schema update echoed from the editor")
                return

            fingerprint = schema_fingerprint(schema)
            if fingerprint == self._last_fingerprint:
                return

            # A form edit supersedes text that has not been reconciled yet.
            self._debouncer.cancel()
            self._last_schema = deepcopy(schema)
            self._last_fingerprint = fingerprint

            text = schema_to_json_with_mock_generator(schema)
            self._state.editor_text = text
            self._state.last_valid_text = text
            self._state.validation = ValidationResult(is_valid=True)
            self._state.parse_error = None
            self._set_origin(SyncOrigin.FROM_SCHEMA)

    def update_from_editor(self, text: str) -> None:
        """Keep the typed text as-is and schedule a debounced parse."""
        with self._lock:
            self._state.editor_text = text
            self._debouncer(text)

    def _reconcile(self, text: str) -> None:
        with self._lock:
            if self._state.origin is SyncOrigin.FROM_SCHEMA:
                logger.debug("Skipping editor reconciliation during a schema update")
                return

            self._state.sync_in_progress = True
            try:
                result = parse_json_to_schema(text)
                self._state.validation = result.validation
                if not result.validation.is_valid or result.schema is None:
                    self._state.parse_error = result.validation.error or "Invalid JSON"
                    logger.debug("Editor text not applied: %s", self._state.parse_error)
                    return

                try:
                    schema = deepcopy(result.schema)
                    fingerprint = schema_fingerprint(result.schema)
                except RecursionError:
                    logger.exception("Parsed schema is too deep to apply")
                    self._fail_apply("Schema is nested too deeply")
                    return

                self._state.parse_error = None
                self._last_schema = schema
                self._last_fingerprint = fingerprint
                self._state.last_valid_text = text
                self._set_origin(SyncOrigin.FROM_EDITOR)
                try:
                    self._on_schema_change(deepcopy(schema))
                except Exception as exc:
                    logger.exception("Schema change callback failed")
                    self._fail_apply(str(exc))
            finally:
                self._state.sync_in_progress = False

    def _fail_apply(self, detail: str) -> None:
        self._state.validation = ValidationResult(is_valid=False, error="Failed to apply schema")
        self._state.parse_error = detail or "Failed to apply schema"

    def force_sync(self) -> None:
        """Reconcile the current text now, skipping the debounce delay."""
        with self._lock:
            if not self._state.validation.is_valid:
                return
            self._debouncer.cancel()
            self._reconcile(self._state.editor_text)

    def flush(self) -> None:
        """Run a pending debounced reconciliation immediately, if any."""
        self._debouncer.flush()

    def set_editor_mode(self, is_editor_mode: bool) -> None:
        with self._lock:
            self._state.editor_mode = is_editor_mode
        if not is_editor_mode:
            # Leaving the editor: the form must see the latest text.
            self.flush()

    def clear_error(self) -> None:
        with self._lock:
            self._state.parse_error = None
            self._state.validation = ValidationResult(is_valid=True)
