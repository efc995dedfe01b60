"""Debounced persistence of local editor edits.

Each field gets its own timer on the running asyncio loop. A change resets
that field's timer; when it expires the latest value is persisted exactly
once, so intermediate values are never written.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_WINDOWS = {"content": 1.0, "title": 0.5}

PersistFn = Callable[[str, str], Awaitable[object]]


class DebouncedPersistenceBridge:
    """Coalesces rapid field edits into throttled persistence calls."""

    def __init__(
        self,
        persist: PersistFn,
        windows: dict[str, float] | None = None,
        on_error: Callable[[str, Exception], None] | None = None,
    ) -> None:
        """Initialize the bridge.

        Args:
            persist: Async callable receiving (field, value)
            windows: Debounce window per field in seconds
            on_error: Called with (field, exception) when a persist call fails
        """
        self._persist = persist
        self._windows = dict(DEFAULT_WINDOWS if windows is None else windows)
        self._on_error = on_error
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._pending: dict[str, str] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    def on_change(self, field: str, value: str) -> None:
        """Record a new value and restart the field's timer.

        Must be called from the event loop thread.

        Raises:
            KeyError: If the field has no configured window
        """
        window = self._windows[field]
        self._cancel_timer(field)
        self._pending[field] = value

        loop = asyncio.get_running_loop()
        self._timers[field] = loop.call_later(window, self._fire, field)

    def has_pending(self, field: str | None = None) -> bool:
        """Whether a field (or any field) still waits for its window to expire."""
        if field is None:
            return bool(self._timers)
        return field in self._timers

    def cancel(self, field: str) -> None:
        """Drop a field's pending value without persisting it."""
        self._cancel_timer(field)
        self._pending.pop(field, None)

    async def flush(self) -> None:
        """Persist every pending value now."""
        values = dict(self._pending)
        for field in values:
            self.cancel(field)
        await asyncio.gather(*(self._run_persist(f, v) for f, v in values.items()))

    def close(self) -> None:
        """Cancel all pending timers. Pending values are not flushed."""
        for field in list(self._timers):
            self.cancel(field)

    async def wait_idle(self) -> None:
        """Wait for persist calls already started by expired timers."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _cancel_timer(self, field: str) -> None:
        handle = self._timers.pop(field, None)
        if handle is not None:
            handle.cancel()

    def _fire(self, field: str) -> None:
        self._timers.pop(field, None)
        if field not in self._pending:
            return
        value = self._pending.pop(field)

        task = asyncio.get_running_loop().create_task(self._run_persist(field, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_persist(self, field: str, value: str) -> None:
        try:
            await self._persist(field, value)
        except Exception as e:
            logger.warning(f"Failed to persist {field}: {e}")
            if self._on_error is not None:
                self._on_error(field, e)
