from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional, Protocol

from ..core.enums import ActivityEvent


Listener = Callable[[ActivityEvent], None]


class Subscription:
    """Handle returned by EventSource.add_listener; cancel() is idempotent."""

    def __init__(self, source: "EventSource", event: ActivityEvent, listener: Listener):
        self._source = source
        self._event = event
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._source._remove(self._event, self._listener)


class EventSource:
    """Synchronous dispatcher of user-interaction events."""

    def __init__(self) -> None:
        self._listeners: Dict[ActivityEvent, List[Listener]] = {}

    def add_listener(self, event: ActivityEvent, listener: Listener) -> Subscription:
        self._listeners.setdefault(event, []).append(listener)
        return Subscription(self, event, listener)

    def _remove(self, event: ActivityEvent, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: Optional[ActivityEvent] = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(v) for v in self._listeners.values())

    def emit(self, event: ActivityEvent) -> int:
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            listener(event)
        return len(listeners)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler(Protocol):
    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class _AsyncioRepeatingTimer:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        # Reschedule first so the callback itself may cancel the timer.
        self._handle = self._loop.call_later(self._interval, self._run)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()


class AsyncioScheduler:
    """Periodic callbacks on an asyncio event loop (single thread)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioRepeatingTimer(loop, float(interval_seconds), callback)


class _ManualTimer:
    def __init__(self, interval: float, callback: Callable[[], None], due: float):
        self.interval = interval
        self.callback = callback
        self.due = due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by advance(); used by tests and polling hosts."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._timers: List[_ManualTimer] = []

    @property
    def now(self) -> float:
        return self._now

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        timer = _ManualTimer(float(interval_seconds), callback, self._now + float(interval_seconds))
        self._timers.append(timer)
        return timer

    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in time order. Returns fire count."""
        target = self._now + float(seconds)
        fired = 0
        while True:
            self._timers = [t for t in self._timers if not t.cancelled]
            due = [t for t in self._timers if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self._now = timer.due
            timer.due += timer.interval
            timer.callback()
            fired += 1
        self._now = target
        return fired
