from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import Callable, Optional

from ..core.constants import DEFAULT_CHECK_INTERVAL_SECONDS, DEFAULT_INACTIVITY_THRESHOLD_MS
from ..core.enums import ActivityEvent, ExpiryReason, SessionKey, SessionState
from .activity import ActivityClock
from .scheduling import EventSource, Scheduler
from .store import SessionStore
from .token import TokenValidator

logger = logging.getLogger(__name__)


def evaluate_expiry(
    store: SessionStore,
    clock: ActivityClock,
    validator: TokenValidator,
    *,
    inactivity_threshold_ms: int,
) -> Optional[ExpiryReason]:
    """Return why the tab's session is expired, or None while it is live.

    Missing data counts as expired (no stamp, no token).
    """
    if clock.is_expired(inactivity_threshold_ms):
        return ExpiryReason.INACTIVITY

    token = store.get(SessionKey.TOKEN.value)
    if not token:
        return ExpiryReason.TOKEN_MISSING
    if validator.is_expired(token):
        return ExpiryReason.TOKEN_EXPIRED
    return None


class SessionLifecycleController:
    """ACTIVE -> EXPIRED state machine for one tab session.

    Activity events stamp the clock while ACTIVE. A periodic check expires the
    session on inactivity or on a missing/expired token: it clears the store,
    releases every listener and timer, then calls `on_logout` once. EXPIRED is
    terminal; build a new controller for the next session.
    """

    def __init__(
        self,
        store: SessionStore,
        clock: ActivityClock,
        validator: TokenValidator,
        *,
        events: EventSource,
        scheduler: Scheduler,
        on_logout: Callable[[], None],
        inactivity_threshold_ms: int = DEFAULT_INACTIVITY_THRESHOLD_MS,
        check_interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS,
    ):
        self._store = store
        self._clock = clock
        self._validator = validator
        self._events = events
        self._scheduler = scheduler
        self._on_logout = on_logout
        self._inactivity_threshold_ms = int(inactivity_threshold_ms)
        self._check_interval_seconds = check_interval_seconds

        self._state = SessionState.ACTIVE
        self._expiry_reason: Optional[ExpiryReason] = None
        self._resources = ExitStack()
        self._started = False
        self._disposed = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def expiry_reason(self) -> Optional[ExpiryReason]:
        return self._expiry_reason

    @property
    def disposed(self) -> bool:
        return self._disposed

    def start(self) -> "SessionLifecycleController":
        if self._started or self._disposed:
            raise RuntimeError("Session lifecycle controller can only be started once")
        self._started = True

        try:
            for event in ActivityEvent:
                subscription = self._events.add_listener(event, self._on_activity)
                self._resources.callback(subscription.cancel)
            timer = self._scheduler.call_every(self._check_interval_seconds, self._on_timer)
            self._resources.callback(timer.cancel)
        except Exception:
            self.close()
            raise
        return self

    def _on_activity(self, event: ActivityEvent) -> None:
        if self._disposed or self._state is not SessionState.ACTIVE:
            return
        self._clock.record_activity()

    def _on_timer(self) -> None:
        if self._disposed:
            return
        self.check()

    def check(self) -> bool:
        """Run one expiry check; True if this call expired the session."""
        if self._disposed or self._state is not SessionState.ACTIVE:
            return False

        reason = evaluate_expiry(
            self._store,
            self._clock,
            self._validator,
            inactivity_threshold_ms=self._inactivity_threshold_ms,
        )
        if reason is None:
            return False
        self.expire(reason)
        return True

    def expire(self, reason: ExpiryReason) -> None:
        if self._disposed or self._state is SessionState.EXPIRED:
            return
        self._state = SessionState.EXPIRED
        self._expiry_reason = reason
        logger.info("Session expired (%s); clearing tab storage", reason.value)

        try:
            self._store.clear_all()
        finally:
            self.close()

        try:
            self._on_logout()
        except Exception:
            logger.exception("Logout callback failed after session expiry")
            raise

    def close(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._resources.close()
        logger.debug("Session lifecycle controller released its listeners and timer")

    dispose = close

    def __enter__(self) -> "SessionLifecycleController":
        if not self._started:
            self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
