from __future__ import annotations

from typing import Callable, Optional

from ..common.datetime_utils import now_ms as _now_ms
from ..core.enums import SessionKey
from .store import SessionStore


class ActivityClock:
    """Last-activity stamp (epoch ms) kept in the session store."""

    def __init__(self, store: SessionStore, *, now_ms: Callable[[], int] = _now_ms):
        self._store = store
        self._now_ms = now_ms

    def last_activity(self) -> Optional[int]:
        value = self._store.get(SessionKey.LAST_ACTIVITY.value)
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def record_activity(self) -> int:
        stamp = int(self._now_ms())
        previous = self.last_activity()
        if previous is not None and previous > stamp:
            # Never move the stamp backwards.
            return previous
        self._store.set(SessionKey.LAST_ACTIVITY.value, stamp)
        return stamp

    def is_expired(self, threshold_ms: int) -> bool:
        last = self.last_activity()
        if last is None:
            return True
        return (int(self._now_ms()) - last) > threshold_ms

    def clear(self) -> bool:
        return self._store.remove(SessionKey.LAST_ACTIVITY.value)
