from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Mapping, Optional

from ..common.datetime_utils import now_ms as _now_ms, now_seconds as _now_seconds
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_CHECK_INTERVAL_SECONDS, DEFAULT_INACTIVITY_THRESHOLD_MS
from ..core.enums import SESSION_KEYS, ExpiryReason, Role, SessionKey
from ..core.exceptions import DecodeFailure, ValidationError
from ..storage.substrate import StorageSubstrate
from .activity import ActivityClock
from .lifecycle import SessionLifecycleController, evaluate_expiry
from .cipher import ValueCipher
from .model import SessionRecord
from .preferences import SessionPreferences
from .scheduling import EventSource, Scheduler
from .store import Reporter, SessionStore
from .token import TokenClaims, TokenValidator

logger = logging.getLogger(__name__)

ATTRIBUTE_KEYS = frozenset(SESSION_KEYS) - {SessionKey.TOKEN.value, SessionKey.LAST_ACTIVITY.value}


@dataclass(frozen=True)
class SessionSettings:
    inactivity_threshold_ms: int = DEFAULT_INACTIVITY_THRESHOLD_MS
    check_interval_seconds: int = DEFAULT_CHECK_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if int(self.inactivity_threshold_ms) <= 0:
            raise ValidationError("Inactivity threshold must be positive")
        if int(self.check_interval_seconds) <= 0:
            raise ValidationError("Expiry check interval must be positive")

    @classmethod
    def from_settings(cls, settings: Any) -> "SessionSettings":
        return cls(
            inactivity_threshold_ms=int(getattr(settings, "INACTIVITY_THRESHOLD_MS", DEFAULT_INACTIVITY_THRESHOLD_MS)),
            check_interval_seconds=int(getattr(settings, "EXPIRY_CHECK_INTERVAL_SECONDS", DEFAULT_CHECK_INTERVAL_SECONDS)),
        )


class SessionManager:
    """Use case: one tab's session (begin, inspect, expire, end).

    Built per tab from an injected substrate instead of reaching for a global store.
    """

    def __init__(
        self,
        substrate: StorageSubstrate,
        *,
        settings: Optional[SessionSettings] = None,
        reporter: Optional[Reporter] = None,
        cipher: Optional[ValueCipher] = None,
        now_ms: Callable[[], int] = _now_ms,
        now_seconds: Callable[[], int] = _now_seconds,
    ):
        self._settings = settings or SessionSettings()
        self.store = SessionStore(substrate, reporter, cipher)
        self.clock = ActivityClock(self.store, now_ms=now_ms)
        self.preferences = SessionPreferences(self.store, now_ms=now_ms)
        self.validator = TokenValidator(now_seconds=now_seconds)

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    def begin(self, token: str, *, attributes: Optional[Mapping[str, Any]] = None) -> SessionRecord:
        token = require_non_empty(token, "Token")
        attributes = dict(attributes or {})
        unknown = sorted(set(attributes) - ATTRIBUTE_KEYS)
        if unknown:
            raise ValidationError(f"Unknown session attributes: {', '.join(unknown)}")

        # A new login never inherits the previous session's attributes.
        self.store.clear_all()
        self.store.set(SessionKey.TOKEN.value, token)
        for key, value in attributes.items():
            if value is None:
                continue
            self.store.set(key, str(value))
        self.preferences.mark_session_start()
        self.clock.record_activity()
        return self.record()

    def record(self) -> SessionRecord:
        return self.store.snapshot()

    def token(self) -> Optional[str]:
        token = self.store.get(SessionKey.TOKEN.value)
        return token if isinstance(token, str) and token else None

    def has_session(self) -> bool:
        return self.token() is not None

    def claims(self) -> Optional[TokenClaims]:
        try:
            return self.validator.decode(self.token())
        except DecodeFailure:
            return None

    def roles(self) -> FrozenSet[Role]:
        claims = self.claims()
        return claims.roles if claims else frozenset()

    def is_expired(self) -> Optional[ExpiryReason]:
        return evaluate_expiry(
            self.store,
            self.clock,
            self.validator,
            inactivity_threshold_ms=self._settings.inactivity_threshold_ms,
        )

    def expire_if_needed(self) -> Optional[ExpiryReason]:
        """Fail-closed check for request/response hosts: clear on expiry."""
        reason = self.is_expired()
        if reason is not None:
            logger.info("Clearing expired session (%s)", reason.value)
            self.store.clear_all()
        return reason

    def touch(self) -> bool:
        """Record activity if the session is still live; an expired session is cleared instead."""
        if self.expire_if_needed() is not None:
            return False
        self.clock.record_activity()
        return True

    def end(self) -> bool:
        return self.store.clear_all()

    def controller(
        self,
        *,
        events: EventSource,
        scheduler: Scheduler,
        on_logout: Callable[[], None],
    ) -> SessionLifecycleController:
        return SessionLifecycleController(
            self.store,
            self.clock,
            self.validator,
            events=events,
            scheduler=scheduler,
            on_logout=on_logout,
            inactivity_threshold_ms=self._settings.inactivity_threshold_ms,
            check_interval_seconds=self._settings.check_interval_seconds,
        )
