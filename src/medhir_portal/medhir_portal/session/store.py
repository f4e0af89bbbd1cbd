from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from ..core.enums import SESSION_KEYS, SessionKey
from ..core.exceptions import DecodeFailure, StorageFailure
from ..storage.substrate import StorageSubstrate
from .cipher import ValueCipher
from .model import SessionRecord

logger = logging.getLogger(__name__)

Reporter = Callable[[str, Exception], None]


def log_reporter(message: str, error: Exception) -> None:
    logger.warning("%s: %s", message, error)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SessionStore:
    """JSON adapter over a per-tab storage substrate.

    Every operation is synchronous and never raises: failures go to the
    reporter (the UI's toast channel, or the log by default) and the
    operation is treated as a no-op.

    With a cipher, values are encrypted unless `set` is called with
    `{"encrypt": False}`. Reads decrypt encrypted values and fall back to
    JSON, then to the raw string, so plaintext written earlier stays readable.
    """

    def __init__(
        self,
        substrate: StorageSubstrate,
        reporter: Optional[Reporter] = None,
        cipher: Optional[ValueCipher] = None,
    ):
        self._substrate = substrate
        self._reporter = reporter or log_reporter
        self._cipher = cipher

    @property
    def encrypts(self) -> bool:
        return self._cipher is not None

    def _report(self, message: str, error: Exception) -> None:
        try:
            self._reporter(message, error)
        except Exception:
            logger.exception("Session store reporter failed while reporting: %s", message)

    def set(self, key: str, value: Any, options: Optional[Mapping[str, Any]] = None) -> bool:
        encrypt = bool((options or {}).get("encrypt", self.encrypts))
        if encrypt and self._cipher is None:
            self._report(f"Cannot encrypt session item {key!r}", StorageFailure("No session encryption key configured"))
            return False

        # Serialize fully before touching the substrate so a bad value never half-writes.
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            self._report(f"Cannot serialize session item {key!r}", e)
            return False
        if encrypt:
            serialized = self._cipher.encrypt(serialized)

        try:
            self._substrate.set_item(key, serialized)
        except StorageFailure as e:
            self._report(f"Cannot store session item {key!r}", e)
            return False
        return True

    def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._substrate.get_item(key)
        except StorageFailure as e:
            self._report(f"Cannot read session item {key!r}", e)
            return default

        if raw is None:
            return default
        if self._cipher is not None and ValueCipher.looks_encrypted(raw):
            try:
                raw = self._cipher.decrypt(raw)
            except DecodeFailure as e:
                self._report(f"Cannot decrypt session item {key!r}", e)
                return default
        try:
            return json.loads(raw)
        except (ValueError, RecursionError):
            # Legacy plain-string values (bare ids) were written without JSON encoding.
            return raw

    def remove(self, key: str) -> bool:
        try:
            self._substrate.remove_item(key)
        except StorageFailure as e:
            self._report(f"Cannot remove session item {key!r}", e)
            return False
        return True

    def remove_many(self, keys: Iterable[str]) -> bool:
        ok = True
        for key in keys:
            ok = self.remove(key) and ok
        return ok

    def clear_all(self) -> bool:
        try:
            self._substrate.clear()
        except StorageFailure as e:
            self._report("Cannot clear session storage", e)
            return False
        return True

    def snapshot(self) -> SessionRecord:
        values = {key: self.get(key) for key in SESSION_KEYS}
        token = values[SessionKey.TOKEN.value]
        return SessionRecord(
            token=token if isinstance(token, str) and token else None,
            last_activity=_as_int(values[SessionKey.LAST_ACTIVITY.value]),
            current_role=_as_text(values[SessionKey.CURRENT_ROLE.value]),
            employee_id=_as_text(values[SessionKey.EMPLOYEE_ID.value]),
            employee_company_id=_as_text(values[SessionKey.EMPLOYEE_COMPANY_ID.value]),
            current_company=_as_text(values[SessionKey.CURRENT_COMPANY.value]),
            company_name=_as_text(values[SessionKey.COMPANY_NAME.value]),
            department_name=_as_text(values[SessionKey.DEPARTMENT_NAME.value]),
            employee_name=_as_text(values[SessionKey.EMPLOYEE_NAME.value]),
            is_superadmin=_as_text(values[SessionKey.IS_SUPERADMIN.value]),
            password_changed=_as_text(values[SessionKey.PASSWORD_CHANGED.value]),
        )
