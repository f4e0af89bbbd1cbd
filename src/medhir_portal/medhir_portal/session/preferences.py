from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping

from ..common.datetime_utils import now_ms as _now_ms
from ..core.constants import DEFAULT_LANDING_PAGE, DEFAULT_THEME, MAX_RECENT_ITEMS
from ..core.enums import PreferenceKey
from ..core.exceptions import ValidationError
from .store import SessionStore


def _item_id(item: Any) -> Any:
    return item.get("id") if isinstance(item, Mapping) else None


class SessionPreferences:
    """UI preferences of one tab: settings, recent items, theme, last page.

    Reads fall back to defaults when a value is absent or has the wrong shape.
    """

    def __init__(self, store: SessionStore, *, now_ms: Callable[[], int] = _now_ms):
        self._store = store
        self._now_ms = now_ms

    def user_preferences(self) -> Dict[str, Any]:
        value = self._store.get(PreferenceKey.USER_PREFERENCES.value)
        return dict(value) if isinstance(value, Mapping) else {}

    def update_user_preferences(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(changes, Mapping):
            raise ValidationError("Preferences must be an object")
        merged = {**self.user_preferences(), **changes}
        self._store.set(PreferenceKey.USER_PREFERENCES.value, merged)
        return merged

    def recent_items(self) -> List[Any]:
        value = self._store.get(PreferenceKey.RECENT_ITEMS.value)
        return list(value) if isinstance(value, list) else []

    def add_recent_item(self, item: Mapping[str, Any]) -> List[Any]:
        """Put `item` first, drop older entries with the same id, keep the newest ten."""
        if not isinstance(item, Mapping):
            raise ValidationError("Recent item must be an object")
        item = dict(item)
        item_id = item.get("id")
        others = [i for i in self.recent_items() if _item_id(i) != item_id]
        items = [item, *others][:MAX_RECENT_ITEMS]
        self._store.set(PreferenceKey.RECENT_ITEMS.value, items)
        return items

    def theme(self) -> str:
        value = self._store.get(PreferenceKey.THEME.value)
        return value if isinstance(value, str) and value else DEFAULT_THEME

    def set_theme(self, theme: str) -> bool:
        if not isinstance(theme, str) or not theme.strip():
            raise ValidationError("Theme is required")
        return self._store.set(PreferenceKey.THEME.value, theme.strip())

    def last_visited_page(self) -> str:
        value = self._store.get(PreferenceKey.LAST_VISITED_PAGE.value)
        return value if isinstance(value, str) and value else DEFAULT_LANDING_PAGE

    def update_last_visited_page(self, page: str) -> bool:
        if not isinstance(page, str) or not page.strip():
            raise ValidationError("Page is required")
        return self._store.set(PreferenceKey.LAST_VISITED_PAGE.value, page.strip())

    def session_start_time(self) -> int:
        value = self._store.get(PreferenceKey.SESSION_START_TIME.value)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return int(self._now_ms())

    def mark_session_start(self) -> int:
        stamp = int(self._now_ms())
        self._store.set(PreferenceKey.SESSION_START_TIME.value, stamp)
        return stamp
