from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the bearer token's `roles` claim."""

    SUPERADMIN = "SUPERADMIN"
    COMPANY_HEAD = "COMPANY_HEAD"
    HRADMIN = "HRADMIN"
    MANAGER = "MANAGER"
    ACCOUNTANT = "ACCOUNTANT"
    EMPLOYEE = "EMPLOYEE"


class SessionKey(str, Enum):
    """Well-known keys of the per-tab session store."""

    TOKEN = "token"
    LAST_ACTIVITY = "lastActivity"
    CURRENT_ROLE = "currentRole"
    EMPLOYEE_ID = "employeeId"
    EMPLOYEE_COMPANY_ID = "employeeCompanyId"
    CURRENT_COMPANY = "currentCompany"
    COMPANY_NAME = "companyName"
    DEPARTMENT_NAME = "departmentName"
    EMPLOYEE_NAME = "employeeName"
    IS_SUPERADMIN = "isSuperadmin"
    PASSWORD_CHANGED = "passwordChanged"


SESSION_KEYS: tuple[str, ...] = tuple(k.value for k in SessionKey)


class PreferenceKey(str, Enum):
    """Per-tab UI preferences kept next to the session."""

    USER_PREFERENCES = "userPreferences"
    RECENT_ITEMS = "recentItems"
    THEME = "theme"
    LAST_VISITED_PAGE = "lastVisitedPage"
    SESSION_START_TIME = "sessionStartTime"


class SessionState(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


class ExpiryReason(str, Enum):
    INACTIVITY = "INACTIVITY"
    TOKEN_MISSING = "TOKEN_MISSING"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"


class ActivityEvent(str, Enum):
    """User interactions that count as activity."""

    MOUSE_MOVE = "mousemove"
    KEY_DOWN = "keydown"
    CLICK = "click"
    SCROLL = "scroll"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
