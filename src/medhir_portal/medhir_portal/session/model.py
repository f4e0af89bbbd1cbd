from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SessionRecord:
    """Snapshot of what one tab's session store currently holds.

    Fields are independent: a tab can hold `current_role` after `token` is gone.
    """

    token: Optional[str] = None
    last_activity: Optional[int] = None
    current_role: Optional[str] = None
    employee_id: Optional[str] = None
    employee_company_id: Optional[str] = None
    current_company: Optional[str] = None
    company_name: Optional[str] = None
    department_name: Optional[str] = None
    employee_name: Optional[str] = None
    is_superadmin: Optional[str] = None
    password_changed: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def to_public_dict(self) -> Dict[str, Any]:
        """Everything except the bearer token itself."""
        data = asdict(self)
        data.pop("token")
        return data
