from __future__ import annotations

from typing import Optional

from ..core.constants import MAX_TAB_ID_LENGTH
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_tab_id(value: Optional[str]) -> str:
    tab_id = require_non_empty(value, "Tab id")
    if len(tab_id) > MAX_TAB_ID_LENGTH:
        raise ValidationError(f"Tab id must be at most {MAX_TAB_ID_LENGTH} characters")
    return tab_id
