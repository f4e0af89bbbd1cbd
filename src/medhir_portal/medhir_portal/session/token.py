from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional

import jwt

from ..common.datetime_utils import now_seconds as _now_seconds
from ..core.enums import Role
from ..core.exceptions import DecodeFailure

logger = logging.getLogger(__name__)

# Claims are read for UI gating only; the API server verifies signatures.
_UNVERIFIED = {
    "verify_signature": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


def parse_roles(value: Any) -> FrozenSet[Role]:
    """Accept a list of role names or a comma separated string."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        return frozenset()

    roles = set()
    for item in items:
        name = str(item).strip().upper()
        if not name:
            continue
        try:
            roles.add(Role(name))
        except ValueError:
            logger.debug("Ignoring unknown role claim %r", name)
    return frozenset(roles)


def _as_epoch(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


@dataclass(frozen=True)
class TokenClaims:
    exp: Optional[int]
    subject: Optional[str]
    company_id: Optional[str]
    roles: FrozenSet[Role]
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        sub = payload.get("sub")
        company_id = payload.get("companyId")
        return cls(
            exp=_as_epoch(payload.get("exp")),
            subject=str(sub) if sub is not None else None,
            company_id=str(company_id) if company_id is not None else None,
            roles=parse_roles(payload.get("roles")),
            raw=dict(payload),
        )

    def has_role(self, role: Role) -> bool:
        return role in self.roles


class TokenValidator:
    """Client-side expiry check of a bearer token (fail-closed)."""

    def __init__(self, *, now_seconds: Callable[[], int] = _now_seconds, leeway_seconds: int = 0):
        self._now_seconds = now_seconds
        self._leeway = int(leeway_seconds)

    def decode(self, token: Any) -> TokenClaims:
        if not token or not isinstance(token, str):
            raise DecodeFailure("No bearer token")
        try:
            payload = jwt.decode(token, options=_UNVERIFIED)
        except jwt.PyJWTError as e:
            raise DecodeFailure(f"Malformed bearer token: {e}") from e
        if not isinstance(payload, dict):
            raise DecodeFailure("Token claims are not an object")
        return TokenClaims.from_payload(payload)

    def is_expired(self, token: Any) -> bool:
        try:
            claims = self.decode(token)
        except DecodeFailure as e:
            logger.debug("Treating token as expired: %s", e)
            return True
        if claims.exp is None:
            return True
        return claims.exp + self._leeway < int(self._now_seconds())
