from __future__ import annotations

from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from ..core.exceptions import DecodeFailure, ValidationError

# Every Fernet token is url-safe base64 of a 0x80 version byte followed by the timestamp.
ENCRYPTED_PREFIX = "gAAAAA"


class ValueCipher:
    """Symmetric encryption for session values kept in tab storage."""

    def __init__(self, key: str | bytes):
        try:
            self._fernet = Fernet(key)
        except (TypeError, ValueError) as e:
            raise ValidationError("Session encryption key must be 32 url-safe base64-encoded bytes") from e

    @classmethod
    def from_key(cls, key: Optional[str]) -> Optional["ValueCipher"]:
        return cls(key) if key else None

    @staticmethod
    def generate_key() -> str:
        return Fernet.generate_key().decode("ascii")

    @staticmethod
    def looks_encrypted(raw: str) -> bool:
        return raw.startswith(ENCRYPTED_PREFIX)

    def encrypt(self, text: str) -> str:
        return self._fernet.encrypt(text.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            raise DecodeFailure("Cannot decrypt session value") from e
