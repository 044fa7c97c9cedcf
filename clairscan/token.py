"""Encryption and decryption of JSON-encoded values as pagination tokens."""

from __future__ import annotations

import json
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

__all__ = ["InvalidTokenError", "TOKEN_TTL_SECONDS", "marshal", "unmarshal"]

TOKEN_TTL_SECONDS = 3600
"""How long a token stays valid after it was issued."""


class InvalidTokenError(ValueError):
    """Raised when a token cannot be verified, has expired or is malformed."""

    def __init__(self, message: str = "invalid or expired pagination token") -> None:
        super().__init__(message)


def _fernet(key: str | bytes) -> Fernet:
    return Fernet(key.encode("ascii") if isinstance(key, str) else key)


def marshal(value: Any, key: str | bytes) -> bytes:
    """Encode ``value`` as JSON and encrypt it with the Fernet ``key``."""
    payload = (json.dumps(value, separators=(",", ":")) + "\n").encode("utf-8")
    return _fernet(key).encrypt(payload)


def unmarshal(token: str | bytes, key: str | bytes) -> Any:
    """Verify and decrypt ``token`` with ``key`` and decode the JSON inside."""
    try:
        fernet = _fernet(key)
    except (ValueError, TypeError, UnicodeEncodeError) as exc:
        raise InvalidTokenError() from exc

    raw = token.encode("utf-8") if isinstance(token, str) else token
    try:
        message = fernet.decrypt(raw, ttl=TOKEN_TTL_SECONDS)
    except (InvalidToken, TypeError) as exc:
        raise InvalidTokenError() from exc

    try:
        return json.loads(message)
    except ValueError as exc:
        raise InvalidTokenError("malformed pagination token") from exc