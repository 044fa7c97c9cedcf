"""Store configuration, connection strings and encrypted page numbers."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from clairscan.token import InvalidTokenError, marshal, unmarshal

__all__ = [
    "BadRequestError",
    "Config",
    "IdPageNumber",
    "parse_connection_string",
    "encrypt_page",
    "decrypt_page",
]


class BadRequestError(ValueError):
    """Raised when a request or configuration value is unusable."""


@dataclass
class Config:
    """Configuration of the PostgreSQL-backed store."""

    source: str = ""
    cache_size: int = 16384
    manage_database_lifecycle: bool = False
    fixture_path: str = ""
    pagination_key: str = ""


@dataclass(frozen=True)
class IdPageNumber:
    """A page position: ancestries with an ID of at least ``start_id``."""

    start_id: int = 0


def parse_connection_string(source: str) -> tuple[str, str]:
    """Split a connection URL into its database name and a URL to ``/postgres``."""
    if not source:
        raise BadRequestError("pgsql: no database connection string specified")
    try:
        parts = urlsplit(source)
    except ValueError as exc:
        raise BadRequestError(
            "pgsql: database connection string is not a valid URL"
        ) from exc

    db_name = parts.path.removeprefix("/")
    pg_source_url = urlunsplit(parts._replace(path="/postgres"))
    return db_name, pg_source_url


def encrypt_page(page: IdPageNumber, pagination_key: str) -> str:
    """Encrypt ``page`` into an opaque page token."""
    return marshal({"StartID": page.start_id}, pagination_key).decode("ascii")


def decrypt_page(page: str, pagination_key: str) -> IdPageNumber:
    """Decrypt a page token produced by :func:`encrypt_page`."""
    data = unmarshal(page, pagination_key)
    if not isinstance(data, dict):
        raise InvalidTokenError("malformed pagination token")
    start_id = data.get("StartID", 0)
    if start_id is None:
        start_id = 0
    if isinstance(start_id, bool) or not isinstance(start_id, int):
        raise InvalidTokenError("malformed pagination token")
    return IdPageNumber(start_id)