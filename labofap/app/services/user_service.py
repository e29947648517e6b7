from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional, Protocol

from pydantic import BaseModel

from labofap.app.errors import AuthorityAlreadyExistsError
from labofap.app.services.sqlite_db import connect, execute, fetchall, fetchone

log = logging.getLogger(__name__)


class Authority(BaseModel):
    name: str


class UserService(Protocol):
    """
    What the authority endpoints need from user management. Uniqueness and
    storage of authorities are owned by the implementation.
    """

    def register_authority(self, name: str) -> Authority: ...

    def get_authority(self, name: str) -> Optional[Authority]: ...

    def list_authorities(self) -> List[Authority]: ...


class SqliteUserService:
    def register_authority(self, name: str) -> Authority:
        conn = connect()
        try:
            execute(conn, "INSERT INTO authorities (name) VALUES (?)", (name,))
        except sqlite3.IntegrityError as exc:
            raise AuthorityAlreadyExistsError(name) from exc
        finally:
            conn.close()

        log.debug("Created Information for Authority: %s", name)
        return Authority(name=name)

    def get_authority(self, name: str) -> Optional[Authority]:
        conn = connect()
        try:
            row = fetchone(conn, "SELECT name FROM authorities WHERE name = ?", (name,))
        finally:
            conn.close()
        return Authority(name=row["name"]) if row else None

    def list_authorities(self) -> List[Authority]:
        conn = connect()
        try:
            rows = fetchall(conn, "SELECT name FROM authorities ORDER BY name")
        finally:
            conn.close()
        return [Authority(name=r["name"]) for r in rows]


def get_user_service() -> UserService:
    """
    FastAPI dependency; tests swap it through app.dependency_overrides.
    """
    return SqliteUserService()
