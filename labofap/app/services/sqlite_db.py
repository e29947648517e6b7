from __future__ import annotations

import sqlite3
from typing import Any, Optional, Tuple

from labofap.app.config import ADMIN, USER, db_path

BUILTIN_AUTHORITIES = (ADMIN, USER)


def connect() -> sqlite3.Connection:
    path = db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def get_conn() -> sqlite3.Connection:
    """
    Small compatibility wrapper used by auth_service and other services.
    """
    return connect()


def init_db() -> None:
    conn = connect()
    cur = conn.cursor()

    # Users for auth
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          email TEXT NOT NULL UNIQUE,
          password_hash TEXT NOT NULL,
          created_at TEXT NOT NULL
        );
        """
    )

    # Sessions (tokens) for auth
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS sessions (
          token TEXT PRIMARY KEY,
          user_id INTEGER NOT NULL,
          created_at TEXT NOT NULL,
          expires_at TEXT NOT NULL,
          FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );
        """
    )

    # Authorities (roles); the name is the key
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS authorities (
          name TEXT PRIMARY KEY
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS user_authorities (
          user_id INTEGER NOT NULL,
          authority_name TEXT NOT NULL,
          PRIMARY KEY (user_id, authority_name),
          FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
          FOREIGN KEY(authority_name) REFERENCES authorities(name) ON DELETE CASCADE
        );
        """
    )

    for name in BUILTIN_AUTHORITIES:
        cur.execute("INSERT OR IGNORE INTO authorities (name) VALUES (?)", (name,))

    conn.commit()
    conn.close()


def fetchone(conn: sqlite3.Connection, sql: str, params: Tuple[Any, ...] = ()) -> Optional[sqlite3.Row]:
    cur = conn.execute(sql, params)
    return cur.fetchone()


def fetchall(conn: sqlite3.Connection, sql: str, params: Tuple[Any, ...] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, params)
    return cur.fetchall()


def execute(conn: sqlite3.Connection, sql: str, params: Tuple[Any, ...] = ()) -> int:
    cur = conn.execute(sql, params)
    conn.commit()
    return cur.lastrowid
