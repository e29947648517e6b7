from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from labofap.app.config import ADMIN, USER, bootstrap_admin, session_hours
from labofap.app.services.sqlite_db import get_conn

log = logging.getLogger(__name__)

# Use bcrypt_sha256 to avoid bcrypt's 72-byte input limit safely
pwd_context = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _now_iso() -> str:
    return _now().isoformat()


def _expires_iso(hours: int) -> str:
    return (_now() + timedelta(hours=hours)).isoformat()


def _hash_password(password: str) -> str:
    return pwd_context.hash(password)


def _verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (UnknownHashError, ValueError, TypeError):
        # UnknownHashError = the stored value isn't a passlib-recognized hash
        # ValueError/TypeError = None/empty/invalid formats
        return False


def register_user(email: str, password: str, authorities: Tuple[str, ...] = (USER,)) -> int:
    conn = get_conn()
    try:
        cur = conn.cursor()

        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if cur.fetchone():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists",
            )

        cur.execute(
            "INSERT INTO users (email, password_hash, created_at) VALUES (?, ?, ?)",
            (email, _hash_password(password), _now_iso()),
        )
        user_id = int(cur.lastrowid)
        for name in authorities:
            cur.execute(
                "INSERT OR IGNORE INTO user_authorities (user_id, authority_name) VALUES (?, ?)",
                (user_id, name),
            )
        conn.commit()
    finally:
        conn.close()

    log.info("Registered user %s with authorities %s", email, list(authorities))
    return user_id


def login_user(email: str, password: str) -> Tuple[str, int]:
    conn = get_conn()
    try:
        cur = conn.cursor()

        cur.execute("SELECT id, password_hash FROM users WHERE email = ?", (email,))
        row = cur.fetchone()

        if (not row) or (not _verify_password(password, row["password_hash"])):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        token = secrets.token_hex(32)
        user_id = int(row["id"])

        cur.execute(
            "INSERT INTO sessions (token, user_id, created_at, expires_at) VALUES (?, ?, ?, ?)",
            (token, user_id, _now_iso(), _expires_iso(session_hours())),
        )
        conn.commit()
    finally:
        conn.close()

    return token, user_id


def resolve_token(token: str) -> Optional[int]:
    if not token:
        return None

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("SELECT user_id, expires_at FROM sessions WHERE token = ?", (token,))
        row = cur.fetchone()
        if not row:
            return None

        # Enforce expiration
        try:
            exp = datetime.fromisoformat(row["expires_at"])
        except ValueError:
            return None
        if exp < _now():
            cur.execute("DELETE FROM sessions WHERE token = ?", (token,))
            conn.commit()
            return None

        return int(row["user_id"])
    finally:
        conn.close()


def logout_token(token: str) -> None:
    conn = get_conn()
    try:
        conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
        conn.commit()
    finally:
        conn.close()


def get_user_email(user_id: int) -> Optional[str]:
    conn = get_conn()
    try:
        row = conn.execute("SELECT email FROM users WHERE id = ?", (user_id,)).fetchone()
        return row["email"] if row else None
    finally:
        conn.close()


def get_user_authorities(user_id: int) -> List[str]:
    conn = get_conn()
    try:
        rows = conn.execute(
            "SELECT authority_name FROM user_authorities WHERE user_id = ? ORDER BY authority_name",
            (user_id,),
        ).fetchall()
        return [r["authority_name"] for r in rows]
    finally:
        conn.close()


def seed_admin() -> Optional[int]:
    """
    Creates the bootstrap admin from LABOFAP_ADMIN_EMAIL / LABOFAP_ADMIN_PASSWORD
    if it does not exist yet. Returns its user id, or None when unconfigured.
    """
    creds = bootstrap_admin()
    if creds is None:
        return None
    email, password = creds

    conn = get_conn()
    try:
        row = conn.execute("SELECT id FROM users WHERE email = ?", (email,)).fetchone()
    finally:
        conn.close()
    if row:
        return int(row["id"])

    return register_user(email, password, authorities=(ADMIN, USER))
