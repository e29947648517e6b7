from __future__ import annotations

import os
from pathlib import Path
from typing import List


APP_NAME = os.getenv("LABOFAP_APP_NAME", "labofapApp")

ADMIN = "ROLE_ADMIN"
USER = "ROLE_USER"


def db_path() -> Path:
    # Locally, resolves to <repo>/data/labofap.db
    return Path(
        os.getenv(
            "LABOFAP_DB_PATH",
            str(Path(__file__).resolve().parents[2] / "data" / "labofap.db"),
        )
    )


def log_level() -> str:
    return (os.getenv("LABOFAP_LOG_LEVEL") or "INFO").strip().upper()


def session_hours() -> int:
    return int(os.getenv("LABOFAP_SESSION_HOURS", "24"))


def bootstrap_admin() -> tuple[str, str] | None:
    """
    Returns (email, password) for the admin account seeded at startup,
    or None when either variable is unset.
    """
    email = (os.getenv("LABOFAP_ADMIN_EMAIL") or "").strip()
    password = os.getenv("LABOFAP_ADMIN_PASSWORD") or ""
    if not email or not password:
        return None
    return email, password


def cors_origins() -> List[str]:
    raw = os.getenv("LABOFAP_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    return [o.strip() for o in raw.split(",") if o.strip()]
