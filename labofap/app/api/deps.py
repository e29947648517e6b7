from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, status

from labofap.app.services.auth_service import get_user_authorities, resolve_token


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        return ""
    if authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip()
    return ""


def require_user_id(authorization: Optional[str] = Header(default=None)) -> int:
    """
    FastAPI dependency: returns the user_id for a valid Bearer token.
    Raises HTTPException(401) if missing/invalid.
    """
    uid = resolve_token(bearer_token(authorization))
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return int(uid)


def require_authority(authority: str) -> Callable[..., int]:
    """
    Builds a dependency that lets the request through only when the caller
    holds `authority`; 403 otherwise. Runs before the handler body is read.
    """

    def _guard(user_id: int = Depends(require_user_id)) -> int:
        if authority not in get_user_authorities(user_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return user_id

    return _guard
