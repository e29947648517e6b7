from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI, Header
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from labofap.app.api.authority_routes import router as authority_router
from labofap.app.api.deps import bearer_token, require_user_id
from labofap.app.config import APP_NAME, cors_origins
from labofap.app.logging_config import configure_logging
from labofap.app.services.auth_service import (
    get_user_authorities,
    get_user_email,
    login_user,
    logout_token,
    register_user,
    seed_admin,
)
from labofap.app.services.sqlite_db import init_db

configure_logging()
log = logging.getLogger(__name__)


# -------------------------------------------------
# Request models
# -------------------------------------------------
class RegisterRequest(BaseModel):
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


# -------------------------------------------------
# Startup
# -------------------------------------------------
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    init_db()
    admin_id = seed_admin()
    if admin_id is not None:
        log.info("Bootstrap admin ready (user_id=%s)", admin_id)
    yield


# -------------------------------------------------
# FastAPI app
# -------------------------------------------------
app = FastAPI(title="labofap API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", f"X-{APP_NAME}-alert", f"X-{APP_NAME}-error", f"X-{APP_NAME}-params"],
)


# -------------------------------------------------
# Health
# -------------------------------------------------
@app.get("/health")
def health():
    return {"ok": True}


# -------------------------------------------------
# Auth endpoints
# -------------------------------------------------
@app.post("/auth/register")
def auth_register(req: RegisterRequest):
    uid = register_user(req.email, req.password)
    return {"ok": True, "user_id": uid}


@app.post("/auth/login")
def auth_login(req: LoginRequest):
    token, uid = login_user(req.email, req.password)
    return {"ok": True, "token": token, "user_id": uid}


@app.post("/auth/logout")
def auth_logout(authorization: Optional[str] = Header(default=None)):
    token = bearer_token(authorization)
    if token:
        logout_token(token)
    return {"ok": True}


@app.get("/auth/me")
def auth_me(user_id: int = Depends(require_user_id)):
    return {
        "ok": True,
        "user": {
            "user_id": user_id,
            "email": get_user_email(user_id),
            "authorities": get_user_authorities(user_id),
        },
    }


# -------------------------------------------------
# Routers
# -------------------------------------------------
app.include_router(authority_router, prefix="/api", tags=["authorities"])
