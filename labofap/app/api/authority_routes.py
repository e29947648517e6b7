from __future__ import annotations

import json
import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from starlette.concurrency import run_in_threadpool

from labofap.app.api.deps import require_authority
from labofap.app.config import ADMIN
from labofap.app.errors import BadRequestAlertException
from labofap.app.services.header_util import create_alert
from labofap.app.services.user_service import Authority, UserService, get_user_service

log = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_authority(ADMIN))])


async def _authority_name(request: Request) -> Optional[str]:
    """
    The body is the name itself, not an object. A JSON body that decodes to a
    string (or null) is unwrapped; anything else is taken verbatim.
    """
    try:
        raw = (await request.body()).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadRequestAlertException("An Authority name must be valid UTF-8", "Authority", "invalidencoding") from exc
    content_type = request.headers.get("content-type", "")
    if "json" in content_type and raw.strip():
        try:
            value = json.loads(raw)
        except ValueError:
            return raw
        if value is None or isinstance(value, str):
            return value
    return raw


@router.post("/authorities", status_code=status.HTTP_201_CREATED, response_model=Authority)
async def create_authority(
    request: Request,
    response: Response,
    user_service: UserService = Depends(get_user_service),
):
    authority_name = await _authority_name(request)
    log.debug("REST request to save Authority : %s", authority_name)

    authority_name = (authority_name or "").strip()
    if not authority_name:
        raise BadRequestAlertException("A new Authority cannot be null or empty", "Authority", "idexists")

    authority = await run_in_threadpool(user_service.register_authority, authority_name)

    response.headers["Location"] = f"/api/authorities/{quote(authority_name, safe='')}"
    response.headers.update(create_alert("authorities.created", authority_name))
    return authority


@router.get("/authorities", response_model=List[Authority])
def list_authorities(user_service: UserService = Depends(get_user_service)):
    return user_service.list_authorities()


@router.get("/authorities/{name:path}", response_model=Authority)
def get_authority(name: str, user_service: UserService = Depends(get_user_service)):
    authority = user_service.get_authority(name)
    if authority is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Authority not found")
    return authority
