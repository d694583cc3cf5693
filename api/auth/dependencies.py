"""
Auth dependencies for protected FastAPI routes.

Status codes:
- no Authorization header -> 401
- header present but not `Bearer <token>`, or token rejected -> 403
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, Request, status

from . import security

logger = logging.getLogger(__name__)


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return token


async def get_bearer_token(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str | None:
    # Auth variant switched off: the gate lets everything through.
    if not request.app.state.settings.auth_required:
        return None
    return _extract_bearer_token(authorization)


async def get_current_identity(
    request: Request,
    access_token: str | None = Depends(get_bearer_token),
) -> security.TokenIdentity | None:
    if access_token is None:
        return None

    try:
        identity = security.decode_access_token(access_token, settings=request.app.state.settings)
    except security.TokenError as exc:
        logger.info("token_rejected kind=%s path=%s", exc.kind.value, request.url.path)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN) from exc

    request.state.identity = identity
    return identity
