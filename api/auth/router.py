"""
Auth API endpoints (open: no bearer token required).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from core.validation import body_schema, validated_body

from . import schemas, service

router = APIRouter(prefix="/api")


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    openapi_extra=body_schema(schemas.RegisterRequest),
)
async def register(
    payload: schemas.RegisterRequest = Depends(validated_body(schemas.RegisterRequest)),
) -> schemas.MessageResponse:
    return await service.register(payload)


@router.post("/login", openapi_extra=body_schema(schemas.LoginRequest))
async def login(
    request: Request,
    payload: schemas.LoginRequest = Depends(validated_body(schemas.LoginRequest)),
) -> schemas.LoginResponse:
    return await service.login(payload, settings=request.app.state.settings)
