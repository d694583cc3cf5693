"""
Task assignment API endpoints.

Every route runs the auth gate first, then body validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from core.validation import body_schema, validated_body

from . import schemas, service

router = APIRouter(prefix="/api", dependencies=[Depends(auth_dependencies.get_current_identity)])


@router.get("/tasks")
async def list_tasks() -> list[dict]:
    return await service.detailed_tasks()


@router.get("/persons")
async def list_persons() -> list[dict]:
    return await service.person_skills()


@router.post("/assign-task", openapi_extra=body_schema(schemas.AssignTaskRequest))
async def assign_task(
    payload: schemas.AssignTaskRequest = Depends(validated_body(schemas.AssignTaskRequest)),
) -> schemas.MessageResponse:
    return await service.assign_task(payload)


@router.post("/update-time", openapi_extra=body_schema(schemas.UpdateTimeRequest))
async def update_time(
    payload: schemas.UpdateTimeRequest = Depends(validated_body(schemas.UpdateTimeRequest)),
) -> schemas.MessageResponse:
    return await service.update_time(payload)
