"""
Task assignment business logic.

Procedure failures propagate to the catch-all 500 handler, except errors the
procedure raises on purpose (`RAISE EXCEPTION`), which are domain errors and
are returned to the client as 400 with the procedure's message.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from . import repository, schemas

TASK_ASSIGNED_MESSAGE = "Tâche assignée avec succès"
TIME_UPDATED_MESSAGE = "Temps mis à jour avec succès"

logger = logging.getLogger(__name__)


def _domain_error(exc: asyncpg.RaiseError, *, procedure: str) -> HTTPException:
    message = exc.message or str(exc)
    logger.info("procedure_rejected procedure=%s message=%s", procedure, message)
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=message,
    )


async def detailed_tasks() -> list[dict]:
    return await repository.list_detailed_tasks()


async def person_skills() -> list[dict]:
    return await repository.list_person_skills()


async def assign_task(payload: schemas.AssignTaskRequest) -> schemas.MessageResponse:
    try:
        await repository.assign_task(person_id=payload.personId, task_id=payload.taskId)
    except asyncpg.RaiseError as exc:
        raise _domain_error(exc, procedure="assigner_tache") from exc

    logger.info("task_assigned person_id=%s task_id=%s", payload.personId, payload.taskId)
    return schemas.MessageResponse(message=TASK_ASSIGNED_MESSAGE)


async def update_time(payload: schemas.UpdateTimeRequest) -> schemas.MessageResponse:
    try:
        await repository.update_remaining_time(
            person_id=payload.personId,
            task_id=payload.taskId,
            time_spent=payload.timeSpent,
        )
    except asyncpg.RaiseError as exc:
        raise _domain_error(exc, procedure="update_temps_restant") from exc

    return schemas.MessageResponse(message=TIME_UPDATED_MESSAGE)
