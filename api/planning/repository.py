"""
Task/person persistence (views and stored procedures).

View rows are returned as-is; procedure bodies live in the database.
"""

from __future__ import annotations

from core import db


async def list_detailed_tasks() -> list[dict]:
    return await db.fetch_all("SELECT * FROM v_taches_detaillees")


async def list_person_skills() -> list[dict]:
    return await db.fetch_all("SELECT * FROM v_competences_personnes")


async def assign_task(*, person_id: int, task_id: int) -> None:
    await db.execute("CALL assigner_tache($1, $2)", person_id, task_id)


async def update_remaining_time(*, person_id: int, task_id: int, time_spent: float) -> None:
    await db.execute("CALL update_temps_restant($1, $2, $3)", person_id, task_id, time_spent)
