"""
Auth persistence helpers (`personne` table).
"""

from __future__ import annotations

from core import db


async def create_person(*, nom: str, prenom: str, email: str, password_hash: str) -> None:
    await db.execute(
        """
        INSERT INTO personne (nom, email, password, prenom)
        VALUES ($1, $2, $3, $4)
        """,
        nom,
        email,
        password_hash,
        prenom,
    )


async def get_person_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id_P AS id, nom, prenom, email, password
        FROM personne
        WHERE email = $1
        """,
        email,
    )
