"""
Auth business logic.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from core.config import Settings

from . import repository, schemas, security

EMAIL_TAKEN_MESSAGE = "Cet email est déjà utilisé"
BAD_CREDENTIALS_MESSAGE = "Email ou mot de passe incorrect"
REGISTERED_MESSAGE = "Utilisateur enregistré avec succès"

logger = logging.getLogger(__name__)


def _email_taken() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=EMAIL_TAKEN_MESSAGE,
    )


def _bad_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=BAD_CREDENTIALS_MESSAGE,
    )


def _to_user_response(person_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(person_row["id"]),
        nom=str(person_row["nom"]),
        prenom=str(person_row["prenom"]),
        email=str(person_row["email"]),
    )


async def register(payload: schemas.RegisterRequest) -> schemas.MessageResponse:
    existing = await repository.get_person_by_email(payload.email)
    if existing is not None:
        raise _email_taken()

    password_hash = await security.hash_password(payload.password)
    try:
        await repository.create_person(
            nom=payload.nom,
            prenom=payload.prenom,
            email=payload.email,
            password_hash=password_hash,
        )
    except asyncpg.UniqueViolationError as exc:
        # A concurrent registration won the race between the check and the insert.
        raise _email_taken() from exc

    logger.info("person_registered email=%s", payload.email)
    return schemas.MessageResponse(message=REGISTERED_MESSAGE)


async def login(payload: schemas.LoginRequest, *, settings: Settings) -> schemas.LoginResponse:
    person_row = await repository.get_person_by_email(payload.email)
    if person_row is None:
        raise _bad_credentials()

    is_valid = await security.verify_password(payload.password, str(person_row.get("password") or ""))
    if not is_valid:
        raise _bad_credentials()

    user = _to_user_response(person_row)
    token = security.build_access_token(user_id=user.id, email=user.email, settings=settings)
    return schemas.LoginResponse(token=token, user=user)
