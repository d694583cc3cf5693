"""
Auth API schemas (request/response models).

Request models double as validation profiles: every field is checked and
reported with its `field_messages` entry.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, EmailStr, Field

from core.validation import ValidationProfile


class RegisterRequest(ValidationProfile):
    field_messages: ClassVar[dict[str, str]] = {
        "email": "Email invalide",
        "password": "Le mot de passe doit contenir au moins 6 caractères",
        "nom": "Le nom d'utilisateur doit contenir au moins 3 caractères",
        "prenom": "Le prénom d'utilisateur doit contenir au moins 3 caractères",
    }

    email: EmailStr
    password: str = Field(..., min_length=6)
    nom: str = Field(..., min_length=3)
    prenom: str = Field(..., min_length=3)


class LoginRequest(ValidationProfile):
    field_messages: ClassVar[dict[str, str]] = {
        "email": "Email invalide",
        "password": "Mot de passe requis",
    }

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    nom: str
    prenom: str
    email: str


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
