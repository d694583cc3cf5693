"""
Auth security helpers.

- password hashing: bcrypt, fixed cost, run in a worker thread
- access tokens: PyJWT, payload {id, email, iat, exp}
"""

from __future__ import annotations

import asyncio
import base64
import enum
import hashlib
import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from core.config import Settings

BCRYPT_ROUNDS = 10
# bcrypt only reads the first 72 bytes and recent releases reject longer input.
BCRYPT_MAX_BYTES = 72


class AuthSecurityError(RuntimeError):
    pass


class TokenErrorKind(str, enum.Enum):
    MALFORMED = "malformed"
    INVALID = "invalid"
    EXPIRED = "expired"


class TokenError(AuthSecurityError):
    def __init__(self, kind: TokenErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class TokenIdentity:
    id: int
    email: str


def now_epoch_s() -> int:
    return int(time.time())


def _bcrypt_input(password: bytes) -> bytes:
    if len(password) <= BCRYPT_MAX_BYTES:
        return password
    return base64.b64encode(hashlib.sha256(password).digest())


def _hash_sync(password: bytes) -> str:
    return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def _verify_sync(password: bytes, hashed: bytes) -> bool:
    return bcrypt.checkpw(_bcrypt_input(password), hashed)


async def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return await asyncio.to_thread(_hash_sync, password)


async def verify_password(plain_password: str, password_hash: str) -> bool:
    """
    Compare a password with a stored bcrypt hash.

    A malformed stored hash raises (ValueError from bcrypt) instead of
    reading as a mismatch.
    """
    password = (plain_password or "").encode("utf-8")
    if not password:
        return False
    hashed = (password_hash or "").encode("utf-8")
    return await asyncio.to_thread(_verify_sync, password, hashed)


def build_access_token(
    *,
    user_id: int,
    email: str,
    settings: Settings,
    issued_at: int | None = None,
) -> str:
    issued_at = now_epoch_s() if issued_at is None else issued_at
    payload = {
        "id": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + settings.access_token_ttl_s,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, *, settings: Settings) -> TokenIdentity:
    raw = (token or "").strip()
    if not raw:
        raise TokenError(TokenErrorKind.MALFORMED, "Access token is empty.")

    try:
        payload: dict[str, Any] = jwt.decode(
            raw,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError(TokenErrorKind.EXPIRED, "Access token is expired.") from exc
    except jwt.InvalidSignatureError as exc:
        raise TokenError(TokenErrorKind.INVALID, "Access token signature mismatch.") from exc
    except jwt.DecodeError as exc:
        raise TokenError(TokenErrorKind.MALFORMED, "Access token is malformed.") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError(TokenErrorKind.INVALID, "Invalid access token.") from exc

    user_id = payload.get("id")
    email = payload.get("email")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(email, str):
        raise TokenError(TokenErrorKind.INVALID, "Invalid access token payload.")

    return TokenIdentity(id=user_id, email=email)
