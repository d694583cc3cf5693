"""
Request body validation.

Each route names a pydantic model (its validation profile). `validated_body`
turns that model into a FastAPI dependency which:
- parses the JSON body,
- checks every field independently (pydantic collects all errors),
- raises `RequestValidationFailed` with an ordered `{field, message}` list.

`core/errors.py` renders `RequestValidationFailed` as HTTP 400.
When `Settings.validation_enabled` is off the body is passed through unchecked.
"""

from __future__ import annotations

import json
from typing import Any, Callable, ClassVar, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

DEFAULT_FIELD_MESSAGE = "Valeur invalide"
BODY_FIELD = "body"
INVALID_JSON_MESSAGE = "Le corps de la requête doit être du JSON valide"
NOT_AN_OBJECT_MESSAGE = "Le corps de la requête doit être un objet JSON"

ModelT = TypeVar("ModelT", bound=BaseModel)


class ValidationProfile(BaseModel):
    """
    Base for request profiles.

    `field_messages` maps a body field to the user-facing message reported
    whenever that field fails, whatever the failing rule.
    """

    field_messages: ClassVar[dict[str, str]] = {}


class RequestValidationFailed(Exception):
    def __init__(self, errors: list[dict[str, str]]):
        super().__init__(f"{len(errors)} invalid field(s)")
        self.errors = errors


def field_errors(model: type[BaseModel], exc: ValidationError) -> list[dict[str, str]]:
    """
    One error per failing field, ordered like the model's fields.
    """
    messages: dict[str, str] = getattr(model, "field_messages", {})
    by_field: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else BODY_FIELD
        if field in by_field:
            continue
        by_field[field] = NOT_AN_OBJECT_MESSAGE if field == BODY_FIELD else messages.get(field, DEFAULT_FIELD_MESSAGE)

    order = list(model.model_fields)
    return [
        {"field": field, "message": by_field[field]}
        for field in sorted(by_field, key=lambda f: order.index(f) if f in order else len(order))
    ]


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RequestValidationFailed(
            [{"field": BODY_FIELD, "message": INVALID_JSON_MESSAGE}]
        ) from exc


def parse_body(model: type[ModelT], data: Any, *, validate: bool = True) -> ModelT:
    if not validate:
        return model.model_construct(**(data if isinstance(data, dict) else {}))
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationFailed(field_errors(model, exc)) from exc


def validated_body(model: type[ModelT]) -> Callable[[Request], Any]:
    async def dependency(request: Request) -> ModelT:
        data = await _read_json(request)
        settings = request.app.state.settings
        return parse_body(model, data, validate=settings.validation_enabled)

    dependency.__name__ = f"validated_{model.__name__}"
    return dependency


def body_schema(model: type[BaseModel]) -> dict[str, Any]:
    """
    `openapi_extra` for routes reading their body through `validated_body`.

    The body is not a declared parameter, so the request schema is added to
    the generated docs by hand.
    """
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }
