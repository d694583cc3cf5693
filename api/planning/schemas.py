"""
Pydantic schemas for task assignment endpoints.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, Field

from core.validation import ValidationProfile


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise be coerced to 1/0.
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    return value


NumericInt = Annotated[int, BeforeValidator(_reject_bool)]
NumericFloat = Annotated[float, BeforeValidator(_reject_bool)]


class AssignTaskRequest(ValidationProfile):
    field_messages: ClassVar[dict[str, str]] = {
        "personId": "personId doit être un entier",
        "taskId": "taskId doit être un entier",
    }

    personId: NumericInt
    taskId: NumericInt


class UpdateTimeRequest(AssignTaskRequest):
    field_messages: ClassVar[dict[str, str]] = {
        **AssignTaskRequest.field_messages,
        "timeSpent": "timeSpent doit être un nombre positif ou nul",
    }

    timeSpent: NumericFloat = Field(..., ge=0, allow_inf_nan=False)


class MessageResponse(BaseModel):
    message: str
