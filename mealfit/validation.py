# -*- coding: utf-8 -*-
"""Validation layer — runs a request model and reports every violation at once."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel

from .errors import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def violations_from(exc: pydantic.ValidationError) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for err in exc.errors(include_url=False):
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
        out.append({"field": field, "message": err.get("msg", "Invalid value"), "type": err.get("type", "value_error")})
    return out


def validate_request(
    model: Type[ModelT],
    payload: Any,
    *,
    message: Optional[str] = None,
    surface_first: bool = False,
) -> ModelT:
    """Validate `payload` against `model` or raise a ValidationError.

    By default the error message is generic ("Invalid input data"); with
    `surface_first` the first violation's message is used instead.
    """
    try:
        return model.model_validate(payload if payload is not None else {})
    except pydantic.ValidationError as exc:
        details = violations_from(exc)
        logger.debug("Rejected %s: %s", model.__name__, details)
        if surface_first and details:
            raise ValidationError(details[0]["message"], details=details) from exc
        raise ValidationError(message, details=details) from exc
