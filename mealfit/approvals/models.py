# -*- coding: utf-8 -*-
"""Approvals — Pydantic models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from ..auth.models import Identity


class PendingIdentity(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    created_at: str

    @classmethod
    def from_identity(cls, identity: Identity) -> "PendingIdentity":
        return cls(
            id=identity.id,
            name=identity.name,
            email=identity.email,
            image=identity.image,
            created_at=identity.created_at,
        )


class ApproveRequest(BaseModel):
    user_id: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("user_id", mode="before")
    @classmethod
    def _required(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("missing", "User ID is required.")
        return value
