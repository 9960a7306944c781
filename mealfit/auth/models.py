# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    MEMBER = "MEMBER"


class Identity(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    provider: Optional[str] = None
    role: UserRole = UserRole.MEMBER
    approved: bool = False
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Identity":
        data = dict(row)
        data["approved"] = bool(data.get("approved"))
        return cls.model_validate(data)


class SignInProfile(BaseModel):
    """What the identity provider tells us about the person signing in."""

    email: Optional[str] = Field(None, max_length=254)
    name: Optional[str] = Field(None, max_length=256)
    image: Optional[str] = Field(None, max_length=2048)
    provider: str = Field("google", max_length=64)


class SessionPublic(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: UserRole
    approved: bool
