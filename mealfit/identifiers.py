# -*- coding: utf-8 -*-
"""Identity id value type, parsed once and passed as-is to every store."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from .errors import ValidationError


@dataclass(frozen=True)
class IdentityId:
    value: str

    @classmethod
    def parse(cls, raw: object) -> "IdentityId":
        if isinstance(raw, IdentityId):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            raise ValidationError(
                "Invalid identity id",
                details=[{"field": "user_id", "message": "Identity id must be a non-empty string", "type": "identity_id"}],
            )
        try:
            parsed = UUID(raw.strip())
        except ValueError as exc:
            raise ValidationError(
                f"Invalid identity id: {raw!r}",
                details=[{"field": "user_id", "message": "Identity id is malformed", "type": "identity_id"}],
            ) from exc
        return cls(str(parsed))

    @classmethod
    def new(cls) -> "IdentityId":
        return cls(str(uuid4()))

    def __str__(self) -> str:
        return self.value
