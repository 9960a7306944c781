# -*- coding: utf-8 -*-
"""Approvals — API endpoints (SUPER_ADMIN only)."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from ..auth.security import Session, require_super_admin
from ..auth.storage import approve_identity, list_unapproved_identities
from ..errors import NotFoundError, success_envelope
from ..identifiers import IdentityId
from ..validation import validate_request
from .models import ApproveRequest, PendingIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/approvals", tags=["Approvals"])


@router.get("/pending", summary="Identities waiting for approval, newest first")
def list_pending(session: Session = Depends(require_super_admin)):  # noqa: ARG001
    identities = list_unapproved_identities()
    return success_envelope([PendingIdentity.from_identity(i).model_dump() for i in identities])


@router.post("/approve", summary="Approve an identity")
def approve(payload: Any = Body(default=None), session: Session = Depends(require_super_admin)):
    request = validate_request(ApproveRequest, payload, surface_first=True)
    user_id = IdentityId.parse(request.user_id)
    identity = approve_identity(user_id)
    if identity is None:
        raise NotFoundError("User not found.")
    logger.info("Identity %s (%s) approved by %s", identity.id, identity.email, session.email)
    return success_envelope({"message": f"User {identity.email} has been approved successfully."})
