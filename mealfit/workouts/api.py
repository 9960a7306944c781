# -*- coding: utf-8 -*-
"""Workouts — API endpoints."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from ..auth.security import Session, require_approved
from ..errors import success_envelope
from ..validation import validate_request
from .models import FetchWorkoutsRequest, SaveWorkoutsRequest, SaveWorkoutsResult
from .storage import bulk_upsert_workouts, get_workouts_for_date, to_day_workouts

router = APIRouter(prefix="/api/workouts", tags=["Workouts"])


@router.post("", summary="Save or update workouts for a day")
def save_workouts(payload: Any = Body(default=None), session: Session = Depends(require_approved)):
    # The first violation is what the client shows; all of them go in `details`.
    request = validate_request(SaveWorkoutsRequest, payload, surface_first=True)
    counts = bulk_upsert_workouts(session.id, request.date, request.workouts)
    return success_envelope(SaveWorkoutsResult(**counts).model_dump())


@router.get("", summary="Workouts for one day")
def fetch_workouts(
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    session: Session = Depends(require_approved),
):
    request = validate_request(FetchWorkoutsRequest, {"date": date})
    rows = get_workouts_for_date(session.id, request.date)
    return success_envelope(to_day_workouts(request.date, rows).model_dump(mode="json"))
