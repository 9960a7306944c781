# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from ..auth.security import Session, require_approved
from ..errors import success_envelope
from ..validation import validate_request
from .models import FetchMealsRangeRequest, FetchMealsRequest, SaveMealsRequest, SaveMealsResult
from .storage import bulk_upsert_meals, get_meals_for_date, get_meals_for_range, group_by_meal_type, to_range_items

router = APIRouter(prefix="/api/meals", tags=["Meals"])


@router.post("", summary="Save or update meals for a day")
def save_meals(payload: Any = Body(default=None), session: Session = Depends(require_approved)):
    request = validate_request(SaveMealsRequest, payload)
    counts = bulk_upsert_meals(session.id, request.date, request.meals)
    return success_envelope(SaveMealsResult(**counts).model_dump())


@router.get("", summary="Meals for one day, keyed by meal type")
def fetch_meals(
    date: Optional[str] = Query(default=None, description="ISO date, e.g. 2026-01-05"),
    session: Session = Depends(require_approved),
):
    request = validate_request(FetchMealsRequest, {"date": date})
    rows = get_meals_for_date(session.id, request.date)
    return success_envelope(group_by_meal_type(request.date, rows).model_dump(mode="json"))


@router.get("/range", summary="Meals across a date range")
def fetch_meals_range(
    start: Optional[str] = Query(default=None, description="ISO date"),
    end: Optional[str] = Query(default=None, description="ISO date"),
    session: Session = Depends(require_approved),
):
    request = validate_request(FetchMealsRangeRequest, {"start": start, "end": end}, surface_first=True)
    rows = get_meals_for_range(session.id, request.start, request.end)
    return success_envelope([item.model_dump(mode="json") for item in to_range_items(rows)])
