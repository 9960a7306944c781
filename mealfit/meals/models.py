# -*- coding: utf-8 -*-
"""Meals — Pydantic models and request validation rules."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator, model_validator
from pydantic_core import PydanticCustomError

from ..dates import parse_calendar_date

MAX_MEALS_PER_SAVE = 10
MAX_DESCRIPTION_LENGTH = 500


class MealType(str, Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    EVENING_SNACKS = "EVENING_SNACKS"
    DINNER = "DINNER"


class MealSource(str, Enum):
    HOME = "HOME"
    OUTSIDE = "OUTSIDE"
    FASTING = "FASTING"


_MEAL_TYPE_VALUES = tuple(m.value for m in MealType)
_SOURCE_VALUES = tuple(s.value for s in MealSource)


def _calendar_date(value: Any) -> dt.date:
    try:
        return parse_calendar_date(value)
    except ValueError:
        raise PydanticCustomError("date_format", "Invalid date format") from None


class MealEntryInput(BaseModel):
    meal_type: MealType
    source: MealSource
    food_description: Optional[str] = None

    @field_validator("meal_type", mode="before")
    @classmethod
    def _check_meal_type(cls, value: Any) -> Any:
        if not isinstance(value, MealType) and value not in _MEAL_TYPE_VALUES:
            raise PydanticCustomError("enum", "Invalid meal type")
        return value

    @field_validator("source", mode="before")
    @classmethod
    def _check_source(cls, value: Any) -> Any:
        if not isinstance(value, MealSource) and value not in _SOURCE_VALUES:
            raise PydanticCustomError("enum", "Invalid source")
        return value

    @field_validator("food_description")
    @classmethod
    def _check_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if len(value) > MAX_DESCRIPTION_LENGTH:
            raise PydanticCustomError(
                "string_too_long",
                "Food description must be less than {max_length} characters",
                {"max_length": MAX_DESCRIPTION_LENGTH},
            )
        return value.strip()


class SaveMealsRequest(BaseModel):
    date: dt.date
    meals: List[MealEntryInput]

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date:
        return _calendar_date(value)

    @field_validator("meals", mode="before")
    @classmethod
    def _check_count(cls, value: Any) -> Any:
        if isinstance(value, list):
            if len(value) < 1:
                raise PydanticCustomError("too_short", "At least one meal is required")
            if len(value) > MAX_MEALS_PER_SAVE:
                raise PydanticCustomError(
                    "too_long",
                    "Cannot save more than {max_items} meals at once",
                    {"max_items": MAX_MEALS_PER_SAVE},
                )
        return value


class FetchMealsRequest(BaseModel):
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date:
        return _calendar_date(value)


class FetchMealsRangeRequest(BaseModel):
    start: dt.date
    end: dt.date

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date:
        return _calendar_date(value)

    @model_validator(mode="after")
    def _check_order(self) -> "FetchMealsRangeRequest":
        if self.start > self.end:
            raise PydanticCustomError("date_range", "Start date must be before end date")
        return self


class MealEntry(BaseModel):
    meal_type: MealType
    source: MealSource
    food_description: Optional[str] = None
    created_at: str
    updated_at: str


class DayMeals(BaseModel):
    date: str
    meals: Dict[MealType, Optional[MealEntry]]


class MealRangeItem(BaseModel):
    date: str
    meal_type: MealType
    source: MealSource
    food_description: Optional[str] = None


class SaveMealsResult(BaseModel):
    modified_count: int = 0
    inserted_count: int = 0
    message: str = "Meals saved successfully"
