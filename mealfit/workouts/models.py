# -*- coding: utf-8 -*-
"""Workouts — Pydantic models and request validation rules."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from ..dates import parse_strict_day

MAX_WORKOUTS_PER_SAVE = 10
MAX_DESCRIPTION_LENGTH = 500


class WorkoutType(str, Enum):
    WALKING = "WALKING"
    YOGA = "YOGA"
    CYCLING = "CYCLING"
    GYM = "GYM"
    WEIGHT_LIFTING_HOME = "WEIGHT_LIFTING_HOME"
    DANCE_ZUMBA = "DANCE_ZUMBA"
    NO_WORKOUT = "NO_WORKOUT"
    OTHER = "OTHER"


WORKOUT_TYPE_LABELS: Dict[WorkoutType, str] = {
    WorkoutType.WALKING: "Walking (>6000 steps)",
    WorkoutType.YOGA: "Yoga",
    WorkoutType.CYCLING: "Cycling",
    WorkoutType.GYM: "Gym",
    WorkoutType.WEIGHT_LIFTING_HOME: "Weight Lifting At Home",
    WorkoutType.DANCE_ZUMBA: "Dance / Zumba",
    WorkoutType.NO_WORKOUT: "Could not workout today",
    WorkoutType.OTHER: "Other",
}

_WORKOUT_TYPE_VALUES = tuple(w.value for w in WorkoutType)


def _strict_day(value: Any) -> dt.date:
    try:
        return parse_strict_day(value)
    except ValueError:
        raise PydanticCustomError("date_format", "Invalid date format. Expected YYYY-MM-DD") from None


class WorkoutEntryInput(BaseModel):
    workout_type: WorkoutType
    description: Optional[str] = None

    @field_validator("workout_type", mode="before")
    @classmethod
    def _check_workout_type(cls, value: Any) -> Any:
        if not isinstance(value, WorkoutType) and value not in _WORKOUT_TYPE_VALUES:
            raise PydanticCustomError("enum", "Invalid workout type")
        return value

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if len(value) > MAX_DESCRIPTION_LENGTH:
            raise PydanticCustomError(
                "string_too_long",
                "Description must be less than {max_length} characters",
                {"max_length": MAX_DESCRIPTION_LENGTH},
            )
        return value.strip()


class SaveWorkoutsRequest(BaseModel):
    date: dt.date
    workouts: List[WorkoutEntryInput]

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date:
        return _strict_day(value)

    @field_validator("workouts", mode="before")
    @classmethod
    def _check_count(cls, value: Any) -> Any:
        if isinstance(value, list):
            if len(value) < 1:
                raise PydanticCustomError("too_short", "At least one workout is required")
            if len(value) > MAX_WORKOUTS_PER_SAVE:
                raise PydanticCustomError(
                    "too_long",
                    "Cannot save more than {max_items} workouts at once",
                    {"max_items": MAX_WORKOUTS_PER_SAVE},
                )
        return value

    @field_validator("workouts")
    @classmethod
    def _check_combination(cls, value: List[WorkoutEntryInput]) -> List[WorkoutEntryInput]:
        kinds = [w.workout_type for w in value]
        if len(kinds) != len(set(kinds)):
            raise PydanticCustomError("duplicate", "Duplicate workout types are not allowed")
        if WorkoutType.NO_WORKOUT in kinds and len(kinds) > 1:
            raise PydanticCustomError("exclusive", "NO_WORKOUT cannot be combined with other workout types")
        return value


class FetchWorkoutsRequest(BaseModel):
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date:
        return _strict_day(value)


class WorkoutEntry(BaseModel):
    workout_type: WorkoutType
    label: str
    description: Optional[str] = None
    created_at: str
    updated_at: str


class DayWorkouts(BaseModel):
    date: str
    workouts: List[WorkoutEntry]


class SaveWorkoutsResult(BaseModel):
    modified_count: int = 0
    inserted_count: int = 0
    removed_count: int = 0
    message: str = "Workouts saved successfully"
