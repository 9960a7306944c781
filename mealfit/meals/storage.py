# -*- coding: utf-8 -*-
"""Meals — SQLite storage.

Rows are keyed by (user_id, date, meal_type); `date` is the UTC midnight of the
calendar day (see `mealfit.dates`).
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Sequence
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..dates import day_key, end_of_day_key, utc_now_iso
from ..errors import DatabaseError, DuplicateEntryError
from ..identifiers import IdentityId
from .models import DayMeals, MealEntry, MealEntryInput, MealRangeItem, MealType

logger = logging.getLogger(__name__)


def bulk_upsert_meals(
    user_id: IdentityId,
    day: date,
    meals: Sequence[MealEntryInput],
    *,
    db_path: Path | None = None,
) -> Dict[str, int]:
    """Update-or-insert each meal for (user, day, meal_type) in one transaction.

    Meal types not mentioned are left alone. Returns modified/inserted counts.
    """
    if not meals:
        return {"modified_count": 0, "inserted_count": 0}

    key = day_key(day)
    modified = 0
    inserted = 0
    try:
        with db_conn(db_path or settings.db_path) as conn:
            for meal in meals:
                now = utc_now_iso()
                description = meal.food_description or ""
                cur = conn.execute(
                    """
                    UPDATE meal_entries
                    SET source = ?, food_description = ?, updated_at = ?
                    WHERE user_id = ? AND date = ? AND meal_type = ?
                    """,
                    (meal.source.value, description, now, user_id.value, key, meal.meal_type.value),
                )
                if cur.rowcount:
                    modified += cur.rowcount
                    continue
                conn.execute(
                    """
                    INSERT INTO meal_entries (id, user_id, date, meal_type, source, food_description, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (str(uuid4()), user_id.value, key, meal.meal_type.value, meal.source.value, description, now, now),
                )
                inserted += 1
    except sqlite3.IntegrityError as exc:
        logger.warning("Duplicate meal entry for user=%s date=%s: %s", user_id, key, exc)
        raise DuplicateEntryError("Duplicate meal entry detected") from exc
    except sqlite3.Error as exc:
        logger.exception("Saving meals failed for user=%s date=%s", user_id, key)
        raise DatabaseError("Failed to save meals. Please try again.") from exc

    return {"modified_count": modified, "inserted_count": inserted}


def _rows_between(conn: sqlite3.Connection, user_id: IdentityId, start: date, end: date) -> List[sqlite3.Row]:
    return conn.execute(
        """
        SELECT * FROM meal_entries
        WHERE user_id = ? AND date >= ? AND date <= ?
        ORDER BY date ASC, created_at ASC, rowid ASC
        """,
        (user_id.value, day_key(start), end_of_day_key(end)),
    ).fetchall()


def get_meals_for_date(user_id: IdentityId, day: date, *, db_path: Path | None = None) -> List[Dict[str, Any]]:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            rows = _rows_between(conn, user_id, day, day)
    except sqlite3.Error as exc:
        logger.exception("Fetching meals failed for user=%s day=%s", user_id, day)
        raise DatabaseError("Failed to fetch meals. Please try again.") from exc
    return [dict(r) for r in rows]


def get_meals_for_range(
    user_id: IdentityId,
    start: date,
    end: date,
    *,
    db_path: Path | None = None,
) -> List[Dict[str, Any]]:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            rows = _rows_between(conn, user_id, start, end)
    except sqlite3.Error as exc:
        logger.exception("Fetching meals failed for user=%s range=%s..%s", user_id, start, end)
        raise DatabaseError("Failed to fetch meals. Please try again.") from exc
    return [dict(r) for r in rows]


def delete_meals_for_date(user_id: IdentityId, day: date, *, db_path: Path | None = None) -> int:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            cur = conn.execute(
                "DELETE FROM meal_entries WHERE user_id = ? AND date = ?",
                (user_id.value, day_key(day)),
            )
            return cur.rowcount
    except sqlite3.Error as exc:
        logger.exception("Deleting meals failed for user=%s day=%s", user_id, day)
        raise DatabaseError("Failed to delete meals. Please try again.") from exc


def group_by_meal_type(day: date, rows: List[Dict[str, Any]]) -> DayMeals:
    """Fixed-shape view: every meal type is present, missing ones map to None."""
    grouped: Dict[MealType, MealEntry | None] = {m: None for m in MealType}
    for row in rows:
        grouped[MealType(row["meal_type"])] = MealEntry(
            meal_type=row["meal_type"],
            source=row["source"],
            food_description=row.get("food_description") or None,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
    return DayMeals(date=day_key(day), meals=grouped)


def to_range_items(rows: List[Dict[str, Any]]) -> List[MealRangeItem]:
    return [
        MealRangeItem(
            date=row["date"],
            meal_type=row["meal_type"],
            source=row["source"],
            food_description=row.get("food_description") or None,
        )
        for row in rows
    ]
