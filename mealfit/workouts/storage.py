# -*- coding: utf-8 -*-
"""Workouts — SQLite storage."""

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
from .models import WORKOUT_TYPE_LABELS, DayWorkouts, WorkoutEntry, WorkoutEntryInput, WorkoutType

logger = logging.getLogger(__name__)


def _clear_conflicting(conn: sqlite3.Connection, user_id: IdentityId, key: str, kinds: Sequence[WorkoutType]) -> int:
    # NO_WORKOUT and real workouts never coexist on one day.
    if WorkoutType.NO_WORKOUT in kinds:
        cur = conn.execute(
            "DELETE FROM workout_entries WHERE user_id = ? AND date = ? AND workout_type != ?",
            (user_id.value, key, WorkoutType.NO_WORKOUT.value),
        )
    else:
        cur = conn.execute(
            "DELETE FROM workout_entries WHERE user_id = ? AND date = ? AND workout_type = ?",
            (user_id.value, key, WorkoutType.NO_WORKOUT.value),
        )
    return cur.rowcount


def bulk_upsert_workouts(
    user_id: IdentityId,
    day: date,
    workouts: Sequence[WorkoutEntryInput],
    *,
    db_path: Path | None = None,
) -> Dict[str, int]:
    """Update-or-insert each workout for (user, day, workout_type) in one transaction."""
    if not workouts:
        return {"modified_count": 0, "inserted_count": 0, "removed_count": 0}

    key = day_key(day)
    modified = 0
    inserted = 0
    try:
        with db_conn(db_path or settings.db_path) as conn:
            removed = _clear_conflicting(conn, user_id, key, [w.workout_type for w in workouts])
            for workout in workouts:
                now = utc_now_iso()
                description = workout.description or ""
                cur = conn.execute(
                    """
                    UPDATE workout_entries
                    SET description = ?, updated_at = ?
                    WHERE user_id = ? AND date = ? AND workout_type = ?
                    """,
                    (description, now, user_id.value, key, workout.workout_type.value),
                )
                if cur.rowcount:
                    modified += cur.rowcount
                    continue
                conn.execute(
                    """
                    INSERT INTO workout_entries (id, user_id, date, workout_type, description, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (str(uuid4()), user_id.value, key, workout.workout_type.value, description, now, now),
                )
                inserted += 1
    except sqlite3.IntegrityError as exc:
        logger.warning("Duplicate workout entry for user=%s date=%s: %s", user_id, key, exc)
        raise DuplicateEntryError("Duplicate workout entry detected") from exc
    except sqlite3.Error as exc:
        logger.exception("Saving workouts failed for user=%s date=%s", user_id, key)
        raise DatabaseError("Failed to save workouts. Please try again.") from exc

    if removed:
        logger.info("Replaced %d conflicting workout row(s) for user=%s date=%s", removed, user_id, key)
    return {"modified_count": modified, "inserted_count": inserted, "removed_count": removed}


def get_workouts_for_date(user_id: IdentityId, day: date, *, db_path: Path | None = None) -> List[Dict[str, Any]]:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            rows = conn.execute(
                """
                SELECT * FROM workout_entries
                WHERE user_id = ? AND date >= ? AND date <= ?
                ORDER BY created_at ASC, rowid ASC
                """,
                (user_id.value, day_key(day), end_of_day_key(day)),
            ).fetchall()
    except sqlite3.Error as exc:
        logger.exception("Fetching workouts failed for user=%s day=%s", user_id, day)
        raise DatabaseError("Failed to fetch workouts. Please try again.") from exc
    return [dict(r) for r in rows]


def delete_workouts_for_date(user_id: IdentityId, day: date, *, db_path: Path | None = None) -> int:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            cur = conn.execute(
                "DELETE FROM workout_entries WHERE user_id = ? AND date = ?",
                (user_id.value, day_key(day)),
            )
            return cur.rowcount
    except sqlite3.Error as exc:
        logger.exception("Deleting workouts failed for user=%s day=%s", user_id, day)
        raise DatabaseError("Failed to delete workouts. Please try again.") from exc


def to_day_workouts(day: date, rows: List[Dict[str, Any]]) -> DayWorkouts:
    entries = []
    for row in rows:
        kind = WorkoutType(row["workout_type"])
        entries.append(
            WorkoutEntry(
                workout_type=kind,
                label=WORKOUT_TYPE_LABELS[kind],
                description=row.get("description") or None,
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
        )
    return DayWorkouts(date=day_key(day), workouts=entries)
