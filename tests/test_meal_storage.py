# -*- coding: utf-8 -*-

from __future__ import annotations

import sqlite3
import unittest
from datetime import date
from types import SimpleNamespace
from unittest import mock

from mealfit.app_db import db_conn
from mealfit.errors import DatabaseError, DuplicateEntryError
from mealfit.meals.models import MealEntryInput, MealSource, MealType
from mealfit.meals.storage import (
    bulk_upsert_meals,
    delete_meals_for_date,
    get_meals_for_date,
    get_meals_for_range,
    group_by_meal_type,
    to_range_items,
)

from tests._support import StoreTestCase

DAY = date(2026, 1, 5)


def meal(meal_type: MealType, source: MealSource, text: str | None = None) -> MealEntryInput:
    return MealEntryInput(meal_type=meal_type, source=source, food_description=text)


class TestMealStorage(StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.u1 = self.make_identity("u1@example.com")

    def _count_rows(self) -> int:
        with db_conn(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM meal_entries").fetchone()[0]

    def test_insert_then_update_same_key(self) -> None:
        first = bulk_upsert_meals(self.u1, DAY, [meal(MealType.BREAKFAST, MealSource.HOME, "oats")], db_path=self.db_path)
        self.assertEqual(first, {"modified_count": 0, "inserted_count": 1})

        second = bulk_upsert_meals(self.u1, DAY, [meal(MealType.BREAKFAST, MealSource.OUTSIDE, "eggs")], db_path=self.db_path)
        self.assertEqual(second, {"modified_count": 1, "inserted_count": 0})
        self.assertEqual(self._count_rows(), 1)

        view = group_by_meal_type(DAY, get_meals_for_date(self.u1, DAY, db_path=self.db_path))
        self.assertEqual(view.date, "2026-01-05T00:00:00+00:00")
        breakfast = view.meals[MealType.BREAKFAST]
        assert breakfast is not None
        self.assertEqual(breakfast.source, MealSource.OUTSIDE)
        self.assertEqual(breakfast.food_description, "eggs")
        for other in (MealType.LUNCH, MealType.EVENING_SNACKS, MealType.DINNER):
            self.assertIsNone(view.meals[other])

    def test_update_keeps_created_at_and_untouched_categories(self) -> None:
        bulk_upsert_meals(
            self.u1,
            DAY,
            [meal(MealType.BREAKFAST, MealSource.HOME, "oats"), meal(MealType.DINNER, MealSource.HOME, "dal")],
            db_path=self.db_path,
        )
        before = {r["meal_type"]: r for r in get_meals_for_date(self.u1, DAY, db_path=self.db_path)}

        bulk_upsert_meals(self.u1, DAY, [meal(MealType.BREAKFAST, MealSource.FASTING)], db_path=self.db_path)
        after = {r["meal_type"]: r for r in get_meals_for_date(self.u1, DAY, db_path=self.db_path)}

        self.assertEqual(after["BREAKFAST"]["created_at"], before["BREAKFAST"]["created_at"])
        self.assertGreaterEqual(after["BREAKFAST"]["updated_at"], before["BREAKFAST"]["updated_at"])
        self.assertEqual(after["BREAKFAST"]["food_description"], "")
        self.assertEqual(after["DINNER"], before["DINNER"])

    def test_fetch_returns_exactly_saved_categories(self) -> None:
        kinds = [MealType.LUNCH, MealType.EVENING_SNACKS]
        result = bulk_upsert_meals(self.u1, DAY, [meal(k, MealSource.HOME) for k in kinds], db_path=self.db_path)
        self.assertEqual(result["inserted_count"], 2)

        view = group_by_meal_type(DAY, get_meals_for_date(self.u1, DAY, db_path=self.db_path))
        populated = {k for k, v in view.meals.items() if v is not None}
        self.assertEqual(populated, set(kinds))
        self.assertEqual(set(view.meals), set(MealType))

    def test_rows_are_scoped_by_identity_and_day(self) -> None:
        u2 = self.make_identity("u2@example.com")
        bulk_upsert_meals(self.u1, DAY, [meal(MealType.LUNCH, MealSource.HOME)], db_path=self.db_path)
        bulk_upsert_meals(u2, DAY, [meal(MealType.LUNCH, MealSource.OUTSIDE)], db_path=self.db_path)
        bulk_upsert_meals(self.u1, date(2026, 1, 6), [meal(MealType.LUNCH, MealSource.FASTING)], db_path=self.db_path)

        rows = get_meals_for_date(self.u1, DAY, db_path=self.db_path)
        self.assertEqual([(r["meal_type"], r["source"]) for r in rows], [("LUNCH", "HOME")])

    def test_range_is_inclusive_and_ordered(self) -> None:
        for offset, kind in ((3, MealType.DINNER), (1, MealType.LUNCH), (0, MealType.BREAKFAST)):
            bulk_upsert_meals(self.u1, date(2026, 1, 5 + offset), [meal(kind, MealSource.HOME)], db_path=self.db_path)

        rows = get_meals_for_range(self.u1, date(2026, 1, 5), date(2026, 1, 6), db_path=self.db_path)
        items = to_range_items(rows)
        self.assertEqual(
            [(i.date, i.meal_type) for i in items],
            [("2026-01-05T00:00:00+00:00", MealType.BREAKFAST), ("2026-01-06T00:00:00+00:00", MealType.LUNCH)],
        )

    def test_delete_for_date(self) -> None:
        bulk_upsert_meals(
            self.u1, DAY, [meal(MealType.LUNCH, MealSource.HOME), meal(MealType.DINNER, MealSource.HOME)], db_path=self.db_path
        )
        self.assertEqual(delete_meals_for_date(self.u1, DAY, db_path=self.db_path), 2)
        self.assertEqual(get_meals_for_date(self.u1, DAY, db_path=self.db_path), [])

    def test_empty_batch_touches_nothing(self) -> None:
        self.assertEqual(bulk_upsert_meals(self.u1, DAY, [], db_path=self.db_path), {"modified_count": 0, "inserted_count": 0})
        self.assertEqual(self._count_rows(), 0)

    def test_unique_constraint_is_enforced_by_the_table(self) -> None:
        bulk_upsert_meals(self.u1, DAY, [meal(MealType.LUNCH, MealSource.HOME)], db_path=self.db_path)
        with self.assertRaises(sqlite3.IntegrityError):
            with db_conn(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO meal_entries (id, user_id, date, meal_type, source, food_description, created_at, updated_at)
                    VALUES ('x', ?, '2026-01-05T00:00:00+00:00', 'LUNCH', 'HOME', '', 'now', 'now')
                    """,
                    (self.u1.value,),
                )

    def test_integrity_error_maps_to_duplicate(self) -> None:
        with mock.patch("mealfit.meals.storage.db_conn", side_effect=sqlite3.IntegrityError("UNIQUE constraint failed")):
            with self.assertRaises(DuplicateEntryError) as ctx:
                bulk_upsert_meals(self.u1, DAY, [meal(MealType.LUNCH, MealSource.HOME)], db_path=self.db_path)
        self.assertEqual(ctx.exception.message, "Duplicate meal entry detected")

    def test_other_database_errors_are_masked(self) -> None:
        with mock.patch("mealfit.meals.storage.db_conn", side_effect=sqlite3.OperationalError("disk I/O error")):
            with self.assertLogs("mealfit.meals.storage", level="ERROR"):
                with self.assertRaises(DatabaseError) as ctx:
                    get_meals_for_date(self.u1, DAY, db_path=self.db_path)
        self.assertNotIn("disk", ctx.exception.message)

    def test_same_meal_type_twice_in_one_batch_last_wins(self) -> None:
        counts = bulk_upsert_meals(
            self.u1,
            DAY,
            [meal(MealType.LUNCH, MealSource.HOME, "dal"), meal(MealType.LUNCH, MealSource.OUTSIDE, "pizza")],
            db_path=self.db_path,
        )
        self.assertEqual(counts, {"modified_count": 1, "inserted_count": 1})
        rows = get_meals_for_date(self.u1, DAY, db_path=self.db_path)
        self.assertEqual([(r["meal_type"], r["source"], r["food_description"]) for r in rows], [("LUNCH", "OUTSIDE", "pizza")])

    def test_failed_batch_applies_nothing(self) -> None:
        bulk_upsert_meals(self.u1, DAY, [meal(MealType.LUNCH, MealSource.HOME, "rice")], db_path=self.db_path)
        # sqlite3 cannot bind a list, so the second statement fails after the first one ran.
        unbindable = MealEntryInput.model_construct(
            meal_type=MealType.DINNER, source=SimpleNamespace(value=["HOME"]), food_description=None
        )
        with self.assertLogs("mealfit.meals.storage", level="ERROR"):
            with self.assertRaises(DatabaseError) as ctx:
                bulk_upsert_meals(
                    self.u1, DAY, [meal(MealType.LUNCH, MealSource.OUTSIDE, "noodles"), unbindable], db_path=self.db_path
                )
        self.assertEqual(ctx.exception.message, "Failed to save meals. Please try again.")
        self.assertIsInstance(ctx.exception.__cause__, sqlite3.Error)
        rows = get_meals_for_date(self.u1, DAY, db_path=self.db_path)
        self.assertEqual([(r["meal_type"], r["source"], r["food_description"]) for r in rows], [("LUNCH", "HOME", "rice")])


if __name__ == "__main__":
    unittest.main()
